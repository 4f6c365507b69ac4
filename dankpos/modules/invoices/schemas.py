from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class InvoiceLine(BaseModel):
    description: str
    price_per_unit: float
    quantity: float
    total: float


class InvoiceCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    invoice_number: str
    date: Optional[str] = None
    company_name: Optional[str] = None
    company_address: Optional[str] = None
    company_tax_id: Optional[str] = None
    client_name: str
    client_address: Optional[str] = None
    client_tax_id: Optional[str] = None
    items_json: List[InvoiceLine]
    subtotal: Optional[float] = None
    vat_rate: Optional[float] = None
    vat_amount: Optional[float] = None
    total_amount: float
    is_tax_included: Optional[bool] = None
    transaction_id: Optional[str] = None
    created_by: Optional[str] = None
    pdf_url: Optional[str] = None
    receiver_name: Optional[str] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    shop_id: Optional[str] = None
