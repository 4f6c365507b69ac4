from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class SendInvoiceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipient_email: Optional[str] = Field(default=None, alias="recipientEmail")
    subject: Optional[str] = None
    message: Optional[str] = None
    pdf_url: Optional[str] = Field(default=None, alias="pdfUrl")
    invoice_number: Optional[str] = Field(default=None, alias="invoiceNumber")

    def missing_fields(self) -> bool:
        return not all([self.recipient_email, self.subject, self.message, self.pdf_url, self.invoice_number])
