from typing import Any, Dict, List

from dankpos.core.exceptions import NotFoundError
from dankpos.database.client import DataClient, eq
from dankpos.modules.invoices.schemas import InvoiceCreate


class InvoiceService:
    TABLE = "invoices"

    def __init__(self, db: DataClient):
        self.db = db

    async def list_invoices(self) -> List[Dict[str, Any]]:
        """Newest first."""
        return await self.db.select(self.TABLE, order="created_at.desc")

    async def create_invoice(self, data: InvoiceCreate) -> Dict[str, Any]:
        invoice = data.model_dump(exclude_unset=True)
        rows = await self.db.insert(self.TABLE, invoice)
        return rows[0] if rows else invoice

    async def get_invoice(self, invoice_id: str) -> Dict[str, Any]:
        rows = await self.db.select(self.TABLE, filters={"id": eq(invoice_id)}, limit=1)
        if not rows:
            raise NotFoundError("Invoice not found")
        return rows[0]

    async def delete_invoice(self, invoice_id: str) -> Dict[str, str]:
        await self.db.delete(self.TABLE, filters={"id": eq(invoice_id)})
        return {"message": "Invoice deleted successfully"}
