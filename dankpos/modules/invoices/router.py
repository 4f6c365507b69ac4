from fastapi import APIRouter

from dankpos.dependencies.dbDependencies import tenant_db_dependency
from dankpos.modules.invoices.schemas import InvoiceCreate
from dankpos.modules.invoices.service import InvoiceService

invoices_router = APIRouter(prefix="/invoices", tags=["Invoices"])


@invoices_router.get("")
async def list_invoices(db: tenant_db_dependency):
    return await InvoiceService(db).list_invoices()


@invoices_router.post("")
async def create_invoice(data: InvoiceCreate, db: tenant_db_dependency):
    return await InvoiceService(db).create_invoice(data)


@invoices_router.get("/{invoice_id}")
async def get_invoice(invoice_id: str, db: tenant_db_dependency):
    return await InvoiceService(db).get_invoice(invoice_id)


@invoices_router.delete("/{invoice_id}")
async def delete_invoice(invoice_id: str, db: tenant_db_dependency):
    return await InvoiceService(db).delete_invoice(invoice_id)
