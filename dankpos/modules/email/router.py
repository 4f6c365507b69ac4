from fastapi import APIRouter, status
import logging

from dankpos.core.config import settings
from dankpos.core.exceptions import ConfigurationError, ValidationError
from dankpos.modules.email.schemas import SendInvoiceRequest
from dankpos.modules.email.tasks import send_invoice_email_task

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Email"])


@router.post("/send-invoice", status_code=status.HTTP_202_ACCEPTED)
async def send_invoice(request: SendInvoiceRequest):
    """Queue an invoice email with the PDF attached."""
    if request.missing_fields():
        raise ValidationError("Missing required fields")

    if not settings.email_configured:
        raise ConfigurationError("EMAIL_PASSWORD and EMAIL_FROM must be set to send invoices")

    task = send_invoice_email_task.delay(
        recipient_email=request.recipient_email,
        subject=request.subject,
        message=request.message,
        pdf_url=request.pdf_url,
        invoice_number=request.invoice_number,
    )
    logger.info(f"Invoice {request.invoice_number} email queued as task {task.id}")
    return {"message": "Invoice email queued.", "task_id": task.id}
