"""
Celery tasks for outgoing email.
"""
import logging
import httpx
from dankpos.core.celery import celery_app
from dankpos.modules.email.service import email_service

logger = logging.getLogger(__name__)

PDF_DOWNLOAD_TIMEOUT = 30.0


def download_pdf(pdf_url: str) -> bytes:
    response = httpx.get(pdf_url, timeout=PDF_DOWNLOAD_TIMEOUT, follow_redirects=True)
    response.raise_for_status()
    return response.content


@celery_app.task(bind=True, max_retries=3)
def send_invoice_email_task(
    self,
    recipient_email: str,
    subject: str,
    message: str,
    pdf_url: str,
    invoice_number: str,
):
    """
    Download the invoice PDF and mail it to the customer.
    """
    try:
        pdf_content = download_pdf(pdf_url)
        success = email_service.send_invoice_email(
            recipient=recipient_email,
            subject=subject,
            message=message,
            invoice_number=invoice_number,
            pdf_content=pdf_content,
        )
        if not success:
            raise Exception("Failed to send invoice email")

        logger.info(f"Invoice {invoice_number} sent to {recipient_email}")
        return {"status": "success", "recipient": recipient_email, "invoice_number": invoice_number}

    except Exception as exc:
        logger.error(f"Invoice {invoice_number} email failed: {str(exc)}")

        # Retry with exponential backoff
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

        return {"status": "failed", "error": str(exc), "recipient": recipient_email}
