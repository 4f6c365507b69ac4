"""
Invoice email: the API queues a Celery task, the task downloads the PDF and
mails it over SMTP.
"""
from email import message_from_string
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient
from kombu.exceptions import OperationalError

from dankpos.core.config import Settings, settings
from dankpos.modules.email import router as email_router
from dankpos.modules.email import tasks
from dankpos.modules.email.service import EmailService


REQUEST = {
    "recipientEmail": "jane@example.com",
    "subject": "Your invoice",
    "message": "Hello Jane,\nthanks for your visit <3",
    "pdfUrl": "https://files.example/invoices/INV-0001.pdf",
    "invoiceNumber": "INV-0001",
}


@pytest.fixture
def email_settings(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_PASSWORD", "re_test")
    monkeypatch.setattr(settings, "EMAIL_FROM", "shop@example.com")


@pytest.fixture
def queued(monkeypatch):
    task = MagicMock()
    task.delay.return_value.id = "task-123"
    monkeypatch.setattr(email_router, "send_invoice_email_task", task)
    return task


class TestSendInvoiceRoute:

    def test_queues_task(self, client, email_settings, queued):
        response = client.post("/api/send-invoice", json=REQUEST)

        assert response.status_code == 202
        assert response.json() == {"message": "Invoice email queued.", "task_id": "task-123"}
        queued.delay.assert_called_once_with(
            recipient_email="jane@example.com",
            subject="Your invoice",
            message="Hello Jane,\nthanks for your visit <3",
            pdf_url="https://files.example/invoices/INV-0001.pdf",
            invoice_number="INV-0001",
        )

    def test_missing_fields(self, client, email_settings, queued):
        response = client.post("/api/send-invoice", json={**REQUEST, "pdfUrl": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}
        queued.delay.assert_not_called()

    def test_email_not_configured(self, client, monkeypatch, queued):
        monkeypatch.setattr(settings, "EMAIL_PASSWORD", "")

        response = client.post("/api/send-invoice", json=REQUEST)

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error."}
        queued.delay.assert_not_called()

    def test_broker_down_returns_json_error(self, backend, email_settings, queued):
        from dankpos.main import app

        queued.delay.side_effect = OperationalError("Error 111 connecting to redis:6379. Connection refused.")
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/api/send-invoice", json=REQUEST)

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"error": "An unexpected error occurred"}


class TestSendInvoiceTask:

    def test_downloads_and_sends(self, monkeypatch):
        monkeypatch.setattr(tasks, "download_pdf", lambda url: b"%PDF-1.4")
        send = MagicMock(return_value=True)
        monkeypatch.setattr(tasks.email_service, "send_invoice_email", send)

        result = tasks.send_invoice_email_task.run(
            recipient_email="jane@example.com",
            subject="Your invoice",
            message="Hello",
            pdf_url="https://files.example/x.pdf",
            invoice_number="INV-0001",
        )

        assert result["status"] == "success"
        send.assert_called_once_with(
            recipient="jane@example.com",
            subject="Your invoice",
            message="Hello",
            invoice_number="INV-0001",
            pdf_content=b"%PDF-1.4",
        )

    def test_download_failure_is_retried(self, monkeypatch):
        def fail(url):
            raise httpx.ConnectError("unreachable")

        class Retried(Exception):
            pass

        retry = MagicMock(side_effect=Retried())
        monkeypatch.setattr(tasks, "download_pdf", fail)
        monkeypatch.setattr(tasks.send_invoice_email_task, "retry", retry)

        with pytest.raises(Retried):
            tasks.send_invoice_email_task.run(
                recipient_email="jane@example.com",
                subject="Your invoice",
                message="Hello",
                pdf_url="https://files.example/x.pdf",
                invoice_number="INV-0001",
            )

        assert retry.call_args.kwargs["countdown"] == 60
        assert isinstance(retry.call_args.kwargs["exc"], httpx.ConnectError)


class TestEmailService:

    def test_invoice_template_escapes_and_breaks_lines(self):
        html = EmailService().render_template(
            "invoice_email.html",
            {"lines": ["Hello Jane,", "thanks <3"], "invoice_number": "INV-0001"},
        )

        assert "Hello Jane,<br>thanks &lt;3<br>" in html
        assert "INV-0001" in html

    def test_invoice_message_has_pdf_attachment(self):
        service = EmailService()
        msg = service.build_message(
            ["jane@example.com"], "Your invoice", "<p>hi</p>",
            attachments=[("Invoice_INV-0001.pdf", b"%PDF-1.4", "pdf")],
        )

        parsed = message_from_string(msg.as_string())
        parts = [part for part in parsed.walk() if part.get_filename()]
        assert [part.get_filename() for part in parts] == ["Invoice_INV-0001.pdf"]
        assert parts[0].get_content_type() == "application/pdf"
        assert parts[0].get_payload(decode=True) == b"%PDF-1.4"

    def test_send_email_reports_failure(self, monkeypatch):
        service = EmailService()
        monkeypatch.setattr(service, "_create_smtp_connection", MagicMock(side_effect=OSError("refused")))

        assert service.send_email(["jane@example.com"], "s", "<p>hi</p>") is False

    def test_sender_comes_from_config(self):
        config = Settings(_env_file=None, EMAIL_FROM="shop@example.com", EMAIL_FROM_NAME="Green Corner")

        assert EmailService(config).sender == "Green Corner <shop@example.com>"
