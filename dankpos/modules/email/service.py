import smtplib
import ssl
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.mime.application import MIMEApplication
from typing import Any, Dict, List, Optional, Tuple
from pathlib import Path
import logging
from jinja2 import Environment, FileSystemLoader, select_autoescape
from dankpos.core.config import Settings, settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

# (filename, content, subtype) e.g. ("Invoice_1.pdf", b"...", "pdf")
Attachment = Tuple[str, bytes, str]


class EmailService:
    """
    Email delivery over SMTP with Jinja2 templates.
    """

    def __init__(self, config: Settings = settings):
        self.config = config
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    @property
    def sender(self) -> str:
        return f"{self.config.EMAIL_FROM_NAME} <{self.config.EMAIL_FROM}>"

    def _create_smtp_connection(self) -> smtplib.SMTP:
        """Authenticated connection; STARTTLS when EMAIL_USE_TLS, implicit SSL otherwise (Resend on 465)."""
        config = self.config
        tls_context = ssl.create_default_context()
        try:
            if config.EMAIL_USE_TLS:
                server = smtplib.SMTP(config.EMAIL_SMTP_SERVER, config.EMAIL_SMTP_PORT)
                server.starttls(context=tls_context)
            else:
                server = smtplib.SMTP_SSL(config.EMAIL_SMTP_SERVER, config.EMAIL_SMTP_PORT, context=tls_context)
            server.login(config.EMAIL_USERNAME, config.EMAIL_PASSWORD)
        except OSError as e:
            logger.error(f"SMTP connection to {config.EMAIL_SMTP_SERVER} failed: {e}")
            raise
        return server

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        template = self.jinja_env.get_template(template_name)
        return template.render(**context)

    def build_message(
        self,
        to_emails: List[str],
        subject: str,
        html_content: str,
        attachments: Optional[List[Attachment]] = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart('mixed')
        msg['Subject'] = subject
        msg["From"] = self.sender
        msg['To'] = ', '.join(to_emails)
        msg.attach(MIMEText(html_content, 'html', 'utf-8'))

        for filename, content, subtype in attachments or []:
            part = MIMEApplication(content, _subtype=subtype)
            part.add_header('Content-Disposition', 'attachment', filename=filename)
            msg.attach(part)
        return msg

    def send_email(
        self,
        to_emails: List[str],
        subject: str,
        html_content: str,
        attachments: Optional[List[Attachment]] = None,
    ) -> bool:
        """
        Send one email.

        Returns:
            True when the SMTP server accepted the message, False otherwise
        """
        try:
            msg = self.build_message(to_emails, subject, html_content, attachments)
            with self._create_smtp_connection() as server:
                server.sendmail(self.config.EMAIL_FROM, to_emails, msg.as_string())

            logger.info(f"Email \"{subject}\" sent to {len(to_emails)} recipient(s)")
            return True

        except Exception as e:
            logger.error(f"Error sending email: {str(e)}")
            return False

    def send_invoice_email(
        self,
        recipient: str,
        subject: str,
        message: str,
        invoice_number: str,
        pdf_content: bytes,
    ) -> bool:
        html_content = self.render_template(
            "invoice_email.html",
            {"lines": message.split("\n"), "invoice_number": invoice_number},
        )
        return self.send_email(
            to_emails=[recipient],
            subject=subject,
            html_content=html_content,
            attachments=[(f"Invoice_{invoice_number}.pdf", pdf_content, "pdf")],
        )


# Singleton instance
email_service = EmailService()
