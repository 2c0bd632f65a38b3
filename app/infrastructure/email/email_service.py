"""
Email service for quote and invoice notifications.
Handles SMTP connections, template rendering, and delivery.
"""

import asyncio
from collections import deque
import smtplib
import logging
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Deque, Dict, Optional

from app.config import Settings, settings as default_settings
from app.domain.models.base import DownstreamNotificationFailure, utcnow
from app.domain.models.client import Client
from app.domain.models.invoice import Invoice
from app.domain.models.quote import Quote
from app.domain.services.notification_service import NotificationDispatcher
from .template_loader import EmailTemplateLoader


logger = logging.getLogger(__name__)

SENT_EMAIL_HISTORY = 100


@dataclass
class EmailMessage:
    """Email message data."""
    to: str
    subject: str
    template: str
    context: Dict[str, Any]


class EmailService(NotificationDispatcher):
    """Sends notifications over SMTP, or logs them when SMTP is not configured."""

    def __init__(self, settings: Optional[Settings] = None, template_loader: Optional[EmailTemplateLoader] = None):
        settings = settings or default_settings
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.smtp_use_tls = settings.smtp_use_tls
        self.from_name = settings.email_from_name
        self.from_address = settings.email_from_address
        self.company_name = settings.company_name
        self.template_loader = template_loader or EmailTemplateLoader()
        # Most recent logged emails, for inspection in development
        self.sent_emails: Deque[Dict[str, Any]] = deque(maxlen=SENT_EMAIL_HISTORY)

    async def send_quote_notification(self, client: Client, quote: Quote) -> None:
        """Send a new quote to the client."""
        message = EmailMessage(
            to=client.email,
            subject=f"Quote for {client.company_name}",
            template="quote_notification",
            context={
                "client": client,
                "quote": quote,
                "company_name": self.company_name
            }
        )
        await self.send_email(message)

    async def send_invoice_notification(self, invoice: Invoice) -> None:
        """Send an invoice to its billing address."""
        message = EmailMessage(
            to=invoice.email,
            subject=f"Invoice {invoice.invoice_number} from {self.company_name}",
            template="invoice_notification",
            context={
                "invoice": invoice,
                "tax_percent": f"{invoice.tax_rate * 100:g}",
                "company_name": self.company_name
            }
        )
        await self.send_email(message)

    async def send_email(self, message: EmailMessage) -> None:
        """
        Render and deliver a message.

        Raises:
            DownstreamNotificationFailure: If rendering or delivery fails
        """
        try:
            html_content, text_content = self.template_loader.render_pair(message.template, message.context)
        except Exception as e:
            raise DownstreamNotificationFailure(f"Failed to render {message.template}: {str(e)}") from e

        if not self._is_smtp_configured():
            logger.warning("SMTP not configured, email will be logged instead")
            self._log_email(message, html_content)
            return

        mime_message = self._create_mime_message(message, html_content, text_content)
        try:
            await asyncio.to_thread(self._send_via_smtp, mime_message, message.to)
        except (smtplib.SMTPException, OSError) as e:
            raise DownstreamNotificationFailure(f"SMTP send failed: {str(e)}") from e

        logger.info(f"Email sent successfully to {message.to}: {message.subject}")

    def _create_mime_message(self, message: EmailMessage, html_content: str, text_content: str) -> MIMEMultipart:
        mime_msg = MIMEMultipart("alternative")
        mime_msg["Subject"] = message.subject
        mime_msg["From"] = f"{self.from_name} <{self.from_address}>"
        mime_msg["To"] = message.to

        if text_content:
            mime_msg.attach(MIMEText(text_content, "plain", "utf-8"))
        mime_msg.attach(MIMEText(html_content, "html", "utf-8"))
        return mime_msg

    def _send_via_smtp(self, mime_message: MIMEMultipart, recipient: str) -> None:
        with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
            if self.smtp_use_tls:
                server.starttls()
            server.login(self.smtp_user, self.smtp_password)
            server.send_message(mime_message, to_addrs=[recipient])

    def _log_email(self, message: EmailMessage, html_content: str) -> None:
        """Log email instead of sending (for development)."""
        self.sent_emails.append({
            "timestamp": utcnow().isoformat(),
            "to": message.to,
            "subject": message.subject,
            "template": message.template,
            "html_preview": html_content[:200],
        })
        logger.info(f"Email logged (SMTP not configured): {message.subject} to {message.to}")

    def _is_smtp_configured(self) -> bool:
        """Check if SMTP is properly configured."""
        return all([
            self.smtp_host,
            self.smtp_user,
            self.smtp_password
        ])


# Singleton instance
_email_service = None


def get_email_service() -> EmailService:
    """Get singleton email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
