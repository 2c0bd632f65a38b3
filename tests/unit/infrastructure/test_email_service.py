"""
Unit tests for the SMTP email service.
"""

import smtplib

import pytest

from app.config import Settings
from app.domain.models.base import DownstreamNotificationFailure
from app.domain.models.quote import Quote, QuoteItem
from app.infrastructure.email.email_service import SENT_EMAIL_HISTORY, EmailService

from conftest import make_client, make_invoice


class TestEmailService:
    """Test cases for EmailService."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = EmailService(Settings(smtp_host=None, company_name="Acme Studio"))
        self.invoice = make_invoice(invoice_number="INV-2026-0007")

    @pytest.mark.asyncio
    async def test_invoice_notification_logged_without_smtp(self):
        """Test emails are recorded when SMTP is not configured."""
        await self.service.send_invoice_notification(self.invoice)

        assert len(self.service.sent_emails) == 1
        sent = self.service.sent_emails[0]
        assert sent["to"] == "ada@example.com"
        assert sent["subject"] == "Invoice INV-2026-0007 from Acme Studio"
        assert sent["template"] == "invoice_notification"

    @pytest.mark.asyncio
    async def test_quote_notification_logged_without_smtp(self):
        """Test the quote email goes to the client's address."""
        client = make_client()
        quote = Quote.create([QuoteItem("Design", 100000)])

        await self.service.send_quote_notification(client, quote)

        assert self.service.sent_emails[0]["to"] == "ada@example.com"
        assert self.service.sent_emails[0]["subject"] == "Quote for Analytical Engines Ltd"

    def test_invoice_templates_render_amounts(self):
        """Test both invoice bodies show formatted totals."""
        html_content, text_content = self.service.template_loader.render_pair(
            "invoice_notification",
            {"invoice": self.invoice, "tax_percent": "10", "company_name": "Acme Studio"}
        )

        assert "INV-2026-0007" in html_content
        assert "$275.00" in html_content
        assert "Total due: $275.00" in text_content
        assert "Tax (10%): $25.00" in text_content

    def test_templates_escape_html(self):
        """Test client supplied text is escaped in HTML bodies."""
        invoice = make_invoice(client_name="<b>Ada</b>")

        html_content, _ = self.service.template_loader.render_pair(
            "invoice_notification",
            {"invoice": invoice, "tax_percent": "10", "company_name": "Acme Studio"}
        )

        assert "<b>Ada</b>" not in html_content
        assert "&lt;b&gt;Ada&lt;/b&gt;" in html_content

    @pytest.mark.asyncio
    async def test_smtp_failure_raises_downstream_failure(self, monkeypatch):
        """Test SMTP errors surface as DownstreamNotificationFailure."""
        def refuse(*args, **kwargs):
            raise ConnectionRefusedError("connection refused")

        monkeypatch.setattr(smtplib, "SMTP", refuse)
        service = EmailService(Settings(smtp_host="smtp.example.com", smtp_user="user", smtp_password="secret"))

        with pytest.raises(DownstreamNotificationFailure, match="SMTP send failed"):
            await service.send_invoice_notification(self.invoice)

    @pytest.mark.asyncio
    async def test_smtp_delivery(self, monkeypatch):
        """Test a configured server receives a multipart message."""
        sent = []

        class FakeSMTP:
            def __init__(self, host, port, timeout):
                self.host = host

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def starttls(self):
                sent.append("starttls")

            def login(self, user, password):
                sent.append(("login", user))

            def send_message(self, message, to_addrs):
                sent.append((message["Subject"], to_addrs))

        monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
        service = EmailService(Settings(smtp_host="smtp.example.com", smtp_user="user", smtp_password="secret"))

        await service.send_invoice_notification(self.invoice)

        assert sent[0] == "starttls"
        assert sent[1] == ("login", "user")
        assert sent[2][1] == ["ada@example.com"]
        assert len(service.sent_emails) == 0

    @pytest.mark.asyncio
    async def test_logged_history_is_bounded(self):
        """Test only the most recent logged emails are kept."""
        for number in range(SENT_EMAIL_HISTORY + 5):
            self.invoice.invoice_number = f"INV-2026-{number + 1:04d}"
            await self.service.send_invoice_notification(self.invoice)

        assert len(self.service.sent_emails) == SENT_EMAIL_HISTORY
        assert self.service.sent_emails[-1]["subject"] == (
            f"Invoice INV-2026-{SENT_EMAIL_HISTORY + 5:04d} from Acme Studio"
        )
