"""
Unit tests for invoice PDF rendering.
Only the HTML stage is exercised; WeasyPrint itself is replaced where needed.
"""

import sys
import types

import pytest

from app.domain.models.base import UpstreamRenderError
from app.domain.models.user import AuthenticatedUser
from app.infrastructure.pdf.pdf_service import PDFService

from conftest import make_invoice


class TestPDFService:
    """Test cases for PDFService."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PDFService()
        self.user = AuthenticatedUser("user-1", name="Grace Studio", email="grace@example.com")
        self.invoice = make_invoice(invoice_number="INV-2026-0042", notes="Thanks & regards")

    def test_render_html_contains_invoice(self):
        """Test the layout shows the number, lines, totals and issuer."""
        html_content = self.service.render_html(self.invoice, self.user)

        assert "INV-2026-0042" in html_content
        assert "Design" in html_content
        assert "$200.00" in html_content
        assert "$275.00" in html_content
        assert "10%" in html_content
        assert "Grace Studio" in html_content
        assert "PENDING" in html_content

    def test_render_html_escapes_notes(self):
        """Test free text is escaped."""
        html_content = self.service.render_html(self.invoice, self.user)
        assert "Thanks &amp; regards" in html_content

    def test_generate_pdf(self, monkeypatch):
        """Test the rendered HTML is handed to WeasyPrint."""
        rendered = {}

        class FakeHTML:
            def __init__(self, string, base_url):
                rendered["html"] = string

            def write_pdf(self):
                return b"%PDF-1.7"

        monkeypatch.setitem(sys.modules, "weasyprint", types.SimpleNamespace(HTML=FakeHTML))

        pdf_bytes = self.service.generate_invoice_pdf(self.invoice, self.user)

        assert pdf_bytes == b"%PDF-1.7"
        assert "INV-2026-0042" in rendered["html"]

    def test_generate_pdf_failure(self, monkeypatch):
        """Test WeasyPrint errors surface as UpstreamRenderError."""
        class BrokenHTML:
            def __init__(self, string, base_url):
                raise OSError("cairo not found")

        monkeypatch.setitem(sys.modules, "weasyprint", types.SimpleNamespace(HTML=BrokenHTML))

        with pytest.raises(UpstreamRenderError, match="INV-2026-0042"):
            self.service.generate_invoice_pdf(self.invoice, self.user)
