"""
PDF generation service using WeasyPrint and Jinja2.
Renders a single invoice layout to PDF bytes.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import settings
from app.domain.models.base import UpstreamRenderError, utcnow
from app.domain.models.invoice import Invoice
from app.domain.models.user import AuthenticatedUser
from app.domain.services.billing_service import to_major_units
from app.domain.services.document_renderer import DocumentRenderer

logger = logging.getLogger(__name__)


STATUS_COLORS = {
    "pending": "#d97706",
    "paid": "#059669",
    "overdue": "#dc2626",
    "cancelled": "#6b7280",
}


class PDFService(DocumentRenderer):
    """Service for generating invoice PDFs from templates."""

    def __init__(self, templates_dir: Optional[Path] = None, template_name: str = "invoice.html"):
        """Initialize the PDF service with template environment."""
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.template_name = template_name

        # Setup Jinja2 environment
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(['html', 'xml'])
        )

        # Add custom filters
        self._register_filters()

    def _register_filters(self):
        """Register custom Jinja2 filters."""

        def currency_format(cents: int) -> str:
            """Format an amount in cents with symbol and two decimals."""
            return f"${to_major_units(cents):,.2f}"

        def date_format(value) -> str:
            return value.strftime("%Y-%m-%d") if value else ""

        def percentage_format(rate: float) -> str:
            """Format a 0..1 rate as a percentage."""
            return f"{rate * 100:g}%"

        self.env.filters['currency'] = currency_format
        self.env.filters['date'] = date_format
        self.env.filters['percentage'] = percentage_format

    def render_html(self, invoice: Invoice, issuing_user: AuthenticatedUser) -> str:
        """Render the invoice template to HTML."""
        template = self.env.get_template(self.template_name)
        return template.render(**self._prepare_invoice_context(invoice, issuing_user))

    def generate_invoice_pdf(self, invoice: Invoice, issuing_user: AuthenticatedUser) -> bytes:
        """
        Generate PDF for an invoice.

        Args:
            invoice: Invoice domain model
            issuing_user: The user the invoice is issued from

        Returns:
            bytes: The PDF document

        Raises:
            UpstreamRenderError: If the template or WeasyPrint fails
        """
        try:
            html_content = self.render_html(invoice, issuing_user)
            # Imported here so the API can start where the native libraries are missing
            from weasyprint import HTML

            pdf_bytes = HTML(string=html_content, base_url=str(self.templates_dir)).write_pdf()
        except Exception as e:
            logger.error(f"PDF generation failed for invoice {invoice.invoice_number}: {str(e)}")
            raise UpstreamRenderError(f"Could not render invoice {invoice.invoice_number}") from e

        logger.info(f"Rendered PDF for invoice {invoice.invoice_number} ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def _prepare_invoice_context(self, invoice: Invoice, issuing_user: AuthenticatedUser) -> Dict[str, Any]:
        """Prepare template context for invoice rendering."""
        return {
            "invoice": invoice,
            "status_display": invoice.status.value.upper(),
            "status_color": STATUS_COLORS.get(invoice.status.value, "#6b7280"),
            "issuer": {
                "name": issuing_user.display_name,
                "email": issuing_user.email or "",
            },
            "company_name": settings.company_name,
            "now": utcnow(),
        }


# Singleton instance
pdf_service = PDFService()


def get_document_renderer() -> DocumentRenderer:
    """Dependency to get the invoice renderer."""
    return pdf_service
