"""
Document renderer interface.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.models.invoice import Invoice
    from app.domain.models.user import AuthenticatedUser


class DocumentRenderer(ABC):
    """Renders invoices to PDF."""

    @abstractmethod
    def generate_invoice_pdf(self, invoice: "Invoice", issuing_user: "AuthenticatedUser") -> bytes:
        """
        Render an invoice as a PDF document.

        Raises:
            UpstreamRenderError: If the document could not be produced
        """
        pass
