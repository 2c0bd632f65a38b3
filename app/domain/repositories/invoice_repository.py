"""
Invoice repository interface.
Defines the contract for invoice data persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from app.domain.models.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice aggregate.
    Invoices are addressed by invoice number and owner.
    """

    @abstractmethod
    def save(self, invoice: Invoice) -> Invoice:
        """
        Save an invoice entity.

        Raises:
            InvoiceNumberConflictError: If a new invoice's number is already taken
            ConcurrentModificationError: If the stored version moved on
        """
        pass

    @abstractmethod
    def find_by_number(self, invoice_number: str, owner_id: str) -> Optional[Invoice]:
        """
        Find an owned invoice by number. Returns None if not found.
        """
        pass

    @abstractmethod
    def find_by_owner_id(
        self,
        owner_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None
    ) -> List[Invoice]:
        """
        List an owner's invoices, newest first.
        ``search`` matches number, client name or company name, case-insensitively.
        """
        pass

    @abstractmethod
    def delete(self, invoice_number: str, owner_id: str) -> bool:
        """
        Delete an owned invoice. Returns False if there was nothing to delete.
        """
        pass

    @abstractmethod
    def mark_overdue(self, now: datetime) -> int:
        """
        Move every pending invoice whose due date is before ``now`` to overdue
        in a single statement. Returns the number of invoices changed.
        """
        pass
