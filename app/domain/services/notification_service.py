"""
Notification dispatcher interface.
Sends quote and invoice emails to clients.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.models.client import Client
    from app.domain.models.invoice import Invoice
    from app.domain.models.quote import Quote


class NotificationDispatcher(ABC):
    """
    Outbound notification port.
    Implementations raise DownstreamNotificationFailure when delivery fails.
    """

    @abstractmethod
    async def send_quote_notification(self, client: "Client", quote: "Quote") -> None:
        """
        Notify a client that a new quote is available.
        """
        pass

    @abstractmethod
    async def send_invoice_notification(self, invoice: "Invoice") -> None:
        """
        Send an invoice to the email address on the invoice.
        """
        pass
