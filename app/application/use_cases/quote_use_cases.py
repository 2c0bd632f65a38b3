"""
Quote use cases for the application layer.
A client's quote is created wholesale, has its status fields patched,
and can be turned into an invoice once.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from app.application.use_cases.client_use_cases import ClientUseCase
from app.application.use_cases.invoice_use_cases import CreateInvoiceUseCase
from app.application.dto.client_dto import (
    CreateQuoteRequestDTO, UpdateQuoteStatusRequestDTO, ConvertQuoteRequestDTO
)
from app.domain.models.base import (
    BusinessRuleViolation, ConcurrentModificationError, DomainException, utcnow
)
from app.domain.models.invoice import Invoice, InvoiceLineItem
from app.domain.models.quote import Quote, QuoteStatus
from app.domain.repositories.client_repository import ClientRepository
from app.infrastructure.events.notification_queue import NotificationQueue


logger = logging.getLogger(__name__)


class CreateQuoteUseCase(ClientUseCase):
    """Replace the client's quote and queue the quote email."""

    def __init__(self, client_repository: ClientRepository, notifications: NotificationQueue):
        super().__init__(client_repository)
        self.notifications = notifications

    async def execute(self, owner_id: str, client_id: int, request: CreateQuoteRequestDTO) -> Quote:
        client = self._get_owned_client(owner_id, client_id)

        quote = Quote.create([item.to_domain() for item in request.items])
        client.attach_quote(quote)
        saved_client = self.client_repository.save(client)
        logger.info(f"Quote created for client {client_id}: total {quote.total} cents")

        self._notify(self.notifications.submit_quote_notification, saved_client, saved_client.quote)
        return saved_client.quote


class GetQuoteUseCase(ClientUseCase):
    async def execute(self, owner_id: str, client_id: int) -> Quote:
        return self._get_owned_client(owner_id, client_id).require_quote()


class UpdateQuoteStatusUseCase(ClientUseCase):
    """Patch only the status fields present in the request."""

    async def execute(self, owner_id: str, client_id: int, request: UpdateQuoteStatusRequestDTO) -> Quote:
        client = self._get_owned_client(owner_id, client_id)

        client.update_quote_status(
            status=request.status,
            invoice_generated=request.invoice_generated,
            invoice_id=request.invoice_id
        )
        return self.client_repository.save(client).quote


class ConvertQuoteToInvoiceUseCase(ClientUseCase):
    """
    Approve the client's quote and bill it.

    The quote is marked invoiced before the invoice exists, so of several
    concurrent conversions only one gets past the client's version check.
    The invoice is then created from the client's contact fields and the
    quote items, and its number is recorded on the quote. A failed invoice
    creation gives the quote back.
    """

    def __init__(
        self,
        client_repository: ClientRepository,
        create_invoice: CreateInvoiceUseCase,
        payment_terms_days: int = 30,
        clock: Callable[[], datetime] = utcnow
    ):
        super().__init__(client_repository)
        self.create_invoice = create_invoice
        self.payment_terms_days = payment_terms_days
        self.clock = clock
        self.record_attempts = 3

    async def execute(self, owner_id: str, client_id: int, request: ConvertQuoteRequestDTO) -> Invoice:
        client = self._get_owned_client(owner_id, client_id)
        quote = client.require_quote()

        if quote.invoice_generated:
            raise BusinessRuleViolation(f"Quote for client {client_id} was already invoiced as {quote.invoice_id}")
        if quote.status == QuoteStatus.REJECTED:
            raise BusinessRuleViolation(f"Quote for client {client_id} was rejected")

        previous_status = quote.status
        items = [
            InvoiceLineItem(description=item.name, quantity=item.quantity, price=item.price)
            for item in quote.items
        ]

        # Claim the quote first; the version check lets only one caller through
        client.update_quote_status(status=QuoteStatus.APPROVED.value, invoice_generated=True)
        client = self.client_repository.save(client)

        try:
            invoice = Invoice.create(
                owner_id=owner_id,
                client_name=client.client_name,
                company_name=client.company_name,
                email=client.email,
                phone=client.phone,
                items=items,
                due_date=request.due_date or self.clock() + timedelta(days=self.payment_terms_days),
                tax_rate=self.create_invoice.default_tax_rate,
                notes=request.notes,
                client_id=client.id
            )
            invoice = await self.create_invoice.issue(invoice)
        except Exception:
            self._release_claim(owner_id, client_id, previous_status)
            raise

        self._record_invoice(owner_id, client_id, invoice.invoice_number)
        logger.info(f"Quote for client {client_id} converted to invoice {invoice.invoice_number}")
        return invoice

    def _release_claim(self, owner_id: str, client_id: int, previous_status: QuoteStatus) -> None:
        try:
            client = self._get_owned_client(owner_id, client_id)
            client.update_quote_status(status=previous_status.value, invoice_generated=False)
            self.client_repository.save(client)
        except DomainException as e:
            logger.error(f"Could not release quote claim for client {client_id}: {e.message}")

    def _record_invoice(self, owner_id: str, client_id: int, invoice_number: str) -> None:
        """Store the invoice number on the claimed quote, reloading if the client moved on."""
        for attempt in range(1, self.record_attempts + 1):
            client = self._get_owned_client(owner_id, client_id)
            client.update_quote_status(invoice_id=invoice_number)
            try:
                self.client_repository.save(client)
                return
            except ConcurrentModificationError:
                logger.warning(f"Client {client_id} changed while recording {invoice_number} (attempt {attempt})")

        raise ConcurrentModificationError("Client", client_id)
