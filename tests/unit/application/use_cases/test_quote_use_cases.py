"""
Unit tests for quote use cases, including conversion to an invoice.
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, Mock

from app.application.dto.client_dto import (
    ConvertQuoteRequestDTO, CreateQuoteRequestDTO, QuoteItemRequestDTO, UpdateQuoteStatusRequestDTO
)
from app.application.use_cases.invoice_use_cases import CreateInvoiceUseCase
from app.application.use_cases.quote_use_cases import (
    ConvertQuoteToInvoiceUseCase,
    CreateQuoteUseCase,
    GetQuoteUseCase,
    UpdateQuoteStatusUseCase,
)
from app.domain.models.base import (
    BusinessRuleViolation, ConcurrentModificationError, EntityNotFoundError, ValidationError
)
from app.domain.models.invoice import InvoiceStatus
from app.domain.models.quote import QuoteStatus
from app.infrastructure.events.notification_queue import NotificationQueue

from conftest import FakeDispatcher, OTHER_OWNER_ID, OWNER_ID


def quote_request(*items):
    return CreateQuoteRequestDTO(items=[
        QuoteItemRequestDTO(name=name, price=price, quantity=quantity)
        for name, price, quantity in items
    ])


class TestQuoteUseCases:
    """Test cases for creating and updating a client's quote."""

    @pytest.fixture(autouse=True)
    def setup(self, client_repository, client_factory, notification_queue, dispatcher):
        self.repository = client_repository
        self.queue = notification_queue
        self.dispatcher = dispatcher
        self.client = client_repository.save(client_factory())
        self.create = CreateQuoteUseCase(client_repository, notification_queue)

    @pytest.mark.asyncio
    async def test_create_quote(self):
        """Test a 1000 item gives 1000 / 100 / 1100 and a pending quote."""
        quote = await self.create.execute(OWNER_ID, self.client.id, quote_request(("Design", "1000", None)))

        assert quote.subtotal == 100000
        assert quote.tax == 10000
        assert quote.total == 110000
        assert quote.status == QuoteStatus.PENDING
        assert quote.items[0].quantity == 1

        stored = await GetQuoteUseCase(self.repository).execute(OWNER_ID, self.client.id)
        assert stored.total == 110000

    @pytest.mark.asyncio
    async def test_create_quote_notifies(self):
        """Test the quote email is queued for the client."""
        await self.create.execute(OWNER_ID, self.client.id, quote_request(("Design", "10", 1)))
        await self.queue.drain()

        assert len(self.dispatcher.quotes) == 1
        client, quote = self.dispatcher.quotes[0]
        assert client.id == self.client.id
        assert quote.total == 1100

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_quote(self):
        """Test a failing notifier does not undo the quote."""
        queue = NotificationQueue(FakeDispatcher(fail=True))

        await CreateQuoteUseCase(self.repository, queue).execute(
            OWNER_ID, self.client.id, quote_request(("Design", "10", 1))
        )
        await queue.drain()

        assert queue.failed == 1
        assert self.repository.find_by_id(self.client.id, OWNER_ID).quote is not None

    @pytest.mark.asyncio
    async def test_create_quote_without_items(self):
        """Test an empty quote is rejected."""
        with pytest.raises(ValidationError):
            await self.create.execute(OWNER_ID, self.client.id, CreateQuoteRequestDTO())

    @pytest.mark.asyncio
    async def test_new_quote_replaces_old(self):
        """Test a second quote replaces the first wholesale."""
        await self.create.execute(OWNER_ID, self.client.id, quote_request(("Old", "1", 1)))
        await self.create.execute(OWNER_ID, self.client.id, quote_request(("New", "2", 3)))

        quote = await GetQuoteUseCase(self.repository).execute(OWNER_ID, self.client.id)

        assert [item.name for item in quote.items] == ["New"]
        assert quote.subtotal == 600

    @pytest.mark.asyncio
    async def test_get_missing_quote(self):
        """Test a client without a quote has nothing to return."""
        with pytest.raises(EntityNotFoundError):
            await GetQuoteUseCase(self.repository).execute(OWNER_ID, self.client.id)

    @pytest.mark.asyncio
    async def test_create_quote_other_owner(self):
        """Test quotes cannot be attached to another owner's client."""
        with pytest.raises(EntityNotFoundError):
            await self.create.execute(OTHER_OWNER_ID, self.client.id, quote_request(("Design", "1", 1)))

    @pytest.mark.asyncio
    async def test_update_status_partial(self):
        """Test only the supplied status fields change."""
        await self.create.execute(OWNER_ID, self.client.id, quote_request(("Design", "1", 1)))
        use_case = UpdateQuoteStatusUseCase(self.repository)

        quote = await use_case.execute(OWNER_ID, self.client.id, UpdateQuoteStatusRequestDTO(status="rejected"))
        assert quote.status == QuoteStatus.REJECTED
        assert quote.invoice_generated is False

        quote = await use_case.execute(OWNER_ID, self.client.id, UpdateQuoteStatusRequestDTO(invoice_id="X-1"))
        assert quote.status == QuoteStatus.REJECTED
        assert quote.invoice_id == "X-1"


class TestConvertQuoteToInvoiceUseCase:
    """Test cases for billing a quote."""

    @pytest.fixture(autouse=True)
    def setup(self, client_repository, invoice_repository, number_generator, client_factory,
              notification_queue, dispatcher):
        self.clients = client_repository
        self.invoices = invoice_repository
        self.queue = notification_queue
        self.dispatcher = dispatcher
        self.client = client_repository.save(client_factory())
        self.now = datetime(2026, 3, 10, 12, 0)
        create_invoice = CreateInvoiceUseCase(invoice_repository, number_generator, notification_queue)
        self.use_case = ConvertQuoteToInvoiceUseCase(client_repository, create_invoice, clock=lambda: self.now)

    async def _quote(self, *items):
        await CreateQuoteUseCase(self.clients, self.queue).execute(
            OWNER_ID, self.client.id, quote_request(*items or (("Design", "1000", 1),))
        )

    @pytest.mark.asyncio
    async def test_convert(self):
        """Test the invoice copies the client and items and the quote records it."""
        await self._quote(("Design", "1000", 1), ("Logo", "250", 2))

        invoice = await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())

        assert invoice.client_id == self.client.id
        assert invoice.client_name == self.client.client_name
        assert invoice.email == "ada@example.com"
        assert [(i.description, i.quantity, i.price) for i in invoice.items] == [
            ("Design", 1, 100000), ("Logo", 2, 25000)
        ]
        assert invoice.subtotal == 150000
        assert invoice.total == 165000
        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.due_date == self.now + timedelta(days=30)

        quote = self.clients.find_by_id(self.client.id, OWNER_ID).quote
        assert quote.status == QuoteStatus.APPROVED
        assert quote.invoice_generated is True
        assert quote.invoice_id == invoice.invoice_number

    @pytest.mark.asyncio
    async def test_convert_with_due_date_and_notes(self):
        """Test an explicit due date and notes are used."""
        await self._quote()

        invoice = await self.use_case.execute(
            OWNER_ID, self.client.id, ConvertQuoteRequestDTO(due_date="2026-04-30", notes="Net 30")
        )

        assert invoice.due_date == datetime(2026, 4, 30)
        assert invoice.notes == "Net 30"

    @pytest.mark.asyncio
    async def test_convert_queues_invoice_email(self):
        """Test the new invoice is handed to the notification queue."""
        await self._quote()

        invoice = await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())
        await self.queue.drain()

        assert [sent.invoice_number for sent in self.dispatcher.invoices] == [invoice.invoice_number]

    @pytest.mark.asyncio
    async def test_convert_only_once(self):
        """Test a quote that was already invoiced cannot be billed again."""
        await self._quote()
        await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())

        with pytest.raises(BusinessRuleViolation):
            await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())

        assert len(self.invoices.find_by_owner_id(OWNER_ID)) == 1

    @pytest.mark.asyncio
    async def test_convert_rejected_quote(self):
        """Test a rejected quote cannot be billed."""
        await self._quote()
        await UpdateQuoteStatusUseCase(self.clients).execute(
            OWNER_ID, self.client.id, UpdateQuoteStatusRequestDTO(status="rejected")
        )

        with pytest.raises(BusinessRuleViolation):
            await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())

    @pytest.mark.asyncio
    async def test_convert_without_quote(self):
        """Test a client without a quote cannot be billed."""
        with pytest.raises(EntityNotFoundError):
            await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())

    @pytest.mark.asyncio
    async def test_failed_invoice_releases_quote(self):
        """Test the quote can be billed again when creating the invoice fails."""
        await self._quote()
        create_invoice = Mock(default_tax_rate=0.10)
        create_invoice.issue = AsyncMock(side_effect=ConcurrentModificationError("Invoice", "INV-2026-0001"))
        failing = ConvertQuoteToInvoiceUseCase(self.clients, create_invoice, clock=lambda: self.now)

        with pytest.raises(ConcurrentModificationError):
            await failing.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())

        quote = self.clients.find_by_id(self.client.id, OWNER_ID).quote
        assert quote.invoice_generated is False
        assert quote.status == QuoteStatus.PENDING
        assert self.invoices.find_by_owner_id(OWNER_ID) == []

        invoice = await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())
        assert self.clients.find_by_id(self.client.id, OWNER_ID).quote.invoice_id == invoice.invoice_number

    @pytest.mark.asyncio
    async def test_stale_client_cannot_convert(self):
        """Test a conversion working from an outdated client is refused before billing."""
        await self._quote()
        stale = self.clients.find_by_id(self.client.id, OWNER_ID)
        fresh = self.clients.find_by_id(self.client.id, OWNER_ID)
        fresh.add_message("Any update?", "Ada")
        self.clients.save(fresh)

        self.use_case._get_owned_client = lambda owner_id, client_id: stale

        with pytest.raises(ConcurrentModificationError):
            await self.use_case.execute(OWNER_ID, self.client.id, ConvertQuoteRequestDTO())

        assert self.invoices.find_by_owner_id(OWNER_ID) == []
