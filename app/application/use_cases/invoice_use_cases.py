"""
Invoice use cases for the application layer.
Creation with conflict-free numbering, updates, the status lifecycle,
the overdue sweep, duplication, statistics, delivery and PDF rendering.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from app.application.use_cases.base_use_case import BaseUseCase
from app.application.dto.invoice_dto import CreateInvoiceRequestDTO, UpdateInvoiceRequestDTO
from app.domain.models.base import (
    ConcurrentModificationError, EntityNotFoundError, InvoiceNumberConflictError, utcnow
)
from app.domain.models.invoice import Invoice, InvoiceStatus
from app.domain.models.user import AuthenticatedUser
from app.domain.repositories.invoice_repository import InvoiceRepository
from app.domain.services.billing_service import BillingService, InvoiceStats
from app.domain.services.document_renderer import DocumentRenderer
from app.domain.services.numbering_service import InvoiceNumberGenerator
from app.infrastructure.events.notification_queue import NotificationQueue


logger = logging.getLogger(__name__)

# Values of the status filter that mean "no filter"
ALL_STATUSES = {"", "all"}


class InvoiceUseCase(BaseUseCase):
    """Base for use cases that work on invoices of one owner."""

    def __init__(self, invoice_repository: InvoiceRepository):
        self.invoice_repository = invoice_repository

    def _get_owned_invoice(self, owner_id: str, invoice_number: str) -> Invoice:
        invoice = self.invoice_repository.find_by_number(invoice_number, owner_id)
        if invoice is None:
            raise EntityNotFoundError("Invoice", invoice_number)
        return invoice


class CreateInvoiceUseCase(InvoiceUseCase):
    """
    Use case for creating invoices.

    Every attempt draws a fresh number; if the insert still collides with an
    existing number the invoice is renumbered and saved again.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        number_generator: InvoiceNumberGenerator,
        notifications: NotificationQueue,
        default_tax_rate: float = 0.10,
        max_attempts: int = 5
    ):
        super().__init__(invoice_repository)
        self.number_generator = number_generator
        self.notifications = notifications
        self.default_tax_rate = default_tax_rate
        self.max_attempts = max_attempts

    async def execute(self, owner_id: str, request: CreateInvoiceRequestDTO) -> Invoice:
        invoice = Invoice.create(
            owner_id=owner_id,
            client_name=request.client_name,
            company_name=request.company_name,
            email=request.email,
            phone=request.phone,
            items=[item.to_domain() for item in request.items],
            due_date=request.due_date,
            tax_rate=self.default_tax_rate if request.tax_rate is None else request.tax_rate,
            notes=request.notes,
            client_id=request.client_id
        )
        return await self.issue(invoice)

    async def issue(self, invoice: Invoice, notify: bool = True) -> Invoice:
        """Number and persist a new invoice, then queue its notification."""
        invoice.recalculate_totals()

        for attempt in range(1, self.max_attempts + 1):
            invoice.invoice_number = self.number_generator.generate()
            try:
                saved_invoice = self.invoice_repository.save(invoice)
                break
            except InvoiceNumberConflictError as e:
                logger.warning(f"{e.message}, renumbering (attempt {attempt}/{self.max_attempts})")
        else:
            raise ConcurrentModificationError("Invoice", invoice.invoice_number)

        logger.info(f"Invoice {saved_invoice.invoice_number} created for owner {saved_invoice.owner_id}")

        if notify:
            self._notify(self.notifications.submit_invoice_notification, saved_invoice)
        return saved_invoice


class GetInvoiceUseCase(InvoiceUseCase):
    async def execute(self, owner_id: str, invoice_number: str) -> Invoice:
        return self._get_owned_invoice(owner_id, invoice_number)


class ListInvoicesUseCase(InvoiceUseCase):
    """List newest first, optionally filtered by status and a search term."""

    async def execute(
        self,
        owner_id: str,
        status: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[Invoice]:
        status_filter = None
        if status is not None and status.strip().lower() not in ALL_STATUSES:
            status_filter = InvoiceStatus.parse(status)

        return self.invoice_repository.find_by_owner_id(
            owner_id,
            status=status_filter,
            search=search.strip() if search else None
        )


class UpdateInvoiceUseCase(InvoiceUseCase):
    """Merge the supplied fields and recompute totals."""

    async def execute(self, owner_id: str, invoice_number: str, request: UpdateInvoiceRequestDTO) -> Invoice:
        invoice = self._get_owned_invoice(owner_id, invoice_number)

        invoice.apply_changes(
            client_name=request.client_name,
            company_name=request.company_name,
            email=request.email,
            phone=request.phone,
            items=[item.to_domain() for item in request.items] if request.items is not None else None,
            due_date=request.due_date,
            tax_rate=request.tax_rate,
            notes=request.notes,
            client_id=request.client_id,
            status=request.status
        )

        return self.invoice_repository.save(invoice)


class DeleteInvoiceUseCase(InvoiceUseCase):
    async def execute(self, owner_id: str, invoice_number: str) -> None:
        if not self.invoice_repository.delete(invoice_number, owner_id):
            raise EntityNotFoundError("Invoice", invoice_number)
        logger.info(f"Invoice {invoice_number} deleted by owner {owner_id}")


class SetInvoiceStatusUseCase(InvoiceUseCase):
    """Any status may follow any other; paid stamps paid_at."""

    async def execute(self, owner_id: str, invoice_number: str, status: Optional[str]) -> Invoice:
        new_status = InvoiceStatus.parse(status)
        invoice = self._get_owned_invoice(owner_id, invoice_number)

        invoice.set_status(new_status)
        saved_invoice = self.invoice_repository.save(invoice)
        logger.info(f"Invoice {invoice_number} is now {new_status.value}")
        return saved_invoice


class SweepOverdueInvoicesUseCase(BaseUseCase):
    """Move every pending invoice past its due date to overdue, across all owners."""

    def __init__(self, invoice_repository: InvoiceRepository, clock: Callable[[], datetime] = utcnow):
        self.invoice_repository = invoice_repository
        self.clock = clock

    async def execute(self, now: Optional[datetime] = None) -> int:
        changed = self.invoice_repository.mark_overdue(now or self.clock())
        if changed:
            logger.info(f"Marked {changed} invoice(s) overdue")
        return changed


class DuplicateInvoiceUseCase(InvoiceUseCase):
    """Copy an invoice into a new pending one with a fresh number and due date."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        create_invoice: CreateInvoiceUseCase,
        payment_terms_days: int = 30,
        clock: Callable[[], datetime] = utcnow
    ):
        super().__init__(invoice_repository)
        self.create_invoice = create_invoice
        self.payment_terms_days = payment_terms_days
        self.clock = clock

    async def execute(self, owner_id: str, invoice_number: str) -> Invoice:
        source = self._get_owned_invoice(owner_id, invoice_number)
        copy = source.duplicate(self.payment_terms_days, now=self.clock())
        duplicate = await self.create_invoice.issue(copy, notify=False)
        logger.info(f"Invoice {invoice_number} duplicated as {duplicate.invoice_number}")
        return duplicate


class ComputeInvoiceStatsUseCase(InvoiceUseCase):
    async def execute(self, owner_id: str) -> InvoiceStats:
        invoices = self.invoice_repository.find_by_owner_id(owner_id)
        return BillingService().compute_invoice_stats(invoices)


class SendInvoiceUseCase(InvoiceUseCase):
    """Queue the invoice email; delivery happens in the background."""

    def __init__(self, invoice_repository: InvoiceRepository, notifications: NotificationQueue):
        super().__init__(invoice_repository)
        self.notifications = notifications

    async def execute(self, owner_id: str, invoice_number: str) -> Invoice:
        invoice = self._get_owned_invoice(owner_id, invoice_number)
        self._notify(self.notifications.submit_invoice_notification, invoice)
        return invoice


class RenderInvoicePdfUseCase(InvoiceUseCase):
    def __init__(self, invoice_repository: InvoiceRepository, renderer: DocumentRenderer):
        super().__init__(invoice_repository)
        self.renderer = renderer

    async def execute(self, user: AuthenticatedUser, invoice_number: str) -> Tuple[Invoice, bytes]:
        invoice = self._get_owned_invoice(user.user_id, invoice_number)
        # WeasyPrint is CPU bound; keep it off the event loop
        pdf_bytes = await asyncio.to_thread(self.renderer.generate_invoice_pdf, invoice, user)
        return invoice, pdf_bytes
