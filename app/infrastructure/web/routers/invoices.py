"""
Invoice management router.
Handles invoice CRUD, the status lifecycle, duplication, statistics,
email delivery and PDF download. Invoices are addressed by invoice number.
"""

from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, Response, status

from app.infrastructure.auth import get_current_user, get_current_user_id
from app.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase,
    GetInvoiceUseCase,
    ListInvoicesUseCase,
    UpdateInvoiceUseCase,
    DeleteInvoiceUseCase,
    SetInvoiceStatusUseCase,
    DuplicateInvoiceUseCase,
    ComputeInvoiceStatsUseCase,
    SendInvoiceUseCase,
    RenderInvoicePdfUseCase
)
from app.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    InvoiceStatusRequestDTO,
    InvoiceResponseDTO,
    InvoiceStatsResponseDTO,
    SendInvoiceResponseDTO
)
from app.config import settings
from app.domain.models.base import DomainException
from app.domain.models.user import AuthenticatedUser
from app.domain.services.document_renderer import DocumentRenderer
from app.infrastructure.events.notification_queue import NotificationQueue, get_notification_queue
from app.infrastructure.pdf.pdf_service import get_document_renderer
from app.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from app.infrastructure.web.dependencies import get_invoice_repository, get_create_invoice_use_case
from app.infrastructure.web.middleware.error_handler import to_http_exception


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def create_invoice(
    request: CreateInvoiceRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    use_case: Annotated[CreateInvoiceUseCase, Depends(get_create_invoice_use_case)]
):
    """
    Create a new invoice. The number and totals are assigned by the server.

    - **clientName**, **companyName**, **email**, **phone**: required
    - **items**: at least one {description, quantity, price}
    - **dueDate**: required
    - **taxRate**: 0..1, default 0.10
    - **notes**, **clientId**: optional
    """
    try:
        invoice = await use_case.execute(user_id, request)
        return InvoiceResponseDTO.from_domain(invoice)

    except DomainException as e:
        raise to_http_exception(e)


@router.get("", response_model=List[InvoiceResponseDTO])
async def list_invoices(
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status; 'All' disables"),
    search: Optional[str] = Query(None, description="Match invoice number, client or company name")
):
    """List the caller's invoices, newest first."""
    try:
        use_case = ListInvoicesUseCase(repository)
        invoices = await use_case.execute(user_id, status_filter, search)
        return [InvoiceResponseDTO.from_domain(invoice) for invoice in invoices]

    except DomainException as e:
        raise to_http_exception(e)


@router.get("/stats/summary", response_model=InvoiceStatsResponseDTO)
async def get_invoice_stats(
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)]
):
    """Counts per status plus paid revenue and pending amount."""
    use_case = ComputeInvoiceStatsUseCase(repository)
    stats = await use_case.execute(user_id)
    return InvoiceStatsResponseDTO.from_domain(stats)


@router.get("/{invoice_id}", response_model=InvoiceResponseDTO)
async def get_invoice(
    invoice_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)]
):
    """
    Get a specific invoice.

    - **invoice_id**: invoice number, e.g. INV-2026-0001
    """
    try:
        use_case = GetInvoiceUseCase(repository)
        invoice = await use_case.execute(user_id, invoice_id)
        return InvoiceResponseDTO.from_domain(invoice)

    except DomainException as e:
        raise to_http_exception(e)


@router.put("/{invoice_id}", response_model=InvoiceResponseDTO)
async def update_invoice(
    invoice_id: str,
    request: UpdateInvoiceRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)]
):
    """
    Update an existing invoice. Only the fields sent are changed and
    totals are recomputed from the items.
    """
    try:
        use_case = UpdateInvoiceUseCase(repository)
        invoice = await use_case.execute(user_id, invoice_id, request)
        return InvoiceResponseDTO.from_domain(invoice)

    except DomainException as e:
        raise to_http_exception(e)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)]
):
    """Delete an invoice."""
    try:
        use_case = DeleteInvoiceUseCase(repository)
        await use_case.execute(user_id, invoice_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except DomainException as e:
        raise to_http_exception(e)


@router.patch("/{invoice_id}/status", response_model=InvoiceResponseDTO)
async def update_invoice_status(
    invoice_id: str,
    request: InvoiceStatusRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)]
):
    """
    Set the invoice status.

    - **status**: pending, paid, overdue or cancelled (case-insensitive);
      paid records the payment date
    """
    try:
        use_case = SetInvoiceStatusUseCase(repository)
        invoice = await use_case.execute(user_id, invoice_id, request.status)
        return InvoiceResponseDTO.from_domain(invoice)

    except DomainException as e:
        raise to_http_exception(e)


@router.get("/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    renderer: Annotated[DocumentRenderer, Depends(get_document_renderer)]
):
    """Render the invoice as a PDF attachment."""
    try:
        use_case = RenderInvoicePdfUseCase(repository, renderer)
        invoice, pdf_bytes = await use_case.execute(user, invoice_id)

    except DomainException as e:
        raise to_http_exception(e)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{invoice.invoice_number}.pdf"'}
    )


@router.post("/{invoice_id}/duplicate", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def duplicate_invoice(
    invoice_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    create_invoice: Annotated[CreateInvoiceUseCase, Depends(get_create_invoice_use_case)]
):
    """Copy an invoice into a new pending invoice with a new number and due date."""
    try:
        use_case = DuplicateInvoiceUseCase(
            repository,
            create_invoice,
            payment_terms_days=settings.default_payment_terms_days
        )
        invoice = await use_case.execute(user_id, invoice_id)
        return InvoiceResponseDTO.from_domain(invoice)

    except DomainException as e:
        raise to_http_exception(e)


@router.post("/{invoice_id}/send", status_code=status.HTTP_202_ACCEPTED, response_model=SendInvoiceResponseDTO)
async def send_invoice(
    invoice_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    notifications: Annotated[NotificationQueue, Depends(get_notification_queue)]
):
    """Email the invoice to its billing address. Delivery happens in the background."""
    try:
        use_case = SendInvoiceUseCase(repository, notifications)
        invoice = await use_case.execute(user_id, invoice_id)
        return SendInvoiceResponseDTO(
            message=f"Invoice queued for delivery to {invoice.email}",
            invoice_number=invoice.invoice_number
        )

    except DomainException as e:
        raise to_http_exception(e)
