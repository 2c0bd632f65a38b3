"""
Client management router.
Handles client CRUD, the message log and the client's quote.
"""

from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status

from app.infrastructure.auth import get_current_user, get_current_user_id
from app.application.use_cases.client_use_cases import (
    CreateClientUseCase,
    GetClientUseCase,
    ListClientsUseCase,
    UpdateClientUseCase,
    DeleteClientUseCase,
    AddClientMessageUseCase
)
from app.application.use_cases.quote_use_cases import (
    CreateQuoteUseCase,
    GetQuoteUseCase,
    UpdateQuoteStatusUseCase,
    ConvertQuoteToInvoiceUseCase
)
from app.application.use_cases.invoice_use_cases import CreateInvoiceUseCase
from app.application.dto.client_dto import (
    CreateClientRequestDTO,
    UpdateClientRequestDTO,
    AddMessageRequestDTO,
    CreateQuoteRequestDTO,
    UpdateQuoteStatusRequestDTO,
    ConvertQuoteRequestDTO,
    ClientResponseDTO,
    MessageResponseDTO,
    QuoteResponseDTO
)
from app.application.dto.invoice_dto import InvoiceResponseDTO
from app.config import settings
from app.domain.models.base import DomainException
from app.domain.models.user import AuthenticatedUser
from app.infrastructure.events.notification_queue import NotificationQueue, get_notification_queue
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.infrastructure.web.dependencies import get_client_repository, get_create_invoice_use_case
from app.infrastructure.web.middleware.error_handler import to_http_exception


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ClientResponseDTO)
async def create_client(
    request: CreateClientRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """
    Create a new client.

    - **companyName**, **clientName**, **email**, **phone**: required
    - **designation**, **location**: optional
    """
    try:
        use_case = CreateClientUseCase(repository)
        client = await use_case.execute(user_id, request)
        return ClientResponseDTO.from_domain(client)

    except DomainException as e:
        raise to_http_exception(e)


@router.get("", response_model=List[ClientResponseDTO])
async def list_clients(
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """List the caller's clients, newest first."""
    use_case = ListClientsUseCase(repository)
    clients = await use_case.execute(user_id)
    return [ClientResponseDTO.from_domain(client) for client in clients]


@router.get("/{client_id}", response_model=ClientResponseDTO)
async def get_client(
    client_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """Get a client with its messages and quote."""
    try:
        use_case = GetClientUseCase(repository)
        client = await use_case.execute(user_id, client_id)
        return ClientResponseDTO.from_domain(client)

    except DomainException as e:
        raise to_http_exception(e)


@router.put("/{client_id}", response_model=ClientResponseDTO)
async def update_client(
    client_id: int,
    request: UpdateClientRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """
    Update client contact fields. Omitted fields are left unchanged;
    required fields cannot be cleared.
    """
    try:
        use_case = UpdateClientUseCase(repository)
        client = await use_case.execute(user_id, client_id, request)
        return ClientResponseDTO.from_domain(client)

    except DomainException as e:
        raise to_http_exception(e)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """Delete a client. Its invoices are kept."""
    try:
        use_case = DeleteClientUseCase(repository)
        await use_case.execute(user_id, client_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except DomainException as e:
        raise to_http_exception(e)


@router.post("/{client_id}/messages", status_code=status.HTTP_201_CREATED, response_model=MessageResponseDTO)
async def add_message(
    client_id: int,
    request: AddMessageRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """
    Append a message to the client's log.

    - **text**: required
    - **author**: defaults to the caller's name
    """
    try:
        use_case = AddClientMessageUseCase(repository)
        message = await use_case.execute(user, client_id, request)
        return MessageResponseDTO.from_domain(message)

    except DomainException as e:
        raise to_http_exception(e)


@router.post("/{client_id}/quote", status_code=status.HTTP_201_CREATED, response_model=QuoteResponseDTO)
async def create_quote(
    client_id: int,
    request: CreateQuoteRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    notifications: Annotated[NotificationQueue, Depends(get_notification_queue)]
):
    """
    Create the client's quote, replacing any previous one, and email it.

    - **items**: list of {name, price, quantity (default 1)}
    """
    try:
        use_case = CreateQuoteUseCase(repository, notifications)
        quote = await use_case.execute(user_id, client_id, request)
        return QuoteResponseDTO.from_domain(quote)

    except DomainException as e:
        raise to_http_exception(e)


@router.get("/{client_id}/quote", response_model=QuoteResponseDTO)
async def get_quote(
    client_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """Get the client's current quote."""
    try:
        use_case = GetQuoteUseCase(repository)
        quote = await use_case.execute(user_id, client_id)
        return QuoteResponseDTO.from_domain(quote)

    except DomainException as e:
        raise to_http_exception(e)


@router.patch("/{client_id}/quote/status", response_model=QuoteResponseDTO)
async def update_quote_status(
    client_id: int,
    request: UpdateQuoteStatusRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)]
):
    """
    Update the quote's status fields. Only the fields sent are changed.

    - **status**: pending, approved or rejected
    - **invoiceGenerated**, **invoiceId**
    """
    try:
        use_case = UpdateQuoteStatusUseCase(repository)
        quote = await use_case.execute(user_id, client_id, request)
        return QuoteResponseDTO.from_domain(quote)

    except DomainException as e:
        raise to_http_exception(e)


@router.post("/{client_id}/quote/invoice", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def convert_quote_to_invoice(
    client_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    repository: Annotated[SQLAlchemyClientRepository, Depends(get_client_repository)],
    create_invoice: Annotated[CreateInvoiceUseCase, Depends(get_create_invoice_use_case)],
    request: ConvertQuoteRequestDTO = ConvertQuoteRequestDTO()
):
    """
    Approve the quote and bill it as a new invoice.

    - **dueDate**: defaults to the standard payment terms from today
    - **notes**: optional
    """
    try:
        use_case = ConvertQuoteToInvoiceUseCase(
            repository,
            create_invoice,
            payment_terms_days=settings.default_payment_terms_days
        )
        invoice = await use_case.execute(user_id, client_id, request)
        return InvoiceResponseDTO.from_domain(invoice)

    except DomainException as e:
        raise to_http_exception(e)
