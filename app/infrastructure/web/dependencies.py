"""
FastAPI dependencies shared by the routers.
Every request gets repositories bound to its own database session.
"""

from typing import Annotated
from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.application.use_cases.invoice_use_cases import CreateInvoiceUseCase
from app.domain.services.numbering_service import InvoiceNumberGenerator
from app.infrastructure.db.database import get_db
from app.infrastructure.events.notification_queue import NotificationQueue, get_notification_queue
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.infrastructure.repositories.invoice_repository import SQLAlchemyInvoiceRepository
from app.infrastructure.repositories.invoice_sequence_repository import SQLAlchemyInvoiceSequenceRepository


def get_client_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyClientRepository:
    """Dependency to get client repository."""
    return SQLAlchemyClientRepository(session)


def get_invoice_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyInvoiceRepository:
    """Dependency to get invoice repository."""
    return SQLAlchemyInvoiceRepository(session)


def get_number_generator(session: Annotated[Session, Depends(get_db)]) -> InvoiceNumberGenerator:
    """Dependency to get the invoice number generator."""
    sequences = SQLAlchemyInvoiceSequenceRepository(session, max_attempts=settings.invoice_number_max_attempts)
    return InvoiceNumberGenerator(sequences, prefix=settings.invoice_number_prefix)


def get_create_invoice_use_case(
    repository: Annotated[SQLAlchemyInvoiceRepository, Depends(get_invoice_repository)],
    number_generator: Annotated[InvoiceNumberGenerator, Depends(get_number_generator)],
    notifications: Annotated[NotificationQueue, Depends(get_notification_queue)]
) -> CreateInvoiceUseCase:
    """Invoice creation shared by the invoice and quote routes."""
    return CreateInvoiceUseCase(
        repository,
        number_generator,
        notifications,
        default_tax_rate=settings.default_tax_rate,
        max_attempts=settings.invoice_number_max_attempts
    )
