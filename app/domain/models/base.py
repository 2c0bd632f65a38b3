"""
Domain building blocks: entity bases, the shared clock and the exceptions
every layer above translates.
"""

from datetime import datetime, timezone
from typing import Optional, Any
from abc import ABC
from dataclasses import dataclass, field


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class BaseEntity(ABC):
    """
    Identity and timestamps shared by persisted entities.
    ``id`` stays None until the repository has inserted the row.
    """

    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def mark_as_updated(self) -> None:
        self.updated_at = utcnow()

    @property
    def is_new(self) -> bool:
        return self.id is None

    def validate(self) -> None:
        """Raise ValidationError when the entity is inconsistent. Overridden per entity."""
        pass


@dataclass
class AggregateRoot(BaseEntity):
    """
    Entity saved and loaded as a whole.
    The version is owned by the persistence layer and used for optimistic locking.
    """

    version: int = field(default=1)


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(DomainException):
    """Exception raised when entity validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class BusinessRuleViolation(DomainException):
    """Exception raised when a business rule is violated."""

    def __init__(self, message: str):
        super().__init__(message, "BUSINESS_RULE_VIOLATION")


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConcurrentModificationError(DomainException):
    """Exception raised when an entity changed between read and write."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} was modified concurrently"
        super().__init__(message, "CONCURRENT_MODIFICATION")
        self.entity_type = entity_type
        self.entity_id = entity_id


class InvoiceNumberConflictError(DomainException):
    """Raised when an issued invoice number is already taken. Always retried."""

    def __init__(self, invoice_number: str):
        super().__init__(f"Invoice number {invoice_number} already exists", "INVOICE_NUMBER_CONFLICT")
        self.invoice_number = invoice_number


class DownstreamNotificationFailure(DomainException):
    """Raised by notification senders; logged and never propagated to a write."""

    def __init__(self, message: str):
        super().__init__(message, "NOTIFICATION_FAILED")


class UpstreamRenderError(DomainException):
    """Raised when a document could not be rendered."""

    def __init__(self, message: str):
        super().__init__(message, "RENDER_FAILED")
