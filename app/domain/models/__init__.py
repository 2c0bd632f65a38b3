"""
Domain models for the invoicing service.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    AggregateRoot,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    EntityNotFoundError,
    ConcurrentModificationError,
    InvoiceNumberConflictError,
    DownstreamNotificationFailure,
    UpstreamRenderError,
    utcnow
)

from .quote import Quote, QuoteItem, QuoteStatus, QUOTE_TAX_RATE
from .client import Client, ClientMessage, DEFAULT_MESSAGE_AUTHOR
from .invoice import Invoice, InvoiceLineItem, InvoiceStatus, DEFAULT_TAX_RATE
from .user import AuthenticatedUser

__all__ = [
    "BaseEntity",
    "AggregateRoot",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "EntityNotFoundError",
    "ConcurrentModificationError",
    "InvoiceNumberConflictError",
    "DownstreamNotificationFailure",
    "UpstreamRenderError",
    "utcnow",
    "Quote",
    "QuoteItem",
    "QuoteStatus",
    "QUOTE_TAX_RATE",
    "Client",
    "ClientMessage",
    "DEFAULT_MESSAGE_AUTHOR",
    "Invoice",
    "InvoiceLineItem",
    "InvoiceStatus",
    "DEFAULT_TAX_RATE",
    "AuthenticatedUser",
]
