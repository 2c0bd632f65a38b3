"""
Infrastructure repositories module.
Contains SQLAlchemy implementations of domain repositories.
"""

from .client_repository import SQLAlchemyClientRepository
from .invoice_repository import SQLAlchemyInvoiceRepository
from .invoice_sequence_repository import SQLAlchemyInvoiceSequenceRepository

__all__ = [
    "SQLAlchemyClientRepository",
    "SQLAlchemyInvoiceRepository",
    "SQLAlchemyInvoiceSequenceRepository",
]
