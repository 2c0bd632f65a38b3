"""
Infrastructure mappers module.
Contains mappers for converting between domain entities and database models.
"""

from .client_mapper import ClientMapper
from .invoice_mapper import InvoiceMapper

__all__ = [
    "ClientMapper",
    "InvoiceMapper",
]
