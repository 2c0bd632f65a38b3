"""
Database infrastructure for the invoicing service.
"""

from .database import engine, SessionLocal, get_db, Base, init_db, drop_db
from .models import ClientModel, InvoiceModel, InvoiceSequenceModel

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "init_db",
    "drop_db",
    "ClientModel",
    "InvoiceModel",
    "InvoiceSequenceModel",
]
