"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Numeric,
    ForeignKey, JSON, Index, CheckConstraint
)

from app.domain.models.base import utcnow
from .database import Base


class ClientModel(Base):
    """Client table. Messages and the current quote are embedded as JSON."""
    __tablename__ = 'clients'

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), nullable=False)

    company_name = Column(String(255), nullable=False)
    client_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    designation = Column(String(255), nullable=False, default="")
    location = Column(String(255), nullable=False, default="")

    messages = Column(JSON, nullable=False, default=list)
    quote = Column(JSON)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index('idx_clients_owner_created', 'owner_id', 'created_at'),
    )


class InvoiceModel(Base):
    """Invoice table. Amounts are stored in cents."""
    __tablename__ = 'invoices'

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), nullable=False)
    client_id = Column(Integer, ForeignKey('clients.id', ondelete='SET NULL'))

    invoice_number = Column(String(50), nullable=False, unique=True)
    status = Column(String(20), nullable=False, default='pending')

    # Bill-to details
    client_name = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)

    items = Column(JSON, nullable=False)
    tax_rate = Column(Numeric(5, 4), nullable=False, default=0.10)
    subtotal = Column(Integer, nullable=False, default=0)
    tax = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=0)

    # Dates
    due_date = Column(DateTime, nullable=False)
    paid_at = Column(DateTime)

    notes = Column(Text, nullable=False, default="")

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index('idx_invoices_owner_created', 'owner_id', 'created_at'),
        Index('idx_invoices_status_due', 'status', 'due_date'),
        CheckConstraint('tax_rate >= 0 AND tax_rate <= 1', name='ck_invoices_tax_rate'),
        CheckConstraint('total = subtotal + tax', name='ck_invoices_total'),
    )


class InvoiceSequenceModel(Base):
    """One counter row per calendar year."""
    __tablename__ = 'invoice_sequences'

    year = Column(Integer, primary_key=True, autoincrement=False)
    last_value = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
