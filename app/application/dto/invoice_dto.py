"""
Invoice DTOs for the application layer.
Amounts arrive and leave in major units; the domain works in cents.
"""

from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from pydantic import Field, field_validator

from .base_dto import RequestDTO, ResponseDTO, coerce_datetime, format_date
from app.domain.models.invoice import Invoice, InvoiceLineItem
from app.domain.services.billing_service import InvoiceStats, to_major_units, to_minor_units
from app.infrastructure.validation.validators import SecurityValidator, DataValidator


class InvoiceItemRequestDTO(RequestDTO):
    """An invoice line. Price is in major units."""

    description: str = Field(max_length=500)
    quantity: int = 1
    price: Decimal

    @field_validator('description', mode='before')
    @classmethod
    def validate_description(cls, v):
        return SecurityValidator.strip_markup(v)

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v):
        return DataValidator.validate_amount(v)

    def to_domain(self) -> InvoiceLineItem:
        return InvoiceLineItem(
            description=self.description,
            quantity=self.quantity,
            price=to_minor_units(self.price)
        )


class _InvoiceFieldsDTO(RequestDTO):
    """Sanitizers shared by create and update requests."""

    @field_validator('client_name', 'company_name', 'phone', 'notes', mode='before', check_fields=False)
    @classmethod
    def validate_safe_strings(cls, v):
        return SecurityValidator.strip_markup(v)

    @field_validator('email', mode='before', check_fields=False)
    @classmethod
    def validate_email(cls, v):
        if v is not None:
            return DataValidator.validate_email(v)
        return v

    @field_validator('due_date', mode='before', check_fields=False)
    @classmethod
    def parse_due_date(cls, v):
        return coerce_datetime(v)


class CreateInvoiceRequestDTO(_InvoiceFieldsDTO):
    """DTO for invoice creation. Totals and number are always computed server-side."""

    client_name: str = Field(max_length=255)
    company_name: str = Field(max_length=255)
    email: str
    phone: str = Field(max_length=50)
    items: List[InvoiceItemRequestDTO]
    due_date: datetime
    tax_rate: Optional[float] = Field(default=None, ge=0, le=1)
    notes: Optional[str] = Field(default=None, max_length=2000)
    client_id: Optional[int] = None


class UpdateInvoiceRequestDTO(_InvoiceFieldsDTO):
    """DTO for partial invoice updates. Omitted fields are left unchanged."""

    client_name: Optional[str] = Field(default=None, max_length=255)
    company_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    items: Optional[List[InvoiceItemRequestDTO]] = None
    due_date: Optional[datetime] = None
    tax_rate: Optional[float] = Field(default=None, ge=0, le=1)
    notes: Optional[str] = Field(default=None, max_length=2000)
    client_id: Optional[int] = None
    status: Optional[str] = None


class InvoiceStatusRequestDTO(RequestDTO):
    status: Optional[str] = None


class InvoiceItemResponseDTO(ResponseDTO):
    description: str
    quantity: int
    price: float
    amount: float


class InvoiceResponseDTO(ResponseDTO):
    """
    Invoice as returned by the API.
    ``id`` repeats the invoice number; calendar dates are YYYY-MM-DD.
    """

    id: str
    invoice_number: str
    client_name: str
    company_name: str
    email: str
    phone: str
    client_id: Optional[int] = None
    items: List[InvoiceItemResponseDTO]
    tax_rate: float
    subtotal: float
    tax: float
    total: float
    status: str
    due_date: Optional[str] = None
    notes: str = ""
    paid_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: datetime

    @classmethod
    def from_domain(cls, invoice: Invoice) -> "InvoiceResponseDTO":
        return cls(
            id=invoice.invoice_number,
            invoice_number=invoice.invoice_number,
            client_name=invoice.client_name,
            company_name=invoice.company_name,
            email=invoice.email,
            phone=invoice.phone,
            client_id=invoice.client_id,
            items=[
                InvoiceItemResponseDTO(
                    description=item.description,
                    quantity=item.quantity,
                    price=to_major_units(item.price),
                    amount=to_major_units(item.amount)
                )
                for item in invoice.items
            ],
            tax_rate=invoice.tax_rate,
            subtotal=to_major_units(invoice.subtotal),
            tax=to_major_units(invoice.tax),
            total=to_major_units(invoice.total),
            status=invoice.status.value,
            due_date=format_date(invoice.due_date),
            notes=invoice.notes,
            paid_at=format_date(invoice.paid_at),
            created_at=format_date(invoice.created_at),
            updated_at=invoice.updated_at
        )


class InvoiceStatsResponseDTO(ResponseDTO):
    total: int
    paid: int
    pending: int
    overdue: int
    total_revenue: float
    pending_amount: float

    @classmethod
    def from_domain(cls, stats: InvoiceStats) -> "InvoiceStatsResponseDTO":
        return cls(
            total=stats.total,
            paid=stats.paid,
            pending=stats.pending,
            overdue=stats.overdue,
            total_revenue=to_major_units(stats.total_revenue),
            pending_amount=to_major_units(stats.pending_amount)
        )


class SendInvoiceResponseDTO(ResponseDTO):
    message: str
    invoice_number: str
