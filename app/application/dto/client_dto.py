"""
Client DTOs for the application layer.
Data Transfer Objects for clients, their message log and their quote.
"""

from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from pydantic import Field, field_validator

from .base_dto import RequestDTO, ResponseDTO, coerce_datetime
from app.domain.models.client import Client, ClientMessage
from app.domain.models.quote import Quote, QuoteItem
from app.domain.services.billing_service import to_major_units, to_minor_units
from app.infrastructure.validation.validators import SecurityValidator, DataValidator


# Request DTOs
class CreateClientRequestDTO(RequestDTO):
    """DTO for client creation requests."""

    company_name: str = Field(max_length=255, description="Company name")
    client_name: str = Field(max_length=255, description="Contact person name")
    email: str = Field(description="Contact email")
    phone: str = Field(max_length=50, description="Phone number")
    designation: Optional[str] = Field(default=None, max_length=255, description="Job title")
    location: Optional[str] = Field(default=None, max_length=255, description="Location")

    @field_validator('company_name', 'client_name', 'phone', 'designation', 'location', mode='before')
    @classmethod
    def validate_safe_strings(cls, v):
        return SecurityValidator.strip_markup(v)

    @field_validator('email', mode='before')
    @classmethod
    def validate_email(cls, v):
        return DataValidator.validate_email(v)


class UpdateClientRequestDTO(RequestDTO):
    """DTO for partial client updates. Omitted fields are left unchanged."""

    company_name: Optional[str] = Field(default=None, max_length=255)
    client_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    designation: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)

    @field_validator('company_name', 'client_name', 'phone', 'designation', 'location', mode='before')
    @classmethod
    def validate_safe_strings(cls, v):
        return SecurityValidator.strip_markup(v)

    @field_validator('email', mode='before')
    @classmethod
    def validate_email(cls, v):
        if v is not None:
            return DataValidator.validate_email(v)
        return v


class AddMessageRequestDTO(RequestDTO):
    """DTO for appending to a client's message log."""

    text: str = Field(max_length=5000, description="Message text")
    author: Optional[str] = Field(default=None, max_length=255, description="Author name")

    @field_validator('text', 'author', mode='before')
    @classmethod
    def validate_safe_strings(cls, v):
        return SecurityValidator.strip_markup(v)


class QuoteItemRequestDTO(RequestDTO):
    """A quote line. Price is in major units."""

    name: str = Field(max_length=255)
    price: Decimal
    quantity: Optional[int] = 1

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, v):
        return SecurityValidator.strip_markup(v)

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v):
        return DataValidator.validate_amount(v)

    @field_validator('quantity', mode='before')
    @classmethod
    def default_quantity(cls, v):
        return 1 if v is None else v

    def to_domain(self) -> QuoteItem:
        return QuoteItem(
            name=self.name,
            price=to_minor_units(self.price),
            quantity=self.quantity
        )


class CreateQuoteRequestDTO(RequestDTO):
    """DTO for (re)creating a client's quote."""

    items: List[QuoteItemRequestDTO] = Field(default_factory=list)


class UpdateQuoteStatusRequestDTO(RequestDTO):
    """Partial quote status update."""

    status: Optional[str] = None
    invoice_generated: Optional[bool] = None
    invoice_id: Optional[str] = None


class ConvertQuoteRequestDTO(RequestDTO):
    """Options for turning a quote into an invoice."""

    due_date: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, v):
        return coerce_datetime(v)

    @field_validator('notes', mode='before')
    @classmethod
    def validate_notes(cls, v):
        return SecurityValidator.strip_markup(v)


# Response DTOs
class MessageResponseDTO(ResponseDTO):
    text: str
    author: str
    timestamp: datetime

    @classmethod
    def from_domain(cls, message: ClientMessage) -> "MessageResponseDTO":
        return cls(text=message.text, author=message.author, timestamp=message.timestamp)


class QuoteItemResponseDTO(ResponseDTO):
    name: str
    price: float
    quantity: int


class QuoteResponseDTO(ResponseDTO):
    """Quote with amounts in major units."""

    items: List[QuoteItemResponseDTO]
    subtotal: float
    tax: float
    total: float
    status: str
    invoice_generated: bool
    invoice_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, quote: Quote) -> "QuoteResponseDTO":
        return cls(
            items=[
                QuoteItemResponseDTO(
                    name=item.name,
                    price=to_major_units(item.price),
                    quantity=item.quantity
                )
                for item in quote.items
            ],
            subtotal=to_major_units(quote.subtotal),
            tax=to_major_units(quote.tax),
            total=to_major_units(quote.total),
            status=quote.status.value,
            invoice_generated=quote.invoice_generated,
            invoice_id=quote.invoice_id,
            created_at=quote.created_at
        )


class ClientResponseDTO(ResponseDTO):
    """DTO for client responses."""

    id: int
    company_name: str
    client_name: str
    email: str
    phone: str
    designation: str = ""
    location: str = ""
    messages: List[MessageResponseDTO] = Field(default_factory=list)
    quote: Optional[QuoteResponseDTO] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, client: Client) -> "ClientResponseDTO":
        return cls(
            id=client.id,
            company_name=client.company_name,
            client_name=client.client_name,
            email=client.email,
            phone=client.phone,
            designation=client.designation,
            location=client.location,
            messages=[MessageResponseDTO.from_domain(m) for m in client.messages],
            quote=QuoteResponseDTO.from_domain(client.quote) if client.quote else None,
            created_at=client.created_at,
            updated_at=client.updated_at
        )
