"""
Invoice domain model.
Holds line items and derives subtotal, tax and total from them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from app.domain.models.base import AggregateRoot, ValidationError, utcnow
from app.domain.services.billing_service import BillingService


DEFAULT_TAX_RATE = 0.10


class InvoiceStatus(str, Enum):
    """Invoice status."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Optional[str]) -> "InvoiceStatus":
        """Parse a status case-insensitively."""
        allowed = ", ".join(s.value for s in cls)
        if value is None or not str(value).strip():
            raise ValidationError(f"Status is required. Must be one of: {allowed}", "status")
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Invalid status '{value}'. Must be one of: {allowed}", "status")


@dataclass
class InvoiceLineItem:
    """Individual line item in an invoice. Price is in cents."""

    description: str
    quantity: int
    price: int

    def validate(self) -> None:
        """Validate line item."""
        if not self.description or not self.description.strip():
            raise ValidationError("Item description is required", "items")

        if self.quantity < 1:
            raise ValidationError("Item quantity must be at least 1", "items")

        if self.price < 0:
            raise ValidationError("Item price cannot be negative", "items")

    @property
    def amount(self) -> int:
        return self.quantity * self.price

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "quantity": self.quantity,
            "price": self.price
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceLineItem":
        return cls(
            description=data["description"],
            quantity=int(data["quantity"]),
            price=int(data["price"])
        )


@dataclass
class Invoice(AggregateRoot):
    """
    Invoice aggregate root.

    subtotal, tax and total are never taken from callers; they are
    recomputed by ``recalculate_totals`` before every save.
    """

    owner_id: str = ""
    invoice_number: str = ""

    # Bill-to details
    client_name: str = ""
    company_name: str = ""
    email: str = ""
    phone: str = ""
    client_id: Optional[int] = None

    items: List[InvoiceLineItem] = field(default_factory=list)
    tax_rate: float = DEFAULT_TAX_RATE

    # Amounts in cents
    subtotal: int = 0
    tax: int = 0
    total: int = 0

    status: InvoiceStatus = InvoiceStatus.PENDING
    due_date: Optional[datetime] = None
    notes: str = ""
    paid_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        owner_id: str,
        client_name: str,
        company_name: str,
        email: str,
        phone: str,
        items: List[InvoiceLineItem],
        due_date: Optional[datetime],
        tax_rate: Optional[float] = None,
        notes: Optional[str] = None,
        client_id: Optional[int] = None
    ) -> "Invoice":
        """Create a pending invoice. The number is assigned when it is saved."""
        invoice = cls(
            owner_id=owner_id,
            client_name=(client_name or "").strip(),
            company_name=(company_name or "").strip(),
            email=(email or "").strip().lower(),
            phone=(phone or "").strip(),
            client_id=client_id,
            items=list(items or []),
            tax_rate=DEFAULT_TAX_RATE if tax_rate is None else tax_rate,
            due_date=due_date,
            notes=notes or "",
        )
        invoice.validate()
        invoice.recalculate_totals()
        return invoice

    def validate(self) -> None:
        """Validate invoice state."""
        if not self.owner_id:
            raise ValidationError("Owner ID is required", "owner_id")

        for name in ("client_name", "company_name", "email", "phone"):
            if not getattr(self, name):
                raise ValidationError(f"{name} is required", name)

        if not self.items:
            raise ValidationError("Invoice must have at least one item", "items")

        for item in self.items:
            item.validate()

        if self.due_date is None:
            raise ValidationError("due_date is required", "due_date")

        BillingService().validate_tax_rate(self.tax_rate)

    def recalculate_totals(self) -> None:
        """Derive subtotal, tax and total from the line items."""
        billing = BillingService()
        self.tax_rate = float(billing.validate_tax_rate(self.tax_rate))
        totals = billing.calculate_totals(
            ((item.price, item.quantity) for item in self.items),
            self.tax_rate
        )
        self.subtotal = totals.subtotal
        self.tax = totals.tax
        self.total = totals.total

    def apply_changes(self, **changes: Any) -> None:
        """
        Merge a partial update. Keys that are absent or None are ignored,
        except ``items`` which may not be emptied.
        """
        if "items" in changes and changes["items"] is not None:
            if not changes["items"]:
                raise ValidationError("Invoice must have at least one item", "items")
            self.items = list(changes["items"])

        for name in ("client_name", "company_name", "phone"):
            if changes.get(name) is not None:
                setattr(self, name, changes[name].strip())

        if changes.get("email") is not None:
            self.email = changes["email"].strip().lower()

        for name in ("tax_rate", "due_date", "notes", "client_id"):
            if changes.get(name) is not None:
                setattr(self, name, changes[name])

        if changes.get("status") is not None:
            self.set_status(changes["status"])

        self.validate()
        self.recalculate_totals()
        self.mark_as_updated()

    def set_status(self, status: Any, now: Optional[datetime] = None) -> None:
        """
        Change status. Any status may follow any other; moving to paid
        stamps paid_at.
        """
        new_status = status if isinstance(status, InvoiceStatus) else InvoiceStatus.parse(status)
        self.status = new_status
        if new_status == InvoiceStatus.PAID:
            self.paid_at = now or utcnow()
        self.mark_as_updated()

    def is_past_due(self, now: Optional[datetime] = None) -> bool:
        return (
            self.status == InvoiceStatus.PENDING
            and self.due_date is not None
            and self.due_date < (now or utcnow())
        )

    def duplicate(self, payment_terms_days: int = 30, now: Optional[datetime] = None) -> "Invoice":
        """
        Copy the bill-to details, items and pricing into a new pending invoice
        due ``payment_terms_days`` from now.
        """
        now = now or utcnow()
        return Invoice.create(
            owner_id=self.owner_id,
            client_name=self.client_name,
            company_name=self.company_name,
            email=self.email,
            phone=self.phone,
            items=[
                InvoiceLineItem(item.description, item.quantity, item.price)
                for item in self.items
            ],
            due_date=now + timedelta(days=payment_terms_days),
            tax_rate=self.tax_rate,
            notes=self.notes,
            client_id=self.client_id,
        )
