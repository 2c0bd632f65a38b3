"""
Quote value object.
A client holds at most one quote; a new quote replaces the previous one wholesale.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from app.domain.models.base import ValidationError, utcnow
from app.domain.services.billing_service import BillingService


QUOTE_TAX_RATE = 0.10


class QuoteStatus(str, Enum):
    """Quote status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: str) -> "QuoteStatus":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(f"Invalid quote status '{value}'. Must be one of: {allowed}", "status")


@dataclass
class QuoteItem:
    """Single priced line of a quote. Price is in cents."""

    name: str
    price: int
    quantity: int = 1

    def validate(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Item name is required", "items")
        if self.price < 0:
            raise ValidationError("Item price cannot be negative", "items")
        if self.quantity < 1:
            raise ValidationError("Item quantity must be at least 1", "items")

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "price": self.price, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuoteItem":
        return cls(name=data["name"], price=int(data["price"]), quantity=int(data.get("quantity") or 1))


@dataclass
class Quote:
    """
    Priced proposal for a client.

    Totals are only ever produced by ``Quote.create``; status fields are the
    only part of a quote that changes after creation.
    """

    items: List[QuoteItem] = field(default_factory=list)
    subtotal: int = 0
    tax: int = 0
    total: int = 0
    status: QuoteStatus = QuoteStatus.PENDING
    invoice_generated: bool = False
    invoice_id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(cls, items: List[QuoteItem]) -> "Quote":
        """Build a pending quote with totals computed at the fixed quote tax rate."""
        if not items:
            raise ValidationError("Quote must have at least one item", "items")
        for item in items:
            item.validate()

        totals = BillingService().calculate_totals(
            ((item.price, item.quantity) for item in items),
            QUOTE_TAX_RATE
        )
        return cls(
            items=list(items),
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
        )

    def update_status(
        self,
        status: Optional[str] = None,
        invoice_generated: Optional[bool] = None,
        invoice_id: Optional[str] = None
    ) -> None:
        """Apply only the supplied status fields."""
        if status is not None:
            self.status = QuoteStatus.parse(status)
        if invoice_generated is not None:
            self.invoice_generated = invoice_generated
        if invoice_id is not None:
            self.invoice_id = invoice_id

    @property
    def can_convert(self) -> bool:
        return not self.invoice_generated and self.status != QuoteStatus.REJECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "status": self.status.value,
            "invoice_generated": self.invoice_generated,
            "invoice_id": self.invoice_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quote":
        return cls(
            items=[QuoteItem.from_dict(item) for item in data.get("items", [])],
            subtotal=int(data.get("subtotal", 0)),
            tax=int(data.get("tax", 0)),
            total=int(data.get("total", 0)),
            status=QuoteStatus(data.get("status", QuoteStatus.PENDING.value)),
            invoice_generated=bool(data.get("invoice_generated", False)),
            invoice_id=data.get("invoice_id"),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else utcnow(),
        )
