"""Billing service for calculating line totals, taxes, and invoice statistics.
All arithmetic is done in integer minor units (cents).
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Tuple, Union, TYPE_CHECKING

from app.domain.models.base import ValidationError

if TYPE_CHECKING:
    from app.domain.models.invoice import Invoice


CENTS = Decimal("0.01")
# Tax rates are stored with four decimal places
TAX_RATE_STEP = Decimal("0.0001")

Number = Union[int, float, str, Decimal]


def to_minor_units(amount: Number, field: str = "price") -> int:
    """Convert a major-unit amount (e.g. 12.345) to cents, rounding half up."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid amount: {amount}", field)
    if not value.is_finite():
        raise ValidationError(f"Invalid amount: {amount}", field)
    return int((value.quantize(CENTS, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def to_major_units(cents: int) -> float:
    """Convert cents back to a major-unit float for serialization."""
    return float(Decimal(cents) / 100)


@dataclass(frozen=True)
class BillingTotals:
    """Computed totals for a set of line items."""

    subtotal: int
    tax: int
    total: int


@dataclass(frozen=True)
class InvoiceStats:
    """Aggregated invoice figures for one owner."""

    total: int = 0
    paid: int = 0
    pending: int = 0
    overdue: int = 0
    total_revenue: int = 0
    pending_amount: int = 0


class BillingService:
    """
    Domain service for billing calculations.
    Shared by quotes and invoices so both reconcile the same way.
    """

    def validate_tax_rate(self, tax_rate: Number) -> Decimal:
        try:
            rate = Decimal(str(tax_rate))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Invalid tax rate: {tax_rate}", "tax_rate")
        if not rate.is_finite() or rate < 0 or rate > 1:
            raise ValidationError("Tax rate must be between 0 and 1", "tax_rate")
        return rate.quantize(TAX_RATE_STEP, rounding=ROUND_HALF_UP)

    def calculate_tax(self, subtotal: int, tax_rate: Number) -> int:
        """Tax in cents for a subtotal in cents, rounded half up."""
        rate = self.validate_tax_rate(tax_rate)
        return int((Decimal(subtotal) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def calculate_totals(self, lines: Iterable[Tuple[int, int]], tax_rate: Number) -> BillingTotals:
        """
        Calculate subtotal, tax and total.

        Args:
            lines: (unit price in cents, quantity) pairs
            tax_rate: Fraction between 0 and 1

        Returns:
            BillingTotals where total == subtotal + tax
        """
        subtotal = 0
        for price, quantity in lines:
            if price < 0:
                raise ValidationError("Price cannot be negative", "price")
            if quantity < 1:
                raise ValidationError("Quantity must be at least 1", "quantity")
            subtotal += price * quantity

        tax = self.calculate_tax(subtotal, tax_rate)
        return BillingTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)

    def compute_invoice_stats(self, invoices: Iterable["Invoice"]) -> InvoiceStats:
        """Count invoices by status and sum paid and pending totals."""
        total = paid = pending = overdue = 0
        total_revenue = pending_amount = 0

        for invoice in invoices:
            total += 1
            status = invoice.status.value
            if status == "paid":
                paid += 1
                total_revenue += invoice.total
            elif status == "pending":
                pending += 1
                pending_amount += invoice.total
            elif status == "overdue":
                overdue += 1

        return InvoiceStats(
            total=total,
            paid=paid,
            pending=pending,
            overdue=overdue,
            total_revenue=total_revenue,
            pending_amount=pending_amount
        )
