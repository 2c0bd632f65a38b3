"""Numbering service for invoice identifiers.
Numbers look like INV-2026-0001 and restart at 0001 every calendar year.
"""

import re
from datetime import datetime
from typing import Callable, NamedTuple, Optional

from app.domain.models.base import utcnow
from app.domain.repositories.invoice_sequence_repository import InvoiceSequenceRepository


DEFAULT_PREFIX = "INV"

_NUMBER_PATTERN = re.compile(r"^(?P<prefix>[A-Za-z]+)-(?P<year>\d{4})-(?P<sequence>\d+)$")


class ParsedInvoiceNumber(NamedTuple):
    prefix: str
    year: int
    sequence: int


def year_prefix(year: int, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}-{year}-"


def format_invoice_number(year: int, sequence: int, prefix: str = DEFAULT_PREFIX) -> str:
    """Format a number, zero-padding the sequence to at least four digits."""
    return f"{year_prefix(year, prefix)}{sequence:04d}"


def parse_invoice_number(value: str) -> Optional[ParsedInvoiceNumber]:
    """Split an invoice number into its parts, or None if it is not in the standard form."""
    match = _NUMBER_PATTERN.match(value or "")
    if not match:
        return None
    return ParsedInvoiceNumber(
        prefix=match.group("prefix"),
        year=int(match.group("year")),
        sequence=int(match.group("sequence"))
    )


class InvoiceNumberGenerator:
    """
    Issues unique, year-scoped invoice numbers.

    The year is read from ``clock`` on every call, and the sequence value comes
    from an atomic per-year counter, so two callers never receive the same number.
    """

    def __init__(
        self,
        sequence_repository: InvoiceSequenceRepository,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = utcnow
    ):
        self.sequence_repository = sequence_repository
        self.prefix = prefix
        self.clock = clock

    def generate(self) -> str:
        year = self.clock().year
        sequence = self.sequence_repository.next_value(year, year_prefix(year, self.prefix))
        return format_invoice_number(year, sequence, self.prefix)
