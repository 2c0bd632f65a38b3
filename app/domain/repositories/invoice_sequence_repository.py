"""
Invoice sequence repository interface.
"""

from abc import ABC, abstractmethod


class InvoiceSequenceRepository(ABC):
    """Per-year counter backing invoice numbers."""

    @abstractmethod
    def next_value(self, year: int, number_prefix: str) -> int:
        """
        Atomically increment and return the counter for ``year``.

        When the year has no counter yet it is seeded from the highest
        sequence already used by invoice numbers starting with ``number_prefix``.
        Values are committed as soon as they are issued and never handed out twice.
        """
        pass
