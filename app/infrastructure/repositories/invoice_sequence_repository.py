"""
Per-year invoice counter backed by the invoice_sequences table.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.models.base import ConcurrentModificationError
from app.domain.repositories.invoice_sequence_repository import InvoiceSequenceRepository
from app.domain.services.numbering_service import parse_invoice_number
from app.infrastructure.db.models import InvoiceModel, InvoiceSequenceModel

logger = logging.getLogger(__name__)


class SQLAlchemyInvoiceSequenceRepository(InvoiceSequenceRepository):
    """
    Increments the year's counter with a single UPDATE, which holds the row's
    write lock until commit. The first caller of a year inserts the row; losing
    that insert race is an IntegrityError and the increment is simply retried.
    """

    def __init__(self, session: Session, max_attempts: int = 5):
        self.session = session
        self.max_attempts = max_attempts

    def next_value(self, year: int, number_prefix: str) -> int:
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = self.session.execute(
                    update(InvoiceSequenceModel)
                    .where(InvoiceSequenceModel.year == year)
                    .values(last_value=InvoiceSequenceModel.last_value + 1)
                    .execution_options(synchronize_session=False)
                )

                if result.rowcount == 0:
                    seed = self._highest_issued(number_prefix)
                    self.session.add(InvoiceSequenceModel(year=year, last_value=seed + 1))
                    self.session.flush()
                    logger.info(f"Started invoice sequence for {year} after {seed}")

                value = self.session.execute(
                    select(InvoiceSequenceModel.last_value)
                    .where(InvoiceSequenceModel.year == year)
                ).scalar_one()
                self.session.commit()
                return value

            except IntegrityError:
                self.session.rollback()
                logger.debug(f"Invoice sequence for {year} created concurrently, retrying (attempt {attempt})")
            except Exception:
                self.session.rollback()
                raise

        raise ConcurrentModificationError("InvoiceSequence", year)

    def _highest_issued(self, number_prefix: str) -> int:
        """Highest sequence among existing numbers with this prefix, 0 if none."""
        numbers = self.session.execute(
            select(InvoiceModel.invoice_number)
            .where(InvoiceModel.invoice_number.startswith(number_prefix, autoescape=True))
        ).scalars()

        highest = 0
        for number in numbers:
            parsed = parse_invoice_number(number)
            if parsed and parsed.sequence > highest:
                highest = parsed.sequence
        return highest
