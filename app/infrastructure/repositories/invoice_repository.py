"""
Invoice repository implementation using SQLAlchemy.
"""

import logging
from datetime import datetime
from typing import Optional, List

from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.domain.models.base import EntityNotFoundError, ConcurrentModificationError, InvoiceNumberConflictError
from app.domain.models.invoice import Invoice, InvoiceStatus
from app.domain.repositories.invoice_repository import InvoiceRepository as InvoiceRepositoryInterface
from app.infrastructure.db.models import InvoiceModel
from app.infrastructure.mappers.invoice_mapper import InvoiceMapper

logger = logging.getLogger(__name__)


class SQLAlchemyInvoiceRepository(InvoiceRepositoryInterface):
    """SQLAlchemy implementation of invoice repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = InvoiceMapper()
        self.model = InvoiceModel

    def save(self, invoice: Invoice) -> Invoice:
        """Insert or update an invoice in its own transaction."""
        if invoice.is_new:
            return self._insert(invoice)

        try:
            model = self._load_for_update(invoice.invoice_number, invoice.owner_id)
            if model is None:
                raise EntityNotFoundError("Invoice", invoice.invoice_number)
            if model.version != invoice.version:
                raise ConcurrentModificationError("Invoice", invoice.invoice_number)

            self.mapper.domain_to_model(invoice, model)
            self.session.commit()
        except StaleDataError:
            self.session.rollback()
            logger.warning(f"Concurrent update detected for invoice {invoice.invoice_number}")
            raise ConcurrentModificationError("Invoice", invoice.invoice_number)
        except Exception:
            self.session.rollback()
            raise

        return self.mapper.model_to_domain(model)

    def _insert(self, invoice: Invoice) -> Invoice:
        model = self.mapper.domain_to_model(invoice)
        try:
            self.session.add(model)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            taken = self.session.query(InvoiceModel.id).filter_by(
                invoice_number=invoice.invoice_number
            ).first()
            if taken:
                raise InvoiceNumberConflictError(invoice.invoice_number)
            raise

        return self.mapper.model_to_domain(model)

    def find_by_number(self, invoice_number: str, owner_id: str) -> Optional[Invoice]:
        model = self.session.query(InvoiceModel).filter_by(
            invoice_number=invoice_number,
            owner_id=owner_id
        ).first()

        if not model:
            return None

        return self.mapper.model_to_domain(model)

    def find_by_owner_id(
        self,
        owner_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None
    ) -> List[Invoice]:
        query = self.session.query(InvoiceModel).filter(InvoiceModel.owner_id == owner_id)

        if status is not None:
            query = query.filter(InvoiceModel.status == status.value)

        if search:
            term = search.strip().lower()
            query = query.filter(or_(
                func.lower(InvoiceModel.invoice_number).contains(term, autoescape=True),
                func.lower(InvoiceModel.client_name).contains(term, autoescape=True),
                func.lower(InvoiceModel.company_name).contains(term, autoescape=True),
            ))

        models = query.order_by(InvoiceModel.created_at.desc(), InvoiceModel.id.desc()).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def delete(self, invoice_number: str, owner_id: str) -> bool:
        model = self._load_for_update(invoice_number, owner_id)

        if not model:
            self.session.rollback()
            return False

        self.session.delete(model)
        self.session.commit()
        return True

    def mark_overdue(self, now: datetime) -> int:
        """Single conditional UPDATE; rows already past pending are never touched."""
        try:
            result = self.session.execute(
                update(InvoiceModel)
                .where(
                    InvoiceModel.status == InvoiceStatus.PENDING.value,
                    InvoiceModel.due_date < now
                )
                .values(
                    status=InvoiceStatus.OVERDUE.value,
                    updated_at=now,
                    version=InvoiceModel.version + 1
                )
                .execution_options(synchronize_session=False)
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return result.rowcount

    def _load_for_update(self, invoice_number: str, owner_id: str) -> Optional[InvoiceModel]:
        return (
            self.session.query(InvoiceModel)
            .filter_by(invoice_number=invoice_number, owner_id=owner_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
