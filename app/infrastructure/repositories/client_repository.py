"""
Client repository implementation using SQLAlchemy.
"""

import logging
from typing import Optional, List

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.domain.models.client import Client
from app.domain.repositories.client_repository import ClientRepository as ClientRepositoryInterface
from app.domain.models.base import EntityNotFoundError, ConcurrentModificationError
from app.infrastructure.db.models import ClientModel
from app.infrastructure.mappers.client_mapper import ClientMapper

logger = logging.getLogger(__name__)


class SQLAlchemyClientRepository(ClientRepositoryInterface):
    """SQLAlchemy implementation of client repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = ClientMapper()
        self.model = ClientModel

    def save(self, client: Client) -> Client:
        """Insert or update a client in its own transaction."""
        try:
            if client.is_new:
                model = self.mapper.domain_to_model(client)
                self.session.add(model)
            else:
                model = self._load_for_update(client.id, client.owner_id)
                if model is None:
                    raise EntityNotFoundError("Client", client.id)
                if model.version != client.version:
                    raise ConcurrentModificationError("Client", client.id)
                self.mapper.domain_to_model(client, model)

            self.session.commit()
        except StaleDataError:
            self.session.rollback()
            logger.warning(f"Concurrent update detected for client {client.id}")
            raise ConcurrentModificationError("Client", client.id)
        except Exception:
            self.session.rollback()
            raise

        return self.mapper.model_to_domain(model)

    def find_by_id(self, client_id: int, owner_id: str) -> Optional[Client]:
        """Get an owned client by ID."""
        model = self.session.query(ClientModel).filter_by(
            id=client_id,
            owner_id=owner_id
        ).first()

        if not model:
            return None

        return self.mapper.model_to_domain(model)

    def find_by_owner_id(self, owner_id: str) -> List[Client]:
        """Get clients by owner, newest first."""
        models = (
            self.session.query(ClientModel)
            .filter_by(owner_id=owner_id)
            .order_by(ClientModel.created_at.desc(), ClientModel.id.desc())
            .all()
        )
        return [self.mapper.model_to_domain(model) for model in models]

    def delete(self, client_id: int, owner_id: str) -> bool:
        """Delete an owned client."""
        model = self._load_for_update(client_id, owner_id)

        if not model:
            self.session.rollback()
            return False

        self.session.delete(model)
        self.session.commit()
        return True

    def _load_for_update(self, client_id: int, owner_id: str) -> Optional[ClientModel]:
        return (
            self.session.query(ClientModel)
            .filter_by(id=client_id, owner_id=owner_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
