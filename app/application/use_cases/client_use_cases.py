"""
Client use cases for the application layer.
Owner-scoped client CRUD and the append-only message log.
"""

import logging
from typing import List

from app.application.use_cases.base_use_case import BaseUseCase
from app.application.dto.client_dto import (
    CreateClientRequestDTO, UpdateClientRequestDTO, AddMessageRequestDTO
)
from app.domain.models.base import EntityNotFoundError
from app.domain.models.client import Client, ClientMessage
from app.domain.models.user import AuthenticatedUser
from app.domain.repositories.client_repository import ClientRepository


logger = logging.getLogger(__name__)


class ClientUseCase(BaseUseCase):
    """Base for use cases that work on a single owned client."""

    def __init__(self, client_repository: ClientRepository):
        self.client_repository = client_repository

    def _get_owned_client(self, owner_id: str, client_id: int) -> Client:
        client = self.client_repository.find_by_id(client_id, owner_id)
        if client is None:
            raise EntityNotFoundError("Client", client_id)
        return client


class CreateClientUseCase(ClientUseCase):
    """Use case for creating a new client."""

    async def execute(self, owner_id: str, request: CreateClientRequestDTO) -> Client:
        client = Client.create(
            owner_id=owner_id,
            company_name=request.company_name,
            client_name=request.client_name,
            email=request.email,
            phone=request.phone,
            designation=request.designation,
            location=request.location
        )

        saved_client = self.client_repository.save(client)
        logger.info(f"Client {saved_client.id} created for owner {owner_id}")
        return saved_client


class GetClientUseCase(ClientUseCase):
    async def execute(self, owner_id: str, client_id: int) -> Client:
        return self._get_owned_client(owner_id, client_id)


class ListClientsUseCase(ClientUseCase):
    """Newest clients first."""

    async def execute(self, owner_id: str) -> List[Client]:
        return self.client_repository.find_by_owner_id(owner_id)


class UpdateClientUseCase(ClientUseCase):
    """Use case for updating client contact information."""

    async def execute(self, owner_id: str, client_id: int, request: UpdateClientRequestDTO) -> Client:
        client = self._get_owned_client(owner_id, client_id)

        client.update_info(
            company_name=request.company_name,
            client_name=request.client_name,
            email=request.email,
            phone=request.phone,
            designation=request.designation,
            location=request.location
        )

        return self.client_repository.save(client)


class DeleteClientUseCase(ClientUseCase):
    async def execute(self, owner_id: str, client_id: int) -> None:
        if not self.client_repository.delete(client_id, owner_id):
            raise EntityNotFoundError("Client", client_id)
        logger.info(f"Client {client_id} deleted by owner {owner_id}")


class AddClientMessageUseCase(ClientUseCase):
    """
    Append a message to the client's log.
    Without an explicit author the message is signed by the caller.
    """

    async def execute(
        self,
        user: AuthenticatedUser,
        client_id: int,
        request: AddMessageRequestDTO
    ) -> ClientMessage:
        client = self._get_owned_client(user.user_id, client_id)

        message = client.add_message(request.text, request.author or user.name)
        self.client_repository.save(client)
        return message
