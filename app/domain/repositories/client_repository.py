"""
Client repository interface.
Defines the contract for client data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.models.client import Client


class ClientRepository(ABC):
    """
    Repository interface for Client aggregate.
    Every lookup takes the owner so clients never leak across users.
    """

    @abstractmethod
    def save(self, client: Client) -> Client:
        """
        Save a client entity.
        Returns the saved client with updated version and timestamps.
        Raises ConcurrentModificationError if the stored version moved on.
        """
        pass

    @abstractmethod
    def find_by_id(self, client_id: int, owner_id: str) -> Optional[Client]:
        """
        Find an owned client by its ID.
        Returns None if not found or owned by someone else.
        """
        pass

    @abstractmethod
    def find_by_owner_id(self, owner_id: str) -> List[Client]:
        """
        Find all clients owned by a specific user, newest first.
        """
        pass

    @abstractmethod
    def delete(self, client_id: int, owner_id: str) -> bool:
        """
        Delete an owned client. Returns False if there was nothing to delete.
        """
        pass
