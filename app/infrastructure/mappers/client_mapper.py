"""
Client mapper for converting between domain entities and database models.
"""

from typing import Optional

from app.domain.models.client import Client, ClientMessage
from app.domain.models.quote import Quote
from app.infrastructure.db.models import ClientModel


class ClientMapper:
    """Maps between Client domain entity and ClientModel database model."""

    def domain_to_model(self, client: Client, model: Optional[ClientModel] = None) -> ClientModel:
        """
        Copy a Client onto a ClientModel, creating one if needed.
        id, version and timestamps are left to the database.
        """
        if model is None:
            model = ClientModel(owner_id=client.owner_id, created_at=client.created_at)

        model.company_name = client.company_name
        model.client_name = client.client_name
        model.email = client.email
        model.phone = client.phone
        model.designation = client.designation
        model.location = client.location
        # New containers so the JSON columns are flagged as changed
        model.messages = [message.to_dict() for message in client.messages]
        model.quote = client.quote.to_dict() if client.quote else None
        return model

    def model_to_domain(self, model: ClientModel) -> Client:
        """Convert ClientModel to Client domain entity."""
        client = Client(
            owner_id=model.owner_id,
            company_name=model.company_name,
            client_name=model.client_name,
            email=model.email,
            phone=model.phone,
            designation=model.designation or "",
            location=model.location or "",
            messages=[ClientMessage.from_dict(data) for data in (model.messages or [])],
            quote=Quote.from_dict(model.quote) if model.quote else None
        )

        # Set entity metadata
        client.id = model.id
        client.created_at = model.created_at
        client.updated_at = model.updated_at
        client.version = model.version or 1

        return client
