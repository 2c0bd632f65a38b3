"""
Client domain model.
Represents a customer with an append-only message log and an optional current quote.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.domain.models.base import AggregateRoot, EntityNotFoundError, ValidationError, utcnow
from app.domain.models.quote import Quote


DEFAULT_MESSAGE_AUTHOR = "Admin"

REQUIRED_FIELDS = ("company_name", "client_name", "email", "phone")


@dataclass(frozen=True)
class ClientMessage:
    """A single entry of the client's message log. Never modified once written."""

    text: str
    author: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "author": self.author,
            "timestamp": self.timestamp.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientMessage":
        return cls(
            text=data["text"],
            author=data.get("author") or DEFAULT_MESSAGE_AUTHOR,
            timestamp=datetime.fromisoformat(data["timestamp"])
        )


@dataclass
class Client(AggregateRoot):
    """
    Client aggregate root.
    Every client belongs to exactly one owner.
    """

    owner_id: str = ""
    company_name: str = ""
    client_name: str = ""
    email: str = ""
    phone: str = ""
    designation: str = ""
    location: str = ""

    messages: List[ClientMessage] = field(default_factory=list)
    quote: Optional[Quote] = None

    @classmethod
    def create(
        cls,
        owner_id: str,
        company_name: str,
        client_name: str,
        email: str,
        phone: str,
        designation: Optional[str] = None,
        location: Optional[str] = None
    ) -> "Client":
        """Create a new client from raw input, normalizing whitespace and email case."""
        client = cls(
            owner_id=owner_id,
            company_name=(company_name or "").strip(),
            client_name=(client_name or "").strip(),
            email=(email or "").strip().lower(),
            phone=(phone or "").strip(),
            designation=(designation or "").strip(),
            location=(location or "").strip(),
        )
        client.validate()
        return client

    def validate(self) -> None:
        """Validate client state."""
        if not self.owner_id:
            raise ValidationError("Owner ID is required", "owner_id")

        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                raise ValidationError(f"{name} is required", name)

        if len(self.company_name) > 255:
            raise ValidationError("Company name too long (max 255 characters)", "company_name")

        if '@' not in self.email:
            raise ValidationError(f"Invalid email format: {self.email}", "email")

    def update_info(self, **changes: Any) -> None:
        """
        Update contact fields. Fields passed as None are left untouched;
        required fields cannot be blanked.
        """
        for name in REQUIRED_FIELDS + ("designation", "location"):
            value = changes.get(name)
            if value is None:
                continue
            value = value.strip()
            if name == "email":
                value = value.lower()
            setattr(self, name, value)

        self.validate()
        self.mark_as_updated()

    def add_message(self, text: str, author: Optional[str] = None) -> ClientMessage:
        """Append a message to the log with a server-generated timestamp."""
        if not text or not text.strip():
            raise ValidationError("Message text is required", "text")

        message = ClientMessage(
            text=text.strip(),
            author=(author or "").strip() or DEFAULT_MESSAGE_AUTHOR,
            timestamp=utcnow()
        )
        self.messages.append(message)
        self.mark_as_updated()
        return message

    def attach_quote(self, quote: Quote) -> None:
        """Replace the current quote."""
        self.quote = quote
        self.mark_as_updated()

    def require_quote(self) -> Quote:
        if self.quote is None:
            raise EntityNotFoundError("Quote", self.id)
        return self.quote

    def update_quote_status(
        self,
        status: Optional[str] = None,
        invoice_generated: Optional[bool] = None,
        invoice_id: Optional[str] = None
    ) -> Quote:
        quote = self.require_quote()
        quote.update_status(status, invoice_generated, invoice_id)
        self.mark_as_updated()
        return quote
