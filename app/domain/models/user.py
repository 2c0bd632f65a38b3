"""
Authenticated user.
Users are managed by the identity provider; this service only sees the token claims.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthenticatedUser:
    """The principal making a request. All data is scoped by ``user_id``."""

    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or self.user_id
