"""
JWT token handler.
Validates bearer tokens issued by the identity provider and extracts the principal.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from app.config import get_settings
from app.domain.models.base import ValidationError
from app.domain.models.user import AuthenticatedUser


class JWTHandler:
    """Handles JWT token validation and user extraction."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        self.settings = get_settings()
        self.jwt_secret = secret_key or self.settings.jwt_secret_key
        self.jwt_algorithm = algorithm or self.settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            Dict containing token payload

        Raises:
            ValidationError: If token is invalid or expired
        """
        # Remove 'Bearer ' prefix if present
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_exp": True, "verify_aud": False}
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}")

        if not payload.get('sub'):
            raise ValidationError("Token missing user ID (sub claim)")

        if 'exp' not in payload:
            raise ValidationError("Token missing expiration (exp claim)")

        return payload

    def get_user_id(self, token: str) -> str:
        """
        Extract user ID from JWT token.

        Raises:
            ValidationError: If token is invalid
        """
        payload = self.verify_token(token)
        return payload['sub']

    def get_user(self, token: str) -> AuthenticatedUser:
        """Build the request principal from the token claims."""
        payload = self.verify_token(token)
        return AuthenticatedUser(
            user_id=str(payload['sub']),
            name=payload.get('name'),
            email=payload.get('email')
        )

    def generate_test_token(
        self,
        user_id: str,
        name: Optional[str] = "Test User",
        email: str = "test@example.com",
        expires_minutes: Optional[int] = None
    ) -> str:
        """
        Generate a JWT token for development/testing purposes.

        Args:
            user_id: User ID to include in token
            name: Display name used as the default message author
            email: User email (default: test@example.com)
            expires_minutes: Token lifetime, defaults to the configured expiry

        Returns:
            JWT token string
        """
        if expires_minutes is None:
            expires_minutes = self.settings.jwt_access_token_expire_minutes

        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=expires_minutes)

        payload = {
            "sub": user_id,  # Subject (user ID)
            "email": email,
            "iat": int(now.timestamp()),  # Issued at
            "exp": int(expire.timestamp()),  # Expires at
        }
        if name:
            payload["name"] = name

        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)
