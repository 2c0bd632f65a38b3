"""
Input validation utilities shared by the request DTOs.
Free text is reduced to plain text; emails and amounts are normalized.
"""

import re
import html
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

import bleach


PATTERNS = {
    'email': re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'),
    'currency_noise': re.compile(r'[$€£¥,\s]'),
}

MAX_AMOUNT = Decimal('999999999.99')


class SecurityValidator:
    """Validators that keep markup out of stored text."""

    @staticmethod
    def strip_markup(value: Optional[str]) -> Optional[str]:
        """Remove every HTML tag, leaving the text content."""
        if not isinstance(value, str):
            return value

        cleaned = bleach.clean(value, tags=[], attributes={}, strip=True)
        # bleach escapes entities; stored text is plain and escaped again on output
        return html.unescape(cleaned).strip()


class DataValidator:
    """Validators for common data formats."""

    @staticmethod
    def validate_email(email: str) -> str:
        """Validate email format and lower-case it."""
        if not isinstance(email, str):
            raise ValueError("Email must be a string")

        email = email.strip().lower()

        if not PATTERNS['email'].match(email):
            raise ValueError("Invalid email format")

        return email

    @staticmethod
    def validate_amount(amount: Union[str, float, int, Decimal]) -> Decimal:
        """
        Parse a major-unit amount. Rounding to cents happens later in the
        billing service, so extra decimal places are accepted here.
        """
        if isinstance(amount, bool):
            raise ValueError("Invalid amount format")
        try:
            if isinstance(amount, str):
                amount = PATTERNS['currency_noise'].sub('', amount)
            value = Decimal(str(amount))
        except InvalidOperation:
            raise ValueError("Invalid amount format")

        if not value.is_finite():
            raise ValueError("Invalid amount format")
        if value < 0:
            raise ValueError("Amount cannot be negative")
        if value > MAX_AMOUNT:
            raise ValueError("Amount exceeds maximum allowed value")

        return value
