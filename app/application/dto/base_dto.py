"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Any, Optional
from datetime import datetime, date, time, timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.models.base import utcnow


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(
        # JSON uses camelCase, Python code uses snake_case
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class RequestDTO(BaseDTO):
    """
    Base class for request DTOs.
    Unknown keys are dropped, so totals sent by a caller never reach the domain.
    """

    model_config = ConfigDict(extra="ignore")


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""
    pass


class HealthCheckResponseDTO(BaseDTO):
    """Health check response DTO."""

    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=utcnow, description="Check timestamp")
    version: Optional[str] = Field(default=None, description="Application version")
    environment: Optional[str] = Field(default=None, description="Deployment environment")


class ErrorResponseDTO(BaseDTO):
    """Error response DTO."""

    error: str = Field(description="Error type")
    message: str = Field(description="Error message")
    status_code: int = Field(description="HTTP status code")


def coerce_datetime(value: Any) -> Any:
    """
    Accept a date, a "YYYY-MM-DD" string or an ISO datetime and return a naive
    UTC datetime. Anything else is passed through for pydantic to reject.
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            try:
                return datetime.combine(date.fromisoformat(text), time.min)
            except ValueError:
                return value
        try:
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return value

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    return value


def format_date(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d") if value else None
