"""Pydantic models for Shortify."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

MAX_URL_LENGTH = 255


class ShortenRequest(BaseModel):
    """Model for creating a short URL."""

    url: str = Field(..., description="The original long URL to shorten")
    expires_at: Optional[datetime] = Field(
        None, description="Expiration timestamp (UTC when no offset is given)"
    )

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("URL cannot be blank")
        if len(value) > MAX_URL_LENGTH:
            raise ValueError(f"URL cannot exceed {MAX_URL_LENGTH} characters")
        if not value.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return value


class UrlMapping(BaseModel):
    """A stored short code to URL mapping."""

    id: int
    short_code: str
    original_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    access_count: int = 0


class ErrorResponse(BaseModel):
    """Model for error responses."""

    status: int
    message: str
    timestamp: datetime
    errors: Optional[dict[str, str]] = None
