"""Response schemas for Shortify."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ShortenResponse(BaseModel):
    """Response model for created short URL."""

    short_code: str
    original_url: str
    short_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None


class URLInfoResponse(BaseModel):
    """Response model for URL info."""

    short_code: str
    original_url: str
    short_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    access_count: int
    is_expired: bool


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    mappings: int
