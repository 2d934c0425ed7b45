"""Schemas package for Shortify."""

from .url import (
    ShortenResponse,
    URLInfoResponse,
    HealthResponse,
)

__all__ = [
    "ShortenResponse",
    "URLInfoResponse",
    "HealthResponse",
]
