"""Models package for Shortify."""

from .url import ShortenRequest, UrlMapping, ErrorResponse

__all__ = ["ShortenRequest", "UrlMapping", "ErrorResponse"]
