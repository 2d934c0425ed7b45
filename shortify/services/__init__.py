"""Services package for Shortify."""

from .shortener import UniquenessResolver, ShortenerService
from ..utils.shortener import build_generator


def build_service(app_settings, db) -> ShortenerService:
    """Create a ShortenerService wired from settings."""
    return ShortenerService(
        store=db,
        generator=build_generator(app_settings, db),
        base_url=app_settings.base_url,
        max_retries=app_settings.max_retries,
    )


__all__ = ["UniquenessResolver", "ShortenerService", "build_service"]
