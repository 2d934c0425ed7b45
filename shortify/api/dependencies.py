"""FastAPI dependencies for the API routes."""

from fastapi import Depends

from ..core.config import Settings, get_settings
from ..core.database import Database, get_db
from ..services import ShortenerService, build_service


def get_service(
    db: Database = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
) -> ShortenerService:
    """Get a ShortenerService for the current request.

    Args:
        db: Database instance.
        app_settings: Application settings.

    Returns:
        ShortenerService instance.
    """
    return build_service(app_settings, db)
