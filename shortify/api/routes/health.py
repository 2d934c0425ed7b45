"""Health check API routes."""

from fastapi import APIRouter, Depends

from ...core.database import Database, get_db
from ...schemas.url import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health_check(db: Database = Depends(get_db)) -> dict:
    """Health check endpoint.

    Touches the store so an unreachable database surfaces as a 500.

    Returns:
        Health status and the number of stored mappings.
    """
    return {"status": "healthy", "mappings": db.count()}
