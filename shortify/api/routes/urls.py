"""URL shortening API routes.

This module contains all endpoints for short link operations:
- Create short URL (POST /api/shorten)
- Get URL info (GET /api/urls/{short_code})
- Redirect to original URL (GET /{short_code})

Routes are sync functions and run in FastAPI's threadpool, one flow
per request.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from ...core.config import Settings, get_settings
from ...core.exceptions import NotFoundError
from ...models.url import ShortenRequest, ErrorResponse
from ...schemas.url import ShortenResponse, URLInfoResponse
from ...services import ShortenerService
from ...utils.shortener import validate_short_code
from ..dependencies import get_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["URLs"])


@router.post(
    "/api/shorten",
    response_model=ShortenResponse,
    status_code=201,
    responses={
        201: {"description": "Short URL created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "No free short code could be assigned"},
        503: {"model": ErrorResponse, "description": "Id counter unavailable"},
    },
    summary="Create a short URL",
    description="Create a new short URL from a long URL, optionally expiring at a given time.",
)
def create_short_url_endpoint(
    url_data: ShortenRequest,
    service: ShortenerService = Depends(get_service),
) -> ShortenResponse:
    """Create a short URL from a long URL.

    Args:
        url_data: URL creation data.
        service: Shortener service.

    Returns:
        Created URL information.
    """
    logger.info(f"Received shorten request for URL: {url_data.url}")
    return service.shorten(url_data.url, url_data.expires_at)


@router.get(
    "/api/urls/{short_code}",
    response_model=URLInfoResponse,
    responses={
        200: {"description": "URL information retrieved"},
        404: {"model": ErrorResponse, "description": "Short URL not found"},
    },
    summary="Get URL information",
    description="Get information about a short URL, including expired ones.",
)
def get_url_info(
    short_code: str,
    service: ShortenerService = Depends(get_service),
    app_settings: Settings = Depends(get_settings),
) -> URLInfoResponse:
    """Get URL information.

    Args:
        short_code: The short URL code.
        service: Shortener service.
        app_settings: Application settings.

    Returns:
        URL information.
    """
    if not validate_short_code(short_code, app_settings):
        raise NotFoundError(short_code)
    return service.get_info(short_code)


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=302,
    responses={
        302: {"description": "Redirect to original URL"},
        404: {"model": ErrorResponse, "description": "Short URL not found"},
        410: {"model": ErrorResponse, "description": "Short URL has expired"},
    },
    summary="Redirect to original URL",
    description="Redirect to the original URL associated with the short code.",
)
def redirect_to_url(
    short_code: str,
    service: ShortenerService = Depends(get_service),
    app_settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """Redirect to the original URL.

    Args:
        short_code: The short URL code.
        service: Shortener service.
        app_settings: Application settings.

    Returns:
        Redirect response to original URL.
    """
    # Malformed codes can never be stored
    if not validate_short_code(short_code, app_settings):
        raise NotFoundError(short_code)

    original_url = service.resolve(short_code)
    return RedirectResponse(url=original_url, status_code=302)
