"""Short link creation and resolution.

``UniquenessResolver`` turns generator candidates into a stored mapping with
a code no other mapping uses. ``ShortenerService`` builds on it to create
links and resolve codes back to their URLs, honoring expiration.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from ..core.exceptions import AssignmentExhausted, DuplicateKeyError, NotFoundError, ExpiredError
from ..models.url import UrlMapping
from ..schemas.url import ShortenResponse, URLInfoResponse
from ..utils.clock import utcnow, ensure_utc
from ..utils.shortener import CodeGenerator, create_short_url, is_url_expired

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 10


class UniquenessResolver:
    """Assigns collision-free short codes.

    Candidates are probed against the store before insert. An insert rejected
    by the store's uniqueness constraint counts as one more collision and
    uses up an attempt like any other.
    """

    def __init__(self, generator: CodeGenerator, store, max_retries: int = DEFAULT_MAX_RETRIES):
        self.generator = generator
        self.store = store
        self.max_retries = max_retries

    def assign(self) -> str:
        """Return a candidate code that is not stored yet.

        Raises:
            AssignmentExhausted: Every attempt collided.
        """
        code, _ = self._assign_from(1)
        return code

    def create(self, original_url: str, expires_at: Optional[datetime] = None) -> UrlMapping:
        """Store a new mapping under a freshly assigned code.

        Args:
            original_url: The original long URL.
            expires_at: Optional expiration timestamp.

        Returns:
            The stored mapping.

        Raises:
            AssignmentExhausted: No free code within ``max_retries`` attempts.
        """
        attempt = 1
        while True:
            code, attempt = self._assign_from(attempt)
            try:
                return self.store.save(code, original_url, expires_at)
            except DuplicateKeyError:
                logger.warning(
                    f"Short code {code} was taken concurrently "
                    f"(attempt {attempt}/{self.max_retries})"
                )
                attempt += 1

    def _assign_from(self, first_attempt: int) -> tuple[str, int]:
        for attempt in range(first_attempt, self.max_retries + 1):
            code = self.generator.generate()
            if self.generator.collision_free or not self.store.exists_by_code(code):
                return code, attempt
            logger.warning(
                f"Short code collision on {code} (attempt {attempt}/{self.max_retries})"
            )
        logger.error(f"No free short code after {self.max_retries} attempts")
        raise AssignmentExhausted(self.max_retries)


class ShortenerService:
    """Service layer for creating and resolving short URLs."""

    def __init__(
        self,
        store,
        generator: CodeGenerator,
        base_url: str,
        max_retries: int = DEFAULT_MAX_RETRIES,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize the service.

        Args:
            store: Mapping store (see ``Database``).
            generator: Candidate code generator.
            base_url: Base URL prepended to codes in short links.
            max_retries: Maximum generation attempts per link.
            clock: Returns the current aware UTC time.
        """
        self.store = store
        self.base_url = base_url
        self.clock = clock
        self.resolver = UniquenessResolver(generator, store, max_retries)

    def shorten(self, original_url: str, expires_at: Optional[datetime] = None) -> ShortenResponse:
        """Create a short URL.

        The URL is expected to be validated by the caller.

        Args:
            original_url: The original long URL.
            expires_at: Optional expiration timestamp.

        Returns:
            The created short link.
        """
        mapping = self.resolver.create(original_url, ensure_utc(expires_at))
        logger.info(f"Created short URL: {mapping.short_code} -> {original_url}")
        return ShortenResponse(
            short_code=mapping.short_code,
            original_url=mapping.original_url,
            short_url=create_short_url(self.base_url, mapping.short_code),
            created_at=mapping.created_at,
            expires_at=mapping.expires_at,
        )

    def resolve(self, short_code: str) -> str:
        """Get the original URL for a short code.

        Args:
            short_code: The short code to look up.

        Returns:
            The original URL.

        Raises:
            NotFoundError: No mapping uses this code.
            ExpiredError: The mapping's expiration instant has passed.
        """
        mapping = self.store.find_by_code(short_code)
        if mapping is None:
            raise NotFoundError(short_code)
        if is_url_expired(mapping.expires_at, self.clock()):
            raise ExpiredError(short_code)

        self.store.increment_access_count(short_code)
        logger.info(f"Redirecting short code {short_code} to {mapping.original_url}")
        return mapping.original_url

    def get_info(self, short_code: str) -> URLInfoResponse:
        """Get the stored details of a short URL, expired or not."""
        mapping = self.store.find_by_code(short_code)
        if mapping is None:
            raise NotFoundError(short_code)
        return URLInfoResponse(
            short_code=mapping.short_code,
            original_url=mapping.original_url,
            short_url=create_short_url(self.base_url, mapping.short_code),
            created_at=mapping.created_at,
            expires_at=mapping.expires_at,
            access_count=mapping.access_count,
            is_expired=is_url_expired(mapping.expires_at, self.clock()),
        )
