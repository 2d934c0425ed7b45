"""Short code generation utilities module.

Two interchangeable generators produce candidate codes:

- ``RandomCodeGenerator`` draws characters from a 62-character alphabet with
  a cryptographically strong source. Candidates can collide and must be
  checked against the store.
- ``CounterCodeGenerator`` encodes the next value of a shared counter with a
  salted, reversible Hashids transform. Candidates never collide while the
  counter is the single source of ids.

Neither generator touches the mapping store.
"""

import re
import secrets
import string
import logging
from datetime import datetime
from typing import Optional

from hashids import Hashids

from ..core.config import settings
from ..core.counter import build_counter

logger = logging.getLogger(__name__)


# Characters allowed in short codes
ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


class CodeGenerator:
    """Produces candidate short codes."""

    collision_free = False

    def generate(self) -> str:
        raise NotImplementedError


class RandomCodeGenerator(CodeGenerator):
    """Uniform random codes of a fixed length."""

    def __init__(self, length: Optional[int] = None):
        self.length = length or settings.code_length

    def generate(self) -> str:
        return "".join(secrets.choice(ALPHABET) for _ in range(self.length))


class CounterCodeGenerator(CodeGenerator):
    """Salted Hashids encoding of a shared monotonic counter.

    Sequential ids map to non-sequential codes under a given salt.
    """

    collision_free = True

    def __init__(self, counter, salt: str, min_length: int = 7):
        self.counter = counter
        self.hashids = Hashids(salt=salt, min_length=min_length, alphabet=ALPHABET)

    def generate(self) -> str:
        next_id = self.counter.increment()
        code = self.hashids.encode(next_id)
        logger.debug(f"Generated short code {code} from id {next_id}")
        return code

    def decode(self, code: str) -> int:
        """Decode a short code back to its counter id.

        Args:
            code: Short code.

        Returns:
            The original id, or -1 if the code does not decode.
        """
        decoded = self.hashids.decode(code)
        return decoded[0] if decoded else -1


def build_generator(app_settings, db) -> CodeGenerator:
    """Create the generator selected by ``app_settings.code_strategy``.

    Args:
        app_settings: Settings instance.
        db: Database instance, used by the SQLite counter backend.

    Returns:
        Code generator.
    """
    if app_settings.code_strategy == "counter":
        return CounterCodeGenerator(
            build_counter(app_settings, db),
            salt=app_settings.hashids_salt,
            min_length=app_settings.counter_min_length,
        )
    return RandomCodeGenerator(app_settings.code_length)


def validate_short_code(code: str, app_settings=None) -> bool:
    """Validate short code format.

    Args:
        code: Short code to validate.
        app_settings: Settings holding the length bounds. Defaults to the global settings.

    Returns:
        True if valid, False otherwise.
    """
    if not code:
        return False
    app_settings = app_settings or settings
    if not app_settings.min_short_code_length <= len(code) <= app_settings.max_short_code_length:
        return False
    if not re.match(r"^[a-zA-Z0-9]+$", code):
        return False
    return True


def is_url_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    """Check if a mapping has expired.

    A mapping expiring exactly at ``now`` is still active.

    Args:
        expires_at: Expiration timestamp, or None for no expiry.
        now: Current time.

    Returns:
        True if expired, False otherwise.
    """
    if expires_at is None:
        return False
    return expires_at < now


def create_short_url(base_url: str, short_code: str) -> str:
    """Create full short URL from base URL and short code.

    Args:
        base_url: Base URL of the service.
        short_code: Short code.

    Returns:
        Full short URL string.
    """
    return f"{base_url.rstrip('/')}/{short_code}"
