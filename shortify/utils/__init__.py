"""Utils package for Shortify."""

from .clock import utcnow, ensure_utc
from .shortener import (
    ALPHABET,
    CodeGenerator,
    RandomCodeGenerator,
    CounterCodeGenerator,
    build_generator,
    validate_short_code,
    create_short_url,
    is_url_expired,
)

__all__ = [
    "utcnow",
    "ensure_utc",
    "ALPHABET",
    "CodeGenerator",
    "RandomCodeGenerator",
    "CounterCodeGenerator",
    "build_generator",
    "validate_short_code",
    "create_short_url",
    "is_url_expired",
]
