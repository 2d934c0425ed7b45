"""Core package - configuration, storage and counters."""

from .config import settings, get_settings
from .database import Database, db, get_db, get_test_db
from .exceptions import (
    ShortifyError,
    DuplicateKeyError,
    AssignmentExhausted,
    NotFoundError,
    ExpiredError,
    CounterUnavailableError,
)

__all__ = [
    "settings",
    "get_settings",
    "Database",
    "db",
    "get_db",
    "get_test_db",
    "ShortifyError",
    "DuplicateKeyError",
    "AssignmentExhausted",
    "NotFoundError",
    "ExpiredError",
    "CounterUnavailableError",
]
