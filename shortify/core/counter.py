"""Shared monotonic counters for the counter-encoding code strategy.

Each ``increment()`` returns a distinct integer exactly once, across every
process that shares the same backend.
"""

import sqlite3
import logging
from functools import lru_cache

from redis import Redis, RedisError

from .exceptions import CounterUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_COUNTER_KEY = "shortify:counter"


class SqliteCounter:
    """Counter stored as a row in the store's ``counters`` table."""

    def __init__(self, db, name: str = DEFAULT_COUNTER_KEY):
        self.db = db
        self.name = name

    def increment(self) -> int:
        try:
            return self.db.increment_counter(self.name)
        except sqlite3.Error as e:
            logger.error(f"Counter {self.name} increment failed: {e}")
            raise CounterUnavailableError(f"Counter {self.name} unavailable") from e


class RedisCounter:
    """Counter backed by Redis ``INCR``."""

    def __init__(self, client: Redis, key: str = DEFAULT_COUNTER_KEY):
        self.client = client
        self.key = key

    def increment(self) -> int:
        try:
            value = self.client.incr(self.key)
        except RedisError as e:
            logger.error(f"Redis counter {self.key} increment failed: {e}")
            raise CounterUnavailableError(f"Counter {self.key} unavailable") from e
        return int(value)


@lru_cache()
def get_redis_client(url: str) -> Redis:
    """Get a cached Redis client for ``url``."""
    return Redis.from_url(url, decode_responses=True)


def build_counter(settings, db):
    """Create the counter configured by ``settings.counter_backend``."""
    if settings.counter_backend == "redis":
        return RedisCounter(get_redis_client(settings.redis_url), settings.counter_key)
    return SqliteCounter(db, settings.counter_key)
