"""Date-keyed cache of climate results with a fixed freshness window."""

import json
import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from spirograph.ingest.staleness import is_cache_stale
from spirograph.models.climate import ClimateResult
from spirograph.models.common import utc_now
from spirograph.storage import kv_repo

logger = logging.getLogger(__name__)

CACHE_PREFIX = "climate-data-"
DEFAULT_MAX_AGE_HOURS = 24.0


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> bool: ...


class SqliteStore:
    """KeyValueStore over the kv_store table."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, key: str) -> str | None:
        return kv_repo.get_value(self.conn, key)

    def set(self, key: str, value: str) -> None:
        kv_repo.set_value(self.conn, key, value)

    def delete(self, key: str) -> bool:
        return kv_repo.delete_value(self.conn, key)


def cache_key(date_key: str) -> str:
    return CACHE_PREFIX + date_key


class ClimateCache:
    """Lazy-expiring cache: stale or malformed entries read as absent.

    Storage errors never propagate; a failed read is a miss and a failed
    write skips caching for that key.
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.max_age_hours = max_age_hours
        self.clock = clock

    def get(self, date_key: str) -> ClimateResult | None:
        try:
            raw = self.store.get(cache_key(date_key))
        except (sqlite3.Error, OSError) as e:
            logger.warning("Cache read failed for %s: %s", date_key, e)
            return None
        if raw is None:
            return None

        try:
            entry = json.loads(raw)
        except (ValueError, TypeError):
            logger.debug("Malformed cache entry for %s", date_key)
            return None
        if not isinstance(entry, dict) or not isinstance(entry.get("cached_at"), str):
            return None
        if is_cache_stale(entry["cached_at"], self.max_age_hours, self.clock()):
            logger.debug("Cache entry for %s expired", date_key)
            return None
        return ClimateResult.from_dict(entry.get("data"))

    def put(self, date_key: str, result: ClimateResult) -> bool:
        """Store a result. Returns False when the write failed."""
        payload = json.dumps(
            {"cached_at": self.clock().isoformat(), "data": result.to_dict()}
        )
        try:
            self.store.set(cache_key(date_key), payload)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not cache climate data for %s: %s", date_key, e)
            return False
        return True

    def invalidate(self, date_key: str) -> bool:
        try:
            return self.store.delete(cache_key(date_key))
        except (sqlite3.Error, OSError) as e:
            logger.warning("Cache delete failed for %s: %s", date_key, e)
            return False
