# storefront/services/description_cache.py
"""
Two-tier cache for generated product descriptions.

The in-process tier is always present and is read first. A durable tier
(Supabase) is optional. Reads prefer the in-process tier and never copy a
durable hit back into it; writes go to both tiers.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from ..utils.rwlock import RWLock

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 24 * 60 * 60
KEY_PREFIX = "ai-desc-"


class CacheError(Exception):
    """A cache tier could not be read or written. Distinct from a miss."""


def description_key(product_id: str) -> str:
    """The one key derivation shared by every tier."""
    return f"{KEY_PREFIX}{product_id}"


class CacheTier(Protocol):
    """
    A store addressed by description key. `get` returns None for a miss.
    Tiers should raise CacheError on failure; EnhancementCache wraps anything
    else a durable tier raises into CacheError as well.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...


@dataclass(frozen=True)
class CacheEntry:
    value: str
    expires_at: float


class MemoryCacheTier:
    """Process-local mapping of key to CacheEntry behind a reader/writer lock."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = RWLock()

    def get(self, key: str) -> str | None:
        with self._lock.read_locked():
            entry = self._entries.get(key)
        # Expired entries are left in place and overwritten by the next set
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry.value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        entry = CacheEntry(value=value, expires_at=self._clock() + ttl_seconds)
        with self._lock.write_locked():
            self._entries[key] = entry

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)


class SupabaseCacheStore:
    """
    Durable tier backed by a Supabase table:

        ai_descriptions(key text primary key, value text, expires_at timestamptz)

    Postgres has no per-row TTL, so expiry is stored with the row and enforced on read.
    """

    def __init__(self, client, table: str = "ai_descriptions", clock: Callable[[], float] = time.time):
        self.client = client
        self.table = table
        self._clock = clock

    def get(self, key: str) -> str | None:
        try:
            res = self.client.table(self.table).select("value, expires_at").eq("key", key).limit(1).execute()
        except Exception as e:
            raise CacheError(f"Durable cache read failed for '{key}': {e}") from e

        if not res.data:
            return None
        row = res.data[0]
        value = row.get("value")
        if not value:
            return None

        expires_at = row.get("expires_at")
        if expires_at:
            try:
                expiry = datetime.fromisoformat(expires_at)
            except (TypeError, ValueError) as e:
                raise CacheError(f"Durable cache row for '{key}' has a malformed expiry: {expires_at!r}") from e
            if expiry.tzinfo is None:
                expiry = expiry.replace(tzinfo=timezone.utc)
            if expiry.timestamp() <= self._clock():
                return None
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        row = {
            "key": key,
            "value": value,
            "expires_at": (now + timedelta(seconds=ttl_seconds)).isoformat(),
        }
        try:
            self.client.table(self.table).upsert(row).execute()
        except Exception as e:
            raise CacheError(f"Durable cache write failed for '{key}': {e}") from e


class EnhancementCache:
    """Composes the in-process tier with zero or one durable tier."""

    def __init__(
        self,
        durable: CacheTier | None = None,
        clock: Callable[[], float] = time.time,
        ttl_seconds: int = CACHE_TTL_SECONDS,
    ):
        self.memory = MemoryCacheTier(clock=clock)
        self.durable = durable
        self.ttl_seconds = ttl_seconds

    @property
    def mode(self) -> str:
        return "durable" if self.durable is not None else "in-memory"

    def get(self, product_id: str) -> tuple[str, bool]:
        """
        Returns (value, found). The in-process tier is authoritative when it holds
        an unexpired entry. Raises CacheError if the durable tier fails.
        """
        key = description_key(product_id)

        value = self.memory.get(key)
        if value is not None:
            return value, True

        if self.durable is None:
            return "", False

        try:
            value = self.durable.get(key)
        except CacheError:
            raise
        except Exception as e:
            raise CacheError(f"Durable cache read failed for '{key}': {e}") from e
        if not value:
            return "", False
        return value, True

    def set(self, product_id: str, value: str) -> None:
        """
        Writes both tiers. The in-process write always lands, even when the
        durable write then raises CacheError.
        """
        key = description_key(product_id)
        self.memory.set(key, value, self.ttl_seconds)

        if self.durable is not None:
            try:
                self.durable.set(key, value, self.ttl_seconds)
            except CacheError:
                raise
            except Exception as e:
                raise CacheError(f"Durable cache write failed for '{key}': {e}") from e

    def size(self) -> int:
        return len(self.memory)
