"""Single-slot in-memory cache with TTL."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Generic, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """The cached payload together with the time it was stored."""

    payload: T
    timestamp: datetime

    def age(self, now: datetime) -> timedelta:
        return now - self.timestamp

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return self.age(now) < ttl


class SingleSlotCache(Generic[T]):
    """
    Process-wide cache holding exactly one entry.

    The slot is replaced as a whole on every write, so a reader always sees
    a matching payload/timestamp pair and the last completed write wins.
    Entries are never evicted; an entry older than the TTL is simply not
    returned by get().
    """

    def __init__(self, ttl_seconds: int = 900):
        self._ttl = timedelta(seconds=ttl_seconds)
        self._entry: CacheEntry[T] | None = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    async def get(self, now: datetime | None = None) -> CacheEntry[T] | None:
        """Return the entry if it is still fresh at `now`, else None."""
        entry = self._entry
        if entry is None:
            return None
        if not entry.is_fresh(now or utcnow(), self._ttl):
            return None
        return entry

    async def peek(self) -> CacheEntry[T] | None:
        """Return the entry regardless of its age."""
        return self._entry

    async def set(self, payload: T, timestamp: datetime | None = None) -> CacheEntry[T]:
        """Replace the slot with a new entry."""
        entry = CacheEntry(payload=payload, timestamp=timestamp or utcnow())
        self._entry = entry
        logger.debug(f"Cache slot replaced at {entry.timestamp.isoformat()}")
        return entry

    async def clear(self) -> None:
        """Drop the entry."""
        self._entry = None

    def stats(self, now: datetime | None = None) -> dict:
        """Return cache statistics."""
        entry = self._entry
        age = entry.age(now or utcnow()).total_seconds() if entry else None
        return {
            "populated": entry is not None,
            "age_seconds": age,
            "ttl_seconds": self._ttl.total_seconds(),
        }
