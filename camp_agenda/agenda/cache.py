"""Query cache repository for agenda client state.

Entries are keyed by tuples mirroring the REST paths, e.g.
("/api/camps", 7, "agenda"). Invalidation is by prefix: invalidating
("/api/camps", 7) marks the camp record and everything under it stale.
With exact=True only the camp record itself goes stale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

QueryKey = tuple[Any, ...]

CAMPS_ROOT = "/api/camps"


def camp_key(camp_id: int) -> QueryKey:
    return (CAMPS_ROOT, camp_id)


def agenda_key(camp_id: int) -> QueryKey:
    return (CAMPS_ROOT, camp_id, "agenda")


def clinicians_key(camp_id: int) -> QueryKey:
    return (CAMPS_ROOT, camp_id, "clinicians")


def locations_key(camp_id: int) -> QueryKey:
    return (CAMPS_ROOT, camp_id, "locations")


def staff_key() -> QueryKey:
    return ("/api/staff",)


@dataclass
class CacheEntry:
    value: Any
    stale: bool = False


class QueryCache:
    """In-process cache of server reads with prefix invalidation."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, CacheEntry] = {}

    def get(self, key: QueryKey) -> Any | None:
        """Return the cached value, or None when missing or stale."""
        entry = self._entries.get(key)
        if entry is None or entry.stale:
            return None
        return entry.value

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value)

    def invalidate(self, key: QueryKey, *, exact: bool = False) -> int:
        """Mark entries stale.

        Args:
            key: Key or key prefix to invalidate
            exact: Only invalidate `key` itself, leaving entries nested under it fresh

        Returns:
            Number of entries invalidated
        """
        count = 0
        for cached_key, entry in self._entries.items():
            matched = cached_key == key if exact else cached_key[: len(key)] == key
            if matched:
                entry.stale = True
                count += 1
        logger.debug(f"[CACHE] Invalidated {count} entries {'at' if exact else 'under'} {key}")
        return count

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale
