"""In-memory key/value cache with a per-entry expiry. Eviction is lazy: expired entries are only removed when read."""

import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

DEFAULT_TTL = 30.0  # seconds


@dataclass
class CacheEntry(Generic[T]):
    data: T
    expires_at: float


class ExpiringCache:
    """Key -> value store where every entry expires `ttl` seconds after it was set."""

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store value, overwriting any existing entry for the key."""
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(data=value, expires_at=self._clock() + ttl)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the stored value, or `default` if the key was never set or has expired.
        ---
        Pass a sentinel as default to tell a cached None apart from a missing entry.
        """
        entry = self._entries.get(key)
        if entry is None:
            return default

        if self._clock() > entry.expires_at:
            del self._entries[key]
            return default

        return entry.data

    def clear(self) -> None:
        """Evict everything (forces a full resync on the next read)."""
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        """Raw membership, without expiry check or eviction."""
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
