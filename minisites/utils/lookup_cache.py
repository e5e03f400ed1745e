"""
Lookup Cache for Minisites

Remembers which tenant (if any) a custom domain maps to, so that the content
store is not queried on every request for the same host.
"""
from __future__ import annotations
import time
from typing import Callable, Dict, Optional, Protocol
from dataclasses import dataclass
from threading import Lock


@dataclass(frozen=True)
class CacheEntry:
    """A cached resolution. ``tenant_identity`` of None means confirmed absent."""
    tenant_identity: Optional[str]
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at


class LookupCache(Protocol):
    """Hostname -> tenant identity cache with a per-entry expiry.

    Implementations must never return an expired entry from ``get`` and must
    let ``put`` overwrite whatever was stored before.
    """

    def get(self, key: str) -> Optional[CacheEntry]:
        ...

    def put(self, key: str, tenant_identity: Optional[str], ttl_seconds: float) -> CacheEntry:
        ...

    def clear(self) -> None:
        ...

    def __len__(self) -> int:
        ...


class InMemoryLookupCache:
    """
    Process-local lookup cache.
    Entries are not shared between instances of the app; swap in a shared
    store with native expiry when running more than one process.
    """

    def __init__(self, max_entries: int = 10000, clock: Callable[[], float] = time.monotonic):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._max_entries = max_entries
        self._clock = clock

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if not entry.is_fresh(self._clock()):
                del self._entries[key]
                return None

            return entry

    def put(self, key: str, tenant_identity: Optional[str], ttl_seconds: float) -> CacheEntry:
        """Store a resolution, replacing any previous entry for key."""
        entry = CacheEntry(
            tenant_identity=tenant_identity,
            expires_at=self._clock() + ttl_seconds
        )

        with self._lock:
            self._entries[key] = entry
            self._cleanup_expired()
            self._evict_overflow()

        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _cleanup_expired(self):
        """Remove expired entries. Called within lock."""
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items()
            if not entry.is_fresh(now)
        ]
        for key in expired:
            del self._entries[key]

    def _evict_overflow(self):
        """Drop the entries closest to expiry until under the cap. Called within lock."""
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return

        oldest = sorted(self._entries.items(), key=lambda item: item[1].expires_at)
        for key, _ in oldest[:overflow]:
            del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            self._cleanup_expired()
            return len(self._entries)
