import logging
import time
from typing import Any, Callable, Dict, NamedTuple, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0
DEFAULT_MAX_ENTRIES = 1024


class CacheEntry(NamedTuple):
    payload: Any
    stored_at: float


class ResponseCache:
    """
    In-process TTL cache for upstream catalog responses, keyed by request fingerprint.

    Freshness is checked lazily on read: an entry is a hit only while
    `clock() - stored_at < ttl_seconds`. The cache is bounded; when full, `put`
    first sweeps expired entries and then drops the oldest insertion.

    Only touched from the event loop, so there is no locking.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fingerprint: str) -> bool:
        return self.get(fingerprint) is not None

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at < self.ttl_seconds

    def get(self, fingerprint: str) -> Optional[Any]:
        entry = self._entries.get(fingerprint)
        if entry is None:
            return None
        if not self._is_fresh(entry, self._clock()):
            del self._entries[fingerprint]
            return None
        return entry.payload

    def put(self, fingerprint: str, payload: Any) -> None:
        now = self._clock()
        # Re-inserting moves the key to the end, so insertion order tracks age
        self._entries.pop(fingerprint, None)
        if len(self._entries) >= self.max_entries:
            self.sweep(now)
        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Response cache full ({self.max_entries}); evicted {oldest[:80]}")
        self._entries[fingerprint] = CacheEntry(payload=payload, stored_at=now)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drops every expired entry and returns how many were removed."""
        now = self._clock() if now is None else now
        expired = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired response cache entries")
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
