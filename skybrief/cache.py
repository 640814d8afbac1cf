"""In-memory TTL cache shared by concurrent fetches."""

import time
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from skybrief.config import DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Cached payload plus the clock reading at which it was stored."""

    payload: Any
    stored_at: float


class Cache:
    """
    Fingerprint-keyed cache with lazy time-to-live expiry.

    Key Format:
    The fingerprint follows the format `{base_key}_{parameter}` where:
    - `base_key`: The kind of data being cached ('metar', 'taf', 'airport', 'notams')
    - `parameter`: The ICAO code, uppercased

    Examples:
    - `metar_KJFK`: METAR for KJFK
    - `airport_EGLL`: Airport record for EGLL

    An entry whose age has reached the TTL is reported as absent but is not
    removed; the next ``put`` for the same fingerprint overwrites it. The
    lock only guards the map itself and is never held while fetching.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Entry time-to-live in seconds (default 5 minutes)
            clock: Monotonic clock returning seconds, injectable for tests
        """
        if ttl_seconds <= 0:
            raise ValueError(f"TTL must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def fingerprint(base_key: str, parameter: str) -> str:
        """Build a fingerprint such as ``metar_KJFK``."""
        return f"{base_key}_{parameter.strip().upper()}"

    def get(self, fingerprint: str) -> Optional[Any]:
        """
        Look up a fingerprint.

        Returns:
            The cached payload, or None when missing or expired
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(fingerprint)
        if entry is None:
            return None
        if now - entry.stored_at >= self.ttl_seconds:
            logger.debug(f"Cache expired for {fingerprint}")
            return None
        logger.debug(f"Cache hit for {fingerprint}")
        return entry.payload

    def put(self, fingerprint: str, payload: Any) -> None:
        """Store a payload, replacing any previous entry for the fingerprint."""
        entry = CacheEntry(payload=payload, stored_at=self._clock())
        with self._lock:
            self._entries[fingerprint] = entry

    def clear(self) -> int:
        """
        Remove every entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def stats(self) -> Dict[str, Any]:
        """Number of stored entries and their fingerprints (expired ones included)."""
        with self._lock:
            fingerprints = sorted(self._entries)
        return {
            'count': len(fingerprints),
            'fingerprints': fingerprints,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
