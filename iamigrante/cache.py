"""In-memory answer cache with TTL and bounded size"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from . import config
from .text import normalize

logger = logging.getLogger(__name__)


class AnswerCache:
    """
    Time-expiring map from normalized question to answer.

    Expired entries are dropped when they are looked up. When the cache is
    full, inserting a new key evicts the entry with the oldest insertion
    time (insertion order, not last access).
    """

    def __init__(
        self,
        ttl: float = None,
        max_entries: int = None,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl = config.CACHE_TTL_SECONDS if ttl is None else ttl
        self.max_entries = config.CACHE_MAX_ENTRIES if max_entries is None else max_entries
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, question: str) -> Optional[str]:
        """Return the cached answer, or None if missing or expired."""
        key = normalize(question)
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            answer, inserted_at = item
            if self._clock() - inserted_at < self.ttl:
                return answer
            # expired
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key[:50]}")
            return None

    def put(self, question: str, answer: str):
        """Store an answer, evicting the oldest entry if the cache is full."""
        key = normalize(question)
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                self._evict_oldest()
            self._entries[key] = (answer, self._clock())

    def _evict_oldest(self):
        # Linear scan; called with the lock held
        if not self._entries:
            return
        oldest = min(self._entries, key=lambda k: self._entries[k][1])
        del self._entries[oldest]
        logger.debug(f"Cache full, evicted: {oldest[:50]}")

    def __contains__(self, question: str) -> bool:
        with self._lock:
            return normalize(question) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self):
        with self._lock:
            self._entries.clear()
