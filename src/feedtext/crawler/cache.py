"""In-memory LRU cache for extraction results."""

from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict

from ..models import ExtractedArticle

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 200


def content_signature(*parts: str | None) -> str:
    """SHA-256 hex digest of the ``|``-joined parts (None counts as empty).

    Lone surrogates are encoded as-is, so every str has a stable digest.
    """
    combined = "|".join(part or "" for part in parts)
    # Feed parsers can hand over lone surrogates
    return hashlib.sha256(combined.encode("utf-8", "surrogatepass")).hexdigest()


def make_cache_key(url: str, signature: str) -> str:
    return f"{url}|{signature}"


class ExtractionCache:
    """Bounded, thread-safe LRU map from cache key to ``ExtractedArticle``.

    Entries leave only when capacity forces out the least recently used
    one. ``key_lock`` hands out one lock per key so concurrent callers with
    the same key can wait for a single computation.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[str, ExtractedArticle] = OrderedDict()
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> ExtractedArticle | None:
        with self._lock:
            article = self._entries.get(key)
            if article is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return article

    def put(self, key: str, article: ExtractedArticle) -> None:
        with self._lock:
            self._entries[key] = article
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self._key_locks.pop(evicted, None)
                logger.info(f"Evicted cached extraction {evicted[:80]}")

    def key_lock(self, key: str) -> threading.Lock:
        """Return the lock that serializes work on ``key``."""
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._key_locks.clear()
            self.hits = 0
            self.misses = 0
