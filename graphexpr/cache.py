from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict
from typing import Optional, Tuple

from .path import PathData

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, int]


def cache_key(text: str, point_count: int) -> CacheKey:
    """Content address for a generation request."""
    digest = hashlib.sha256(text.encode("utf8")).hexdigest()
    return digest, int(point_count)


class GraphCache:
    """LRU cache of generated path data keyed by expression text and point count.

    Generation is pure, so entries never need invalidation; ``maxsize`` only
    bounds memory. Safe to share between threads.
    """

    def __init__(self, maxsize: Optional[int] = 128):
        if maxsize is not None and maxsize < 1:
            raise ValueError(f"maxsize must be >= 1 or None, got {maxsize}")
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[CacheKey, PathData]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, text: str, point_count: int) -> Optional[PathData]:
        key = cache_key(text, point_count)
        with self._lock:
            path = self._entries.get(key)
            if path is None:
                self.misses += 1
                logger.debug("Cache miss for %r with %d points", text, point_count)
                return None
            self._entries.move_to_end(key)
            self.hits += 1
        logger.debug("Cache hit for %r with %d points", text, point_count)
        return path

    def put(self, text: str, point_count: int, path: PathData) -> None:
        key = cache_key(text, point_count)
        with self._lock:
            self._entries[key] = path
            self._entries.move_to_end(key)
            if self.maxsize is not None:
                while len(self._entries) > self.maxsize:
                    self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        text, point_count = item
        with self._lock:
            return cache_key(text, point_count) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
