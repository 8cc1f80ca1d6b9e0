"""In-memory request cache with de-duplication of concurrent fetches."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

LOGGER = logging.getLogger(__name__)


class QueryCache:
    """Keep provider responses in memory so repeated queries are reused.

    Only one loader runs per key at a time; callers asking for a key that is
    already being fetched wait for that fetch instead of issuing their own.
    Failures are handed to every waiter and never cached.
    """

    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._inflight: Dict[Hashable, Future] = {}

    def fetch(self, key: Hashable, loader: Callable[[], Any], ttl: Optional[float] = None) -> Any:
        ttl = self.ttl_seconds if ttl is None else ttl
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._clock() - entry[0] < ttl:
                LOGGER.debug("Cache hit for %s", key)
                return entry[1]
            pending = self._inflight.get(key)
            owner = pending is None
            if owner:
                pending = Future()
                self._inflight[key] = pending

        if not owner:
            LOGGER.debug("Waiting on in-flight fetch for %s", key)
            return pending.result()

        try:
            value = loader()
        except BaseException as exc:
            with self._lock:
                self._inflight.pop(key, None)
            pending.set_exception(exc)
            raise
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._inflight.pop(key, None)
        pending.set_result(value)
        return value

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)
