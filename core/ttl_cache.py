"""
Key/value cache with per-entry expiry and single-flight loading.

Expiry is lazy: entries are dropped when read after their TTL, and every
write sweeps out whatever has expired. There is no sweeper thread. `get_or_load` guarantees at most one loader per key at a
time; concurrent callers for the same key block on the same Future.
"""
from __future__ import annotations

import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    created_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now >= self.created_at + self.ttl


class TtlCache(Generic[K, V]):
    def __init__(self, default_ttl: float = 60.0, clock: Callable[[], float] = time.monotonic) -> None:
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive: {default_ttl}")
        self.default_ttl = float(default_ttl)
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[K, CacheEntry[V]] = {}
        self._in_flight: Dict[K, Future] = {}

    def _live_entry(self, key: K) -> Optional[CacheEntry[V]]:
        # caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        expired = [k for k, e in self._entries.items() if e.expired(now)]
        for k in expired:
            del self._entries[k]

    def _ttl(self, ttl: Optional[float]) -> float:
        ttl = self.default_ttl if ttl is None else float(ttl)
        if ttl <= 0:
            raise ValueError(f"ttl must be positive: {ttl}")
        return ttl

    def get(self, key: K, default: Any = None) -> Any:
        with self._lock:
            entry = self._live_entry(key)
            return default if entry is None else entry.value

    def set(self, key: K, value: V, ttl: Optional[float] = None) -> None:
        ttl = self._ttl(ttl)
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries[key] = CacheEntry(value=value, created_at=now, ttl=ttl)
            # A running loader keeps serving its own waiters but no longer owns the key.
            self._in_flight.pop(key, None)

    def delete(self, key: K) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return self._live_entry(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for e in self._entries.values() if not e.expired(now))

    def in_flight(self, key: K) -> bool:
        with self._lock:
            return key in self._in_flight

    def get_or_load(self, key: K, loader: Callable[[], V], ttl: Optional[float] = None) -> V:
        """
        Return the cached value for `key`, or run `loader` to produce it.

        Only the first caller for a missing key runs `loader`; callers arriving
        while it runs wait for the same result or exception. Failures are not
        cached.
        """
        ttl = self._ttl(ttl)
        with self._lock:
            entry = self._live_entry(key)
            if entry is not None:
                return entry.value
            future = self._in_flight.get(key)
            owner = future is None
            if owner:
                future = Future()
                future.set_running_or_notify_cancel()
                self._in_flight[key] = future

        if not owner:
            return future.result()

        try:
            value = loader()
        except BaseException as exc:
            with self._lock:
                if self._in_flight.get(key) is future:
                    del self._in_flight[key]
            future.set_exception(exc)
            raise

        with self._lock:
            if self._in_flight.get(key) is future:
                now = self._clock()
                self._sweep(now)
                self._entries[key] = CacheEntry(value=value, created_at=now, ttl=ttl)
                del self._in_flight[key]
        future.set_result(value)
        return value
