"""
TTL cache

A single-value, in-process cache with an injectable clock. Values are
refreshed lazily: the loader only runs when the cached value is missing or
older than ``ttl`` seconds. The cache is not synchronized; concurrent
callers hitting an expired entry may both run the loader.
"""

from __future__ import annotations

import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Holds one value for ``ttl`` seconds."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._value: Optional[T] = None
        self._stored_at: Optional[float] = None

    def get(self) -> Optional[T]:
        """Return the cached value, or ``None`` when empty or expired."""
        if self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self.ttl:
            return None
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._stored_at = self._clock()

    def get_or_load(self, loader: Callable[[], T]) -> T:
        """
        Return the cached value or call ``loader`` and cache its result.

        Exceptions raised by ``loader`` propagate and leave the cache untouched.
        """
        cached = self.get()
        if cached is not None:
            return cached
        value = loader()
        self.set(value)
        return value

    def invalidate(self) -> None:
        self._value = None
        self._stored_at = None

    @property
    def age(self) -> Optional[float]:
        if self._stored_at is None:
            return None
        return self._clock() - self._stored_at
