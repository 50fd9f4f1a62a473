"""Bounded FIFO ring buffer with power-of-two capacity."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


def _next_pow2(n: int) -> int:
    if n <= 1:
        return 1
    if n & (n - 1) == 0:
        return n
    return 1 << n.bit_length()


class Ring(Generic[T]):
    """Fixed-capacity FIFO queue safe for one producer and one consumer."""

    def __init__(self, size: int) -> None:
        cap = _next_pow2(max(size, 1))
        self._cap = cap
        self._mask = cap - 1
        self._buf: list[T | None] = [None] * cap
        self._head = 0
        self._tail = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        """Number of slots in the ring."""
        return self._cap

    def __len__(self) -> int:
        with self._lock:
            return self._head - self._tail

    def enqueue(self, value: T) -> bool:
        """Append ``value``; return False when the ring is full."""
        with self._lock:
            if self._head - self._tail >= self._cap:
                return False
            self._buf[self._head & self._mask] = value
            self._head += 1
            return True

    def dequeue(self) -> T:
        """Remove and return the oldest value; raise IndexError when empty."""
        with self._lock:
            if self._tail == self._head:
                raise IndexError("dequeue from empty ring")
            idx = self._tail & self._mask
            value = self._buf[idx]
            self._buf[idx] = None
            self._tail += 1
            return value  # type: ignore[return-value]