"""Bucketed max-priority queue.

Items sharing a priority come out in insertion order. The Huffman hint
generator depends on that tie-break to produce reproducible hints.
"""

from __future__ import annotations

import heapq
from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Map of priority -> FIFO bucket; the highest priority pops first."""

    def __init__(self) -> None:
        self._buckets: dict[int, deque[T]] = {}
        # Negated priorities, so the heap root is the highest bucket key.
        self._keys: list[int] = []
        self._size = 0

    def push(self, priority: int, item: T) -> None:
        bucket = self._buckets.get(priority)
        if bucket is None:
            bucket = self._buckets[priority] = deque()
            heapq.heappush(self._keys, -priority)
        bucket.append(item)
        self._size += 1

    def pop(self) -> T | None:
        """Remove and return the oldest item of the highest priority, or None."""
        if not self._keys:
            return None

        priority = -self._keys[0]
        bucket = self._buckets[priority]
        item = bucket.popleft()
        if not bucket:
            del self._buckets[priority]
            heapq.heappop(self._keys)
        self._size -= 1
        return item

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size
