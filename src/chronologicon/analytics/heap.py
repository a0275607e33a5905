"""Typed min-priority queue over ``(cost, node_id)`` pairs.

Entries with equal cost come out in insertion order (FIFO): each push takes a
sequence number from a counter and the heap orders on ``(cost, sequence)``.
Node ids never take part in the comparison.

>>> pq = MinPriorityQueue()
>>> pq.push(5, "b"); pq.push(5, "a"); pq.push(1, "c")
>>> [pq.pop() for _ in range(3)]
[(1, 'c'), (5, 'b'), (5, 'a')]
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field


@dataclass(order=True, frozen=True, slots=True)
class QueueEntry:
    cost: int
    sequence: int
    node_id: str = field(compare=False)


class MinPriorityQueue:
    """Binary min-heap keyed by cumulative cost with a stable tie-break."""

    __slots__ = ("_heap", "_counter")

    def __init__(self) -> None:
        self._heap: list[QueueEntry] = []
        self._counter = itertools.count()

    def push(self, cost: int, node_id: str) -> None:
        heapq.heappush(self._heap, QueueEntry(cost, next(self._counter), node_id))

    def pop(self) -> tuple[int, str]:
        """Remove and return the cheapest ``(cost, node_id)``.

        Raises
        ------
        IndexError
            If the queue is empty.
        """
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        entry = heapq.heappop(self._heap)
        return entry.cost, entry.node_id

    def peek(self) -> tuple[int, str] | None:
        if not self._heap:
            return None
        entry = self._heap[0]
        return entry.cost, entry.node_id

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


__all__ = ["MinPriorityQueue", "QueueEntry"]
