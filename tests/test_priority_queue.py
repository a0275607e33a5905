# tests/test_priority_queue.py
"""Tests for the typed min-priority queue."""

from __future__ import annotations

import pytest

from chronologicon.analytics.heap import MinPriorityQueue


def test_pops_in_cost_order() -> None:
    pq = MinPriorityQueue()
    for cost, node in [(30, "c"), (10, "a"), (20, "b"), (5, "z")]:
        pq.push(cost, node)
    assert [pq.pop() for _ in range(4)] == [(5, "z"), (10, "a"), (20, "b"), (30, "c")]


def test_equal_costs_come_out_in_insertion_order() -> None:
    pq = MinPriorityQueue()
    for node in ["m", "b", "x", "a"]:
        pq.push(7, node)
    assert [pq.pop()[1] for _ in range(4)] == ["m", "b", "x", "a"]


def test_len_bool_and_peek() -> None:
    pq = MinPriorityQueue()
    assert not pq
    assert pq.peek() is None
    pq.push(3, "a")
    pq.push(1, "b")
    assert len(pq) == 2
    assert pq.peek() == (1, "b")
    assert len(pq) == 2


def test_pop_from_empty_raises() -> None:
    with pytest.raises(IndexError):
        MinPriorityQueue().pop()
