"""Read-only temporal analytics over the event forest."""

from __future__ import annotations

from .gaps import find_largest_gap
from .graph import EventGraph, GraphNode, build_event_graph
from .heap import MinPriorityQueue
from .influence import find_influence_path
from .overlaps import find_overlapping_pairs

__all__ = [
    "EventGraph",
    "GraphNode",
    "MinPriorityQueue",
    "build_event_graph",
    "find_influence_path",
    "find_largest_gap",
    "find_overlapping_pairs",
]
