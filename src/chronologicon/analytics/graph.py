"""
Bidirectional influence graph built from the event forest.

Every event becomes a node. When an event's parent reference resolves to a
known node, an undirected edge parent <-> child is added; unresolved (orphan)
or absent parents simply contribute no edge. Edges carry no weight: moving
onto a node costs that node's own ``duration_minutes``.

The graph holds read-only copies for the lifetime of one query and is never
written back to the store.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol


class GraphRow(Protocol):
    """Projection of an event needed to build the graph."""

    @property
    def event_id(self) -> str: ...
    @property
    def event_name(self) -> str: ...
    @property
    def parent_event_id(self) -> str | None: ...
    @property
    def duration_minutes(self) -> int | None: ...


@dataclass(frozen=True, slots=True)
class GraphNode:
    """A node of the influence graph; `duration_minutes` is its traversal cost."""

    event_id: str
    event_name: str
    duration_minutes: int = 0
    parent_event_id: str | None = None


@dataclass
class EventGraph:
    """Node table plus undirected adjacency lists."""

    nodes: dict[str, GraphNode] = field(default_factory=dict)
    adjacency: dict[str, list[str]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self.nodes

    def neighbours(self, event_id: str) -> list[str]:
        return self.adjacency.get(event_id, [])

    def cost(self, event_id: str) -> int:
        """Cost of stepping onto `event_id`."""
        return self.nodes[event_id].duration_minutes

    def edge_count(self) -> int:
        return sum(len(v) for v in self.adjacency.values()) // 2


def build_event_graph(rows: Iterable[GraphRow]) -> EventGraph:
    """Materialize the forest in `rows` as an :class:`EventGraph`.

    Two passes: first register every node (so parents listed after their
    children still resolve), then link each child to its known parent in
    both directions.
    """
    graph = EventGraph()
    for row in rows:
        graph.nodes[row.event_id] = GraphNode(
            event_id=row.event_id,
            event_name=row.event_name,
            duration_minutes=row.duration_minutes or 0,
            parent_event_id=row.parent_event_id,
        )
        graph.adjacency.setdefault(row.event_id, [])

    for node in graph.nodes.values():
        parent = node.parent_event_id
        if parent and parent in graph.nodes and parent != node.event_id:
            graph.adjacency[parent].append(node.event_id)
            graph.adjacency[node.event_id].append(parent)

    return graph


__all__ = ["EventGraph", "GraphNode", "GraphRow", "build_event_graph"]
