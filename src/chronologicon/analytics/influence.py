"""
Event influence path: node-weighted Dijkstra over the bidirectional graph.

Cost model
----------
Cost accrues per *visited node*, not per edge. The search is seeded with the
source's own duration, and relaxing an edge ``u -> v`` gives
``cost(u) + duration(v)``. The total therefore equals the sum of the
durations of every node on the path, source and target included:

- ``find_influence_path(g, A, A)`` costs ``duration(A)``, not zero;
- reversing source and target yields the reversed node sequence with the
  same total cost.

Ties between equal-cost candidates are resolved by the queue's FIFO order,
i.e. the first-discovered candidate wins. Callers should not rely on any
particular choice among equally cheap paths.

Negative answers are results, not exceptions: an empty graph, an unknown
source or target, and an unreachable target each return an empty path with
cost 0 and a message saying which case applies.
"""

from __future__ import annotations

from chronologicon.core.contracts.insight import InfluencePath, PathNode

from .graph import EventGraph
from .heap import MinPriorityQueue

MSG_FOUND = "Shortest temporal path found from source to target event."
MSG_NO_PATH = "No temporal path found from source to target event."
MSG_NO_EVENTS = "No events found in the database."


def _negative(source_id: str, target_id: str, message: str) -> InfluencePath:
    return InfluencePath(
        source_event_id=source_id,
        target_event_id=target_id,
        shortest_path=[],
        total_duration_minutes=0,
        message=message,
    )


def _reconstruct(
    graph: EventGraph, previous: dict[str, str], target_id: str
) -> list[PathNode]:
    path: list[PathNode] = []
    current: str | None = target_id
    while current is not None:
        node = graph.nodes[current]
        path.append(
            PathNode(
                event_id=node.event_id,
                event_name=node.event_name,
                duration_minutes=node.duration_minutes,
            )
        )
        current = previous.get(current)
    path.reverse()
    return path


def find_influence_path(graph: EventGraph, source_id: str, target_id: str) -> InfluencePath:
    """Return the cheapest path from `source_id` to `target_id`.

    Runs in O(E log V); the search stops as soon as the target is popped,
    at which point its cumulative cost is minimal.
    """
    if len(graph) == 0:
        return _negative(source_id, target_id, MSG_NO_EVENTS)
    if source_id not in graph:
        return _negative(source_id, target_id, f"Source event '{source_id}' not found.")
    if target_id not in graph:
        return _negative(source_id, target_id, f"Target event '{target_id}' not found.")

    best: dict[str, int] = {source_id: graph.cost(source_id)}
    previous: dict[str, str] = {}
    visited: set[str] = set()
    queue = MinPriorityQueue()
    queue.push(best[source_id], source_id)

    while queue:
        cost, node_id = queue.pop()

        if node_id == target_id:
            return InfluencePath(
                source_event_id=source_id,
                target_event_id=target_id,
                shortest_path=_reconstruct(graph, previous, target_id),
                total_duration_minutes=cost,
                message=MSG_FOUND,
            )

        if node_id in visited:
            continue
        visited.add(node_id)

        for neighbour in graph.neighbours(node_id):
            if neighbour in visited:
                continue
            candidate = cost + graph.cost(neighbour)
            if neighbour not in best or candidate < best[neighbour]:
                best[neighbour] = candidate
                previous[neighbour] = node_id
                queue.push(candidate, neighbour)

    return _negative(source_id, target_id, MSG_NO_PATH)


__all__ = ["MSG_FOUND", "MSG_NO_EVENTS", "MSG_NO_PATH", "find_influence_path"]
