"""Hierarchical timeline: an event's whole family tree, nested.

For an event with a parent, the tree is rooted at its topmost ancestor, so
siblings and cousins appear too. For a root event it is simply the event and
its descendants. An unknown id yields ``None``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from chronologicon.core.contracts.event import HistoricalEvent
from chronologicon.core.contracts.timeline import TimelineNode


class TimelineSource(Protocol):
    def get_subtree(self, root_id: str) -> list[HistoricalEvent]: ...

    def get_ancestors(self, leaf_id: str) -> list[HistoricalEvent]: ...


def build_tree(events: Iterable[HistoricalEvent], root_id: str) -> TimelineNode | None:
    """Nest `events` under their parents and return the node for `root_id`.

    Children keep the order of `events`. Events whose parent is not in
    `events` are left detached.
    """
    nodes: dict[str, TimelineNode] = {}
    ordered: list[HistoricalEvent] = []
    for event in events:
        nodes[event.event_id] = TimelineNode(
            event_id=event.event_id,
            event_name=event.event_name,
            description=event.description,
            start_date=event.start_date,
            end_date=event.end_date,
            duration_minutes=event.duration_minutes,
            parent_event_id=event.parent_event_id,
        )
        ordered.append(event)

    for event in ordered:
        parent_id = event.parent_event_id
        if parent_id and parent_id in nodes and parent_id != event.event_id:
            nodes[parent_id].children.append(nodes[event.event_id])

    return nodes.get(root_id)


def get_timeline(source: TimelineSource, event_id: str) -> TimelineNode | None:
    """Return the full nested timeline that `event_id` belongs to."""
    subtree = source.get_subtree(event_id)
    if not subtree:
        return None

    focus = next((e for e in subtree if e.event_id == event_id), None)
    if focus is None or focus.parent_event_id is None:
        return build_tree(subtree, event_id)

    ancestors = source.get_ancestors(event_id)
    known = {e.event_id for e in ancestors}
    # The topmost known ancestor: a real root, or the last link before an orphan reference.
    top = next(
        (e for e in ancestors if e.parent_event_id is None or e.parent_event_id not in known),
        None,
    )
    if top is None or top.event_id == event_id:
        return build_tree(subtree, event_id)

    return build_tree(source.get_subtree(top.event_id), top.event_id)


__all__ = ["TimelineSource", "build_tree", "get_timeline"]
