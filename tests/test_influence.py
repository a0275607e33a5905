# tests/test_influence.py
"""
Tests for the node-weighted influence path search.

Cost is the sum of the durations of every node on the path, endpoints
included, so a path from an event to itself costs that event's duration.
"""

from __future__ import annotations

import pytest

from chronologicon.analytics.graph import EventGraph, GraphNode, build_event_graph
from chronologicon.analytics.influence import (
    MSG_FOUND,
    MSG_NO_EVENTS,
    MSG_NO_PATH,
    find_influence_path,
)


@pytest.fixture  # type: ignore[misc]
def branching() -> EventGraph:
    """A(10) with children B(1000) and C(5); D(10) is a child of C."""
    return build_event_graph(
        [
            GraphNode("A", "Alpha", 10),
            GraphNode("B", "Beta", 1000, parent_event_id="A"),
            GraphNode("C", "Gamma", 5, parent_event_id="A"),
            GraphNode("D", "Delta", 10, parent_event_id="C"),
        ]
    )


def test_cheapest_path_sums_every_node(branching: EventGraph) -> None:
    result = find_influence_path(branching, "A", "D")
    assert result.found
    assert [n.event_id for n in result.shortest_path] == ["A", "C", "D"]
    assert result.total_duration_minutes == 25
    assert result.message == MSG_FOUND


def test_path_nodes_carry_names_and_durations(branching: EventGraph) -> None:
    result = find_influence_path(branching, "A", "D")
    assert [(n.event_name, n.duration_minutes) for n in result.shortest_path] == [
        ("Alpha", 10),
        ("Gamma", 5),
        ("Delta", 10),
    ]


def test_edges_are_walked_upwards_and_across(branching: EventGraph) -> None:
    """B -> D climbs to the shared root and back down."""
    result = find_influence_path(branching, "B", "D")
    assert [n.event_id for n in result.shortest_path] == ["B", "A", "C", "D"]
    assert result.total_duration_minutes == 1000 + 10 + 5 + 10


def test_reverse_direction_has_same_cost(branching: EventGraph) -> None:
    forward = find_influence_path(branching, "B", "D")
    backward = find_influence_path(branching, "D", "B")
    assert backward.total_duration_minutes == forward.total_duration_minutes
    assert [n.event_id for n in backward.shortest_path] == [
        n.event_id for n in reversed(forward.shortest_path)
    ]


def test_self_path_costs_own_duration() -> None:
    graph = build_event_graph([GraphNode("A", "Alpha", 60)])
    result = find_influence_path(graph, "A", "A")
    assert [n.event_id for n in result.shortest_path] == ["A"]
    assert result.total_duration_minutes == 60
    assert result.message == MSG_FOUND


def test_chain_total() -> None:
    graph = build_event_graph(
        [
            GraphNode("p", "Plan", 60),
            GraphNode("q", "Build", 480, parent_event_id="p"),
            GraphNode("r", "Test", 960, parent_event_id="q"),
            GraphNode("s", "Ship", 180, parent_event_id="r"),
        ]
    )
    result = find_influence_path(graph, "p", "s")
    assert result.total_duration_minutes == 60 + 480 + 960 + 180
    assert len(result.shortest_path) == 4


def test_disconnected_trees_have_no_path(branching: EventGraph) -> None:
    graph = build_event_graph(
        [*branching.nodes.values(), GraphNode("Z", "Elsewhere", 1, parent_event_id="gone")]
    )
    result = find_influence_path(graph, "A", "Z")
    assert not result.found
    assert result.shortest_path == []
    assert result.total_duration_minutes == 0
    assert result.message == MSG_NO_PATH


def test_empty_graph() -> None:
    result = find_influence_path(EventGraph(), "A", "B")
    assert result.message == MSG_NO_EVENTS
    assert result.shortest_path == []


def test_unknown_source_is_reported_before_target(branching: EventGraph) -> None:
    result = find_influence_path(branching, "nope", "also-nope")
    assert result.message == "Source event 'nope' not found."
    assert result.total_duration_minutes == 0


def test_unknown_target(branching: EventGraph) -> None:
    result = find_influence_path(branching, "A", "nope")
    assert result.message == "Target event 'nope' not found."
    assert result.source_event_id == "A"
    assert result.target_event_id == "nope"


def test_zero_duration_nodes_are_free() -> None:
    graph = build_event_graph(
        [GraphNode("a", "A", 0), GraphNode("b", "B", 0, parent_event_id="a")]
    )
    result = find_influence_path(graph, "a", "b")
    assert result.found
    assert result.total_duration_minutes == 0
