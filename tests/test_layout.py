"""Layered layout engine tests."""

from __future__ import annotations

from typing import List

from argmap.layout import CENTER_X, NODE_WIDTH, compute_layout, compute_levels
from argmap.schemas import Connection, Premise


def make_premises(*ids: str) -> List[Premise]:
    premises = []
    for premise_id in ids:
        premise_type = "conclusion" if premise_id == "conclusion" else "axiom"
        premises.append(Premise(id=premise_id, text=f"Statement {premise_id}", type=premise_type))
    return premises


def make_connections(*edges: str) -> List[Connection]:
    connections = []
    for idx, edge in enumerate(edges, start=1):
        source, target = edge.split("->")
        connections.append(Connection(id=f"c{idx}", source=source, target=target))
    return connections


def test_linear_chain_forces_conclusion_one_level_below_max() -> None:
    premises = make_premises("p1", "p2", "p3", "conclusion")
    connections = make_connections("p1->p2", "p2->p3", "p3->conclusion")
    assert compute_levels(premises, connections) == {"p1": 0, "p2": 1, "p3": 2, "conclusion": 3}

    layout = compute_layout(premises, connections)
    assert {node_id: pos.level for node_id, pos in layout.items()} == {
        "p1": 0,
        "p2": 1,
        "p3": 2,
        "conclusion": 4,
    }
    assert [layout[node_id].y for node_id in ("p1", "p2", "p3", "conclusion")] == [50.0, 200.0, 350.0, 650.0]
    assert layout["p1"].x == 375.0
    assert layout["conclusion"].x == CENTER_X - NODE_WIDTH / 2 == 390.0


def test_longest_path_wins_over_shorter_path() -> None:
    premises = make_premises("p1", "p2", "p3", "conclusion")
    connections = make_connections("p1->p3", "p1->p2", "p2->p3", "p3->conclusion")
    levels = compute_levels(premises, connections)
    assert levels == {"p1": 0, "p2": 1, "p3": 2, "conclusion": 3}
    assert compute_layout(premises, connections)["conclusion"].level == 4


def test_conclusion_forced_below_deeper_branch() -> None:
    premises = make_premises("p1", "p2", "p3", "conclusion")
    connections = make_connections("p1->conclusion", "p1->p2", "p2->p3")
    layout = compute_layout(premises, connections)
    assert layout["p3"].level == 2
    assert layout["conclusion"].level == 3


def test_rows_are_centred_in_premise_order() -> None:
    premises = make_premises("a", "b", "conclusion")
    connections = make_connections("a->conclusion", "b->conclusion")
    layout = compute_layout(premises, connections)
    assert (layout["a"].x, layout["b"].x) == (250.0, 500.0)
    assert layout["a"].y == layout["b"].y == 50.0
    assert layout["conclusion"].level == 2


def test_wide_level_wraps_at_four_columns() -> None:
    premises = make_premises("a", "b", "c", "d", "e", "conclusion")
    layout = compute_layout(premises, [])
    assert [layout[node_id].x for node_id in "abcde"] == [0.0, 250.0, 500.0, 750.0, 0.0]
    assert layout["conclusion"].level == 1
    assert layout["conclusion"].x == 390.0


def test_conclusion_detected_by_id_or_type() -> None:
    premises = [
        Premise(id="p1", text="A", type="axiom"),
        Premise(id="final", text="C", type="conclusion"),
    ]
    layout = compute_layout(premises, make_connections("p1->final"))
    assert layout["final"].level == 2
    assert layout["final"].x == 390.0


def test_layout_is_deterministic() -> None:
    edges = ("p1->p3", "p2->p3", "p3->p4", "p2->p4", "p4->conclusion", "p5->conclusion")
    first = compute_layout(make_premises("p1", "p2", "p3", "p4", "p5", "conclusion"), make_connections(*edges))
    second = compute_layout(make_premises("p1", "p2", "p3", "p4", "p5", "conclusion"), make_connections(*edges))
    assert {k: v.model_dump() for k, v in first.items()} == {k: v.model_dump() for k, v in second.items()}


def test_cycle_terminates() -> None:
    premises = make_premises("p1", "p2", "p3", "conclusion")
    connections = make_connections("p1->p2", "p2->p3", "p3->p2", "p3->conclusion")
    layout = compute_layout(premises, connections)
    assert set(layout) == {"p1", "p2", "p3", "conclusion"}
    assert layout["p1"].level == 0
    assert layout["conclusion"].level > max(layout[n].level for n in ("p1", "p2", "p3"))


def test_cycle_without_roots_terminates() -> None:
    premises = make_premises("p1", "p2", "conclusion")
    connections = make_connections("p1->p2", "p2->p1")
    layout = compute_layout(premises, connections)
    assert (layout["p1"].level, layout["p2"].level, layout["conclusion"].level) == (0, 0, 1)


def test_long_chain_does_not_recurse() -> None:
    ids = [f"p{idx}" for idx in range(3000)]
    premises = make_premises(*ids, "conclusion")
    edges = [f"{a}->{b}" for a, b in zip(ids, ids[1:])] + [f"{ids[-1]}->conclusion"]
    layout = compute_layout(premises, make_connections(*edges))
    assert layout[ids[-1]].level == 2999
    assert layout["conclusion"].level == 3001


def test_empty_input() -> None:
    assert compute_layout([], []) == {}
