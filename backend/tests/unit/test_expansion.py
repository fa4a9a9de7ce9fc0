from __future__ import annotations

from app.services.expansion import ExpansionState
from app.services.hierarchy import build_tree


def test_toggle_adds_then_removes():
    state = ExpansionState()

    assert state.toggle("A1") is True
    assert "A1" in state
    assert state.toggle("A1") is False
    assert "A1" not in state


def test_double_toggle_is_a_no_op():
    state = ExpansionState(["B1"])

    state.toggle("A1")
    state.toggle("A1")

    assert state.snapshot() == ["B1"]


def test_expand_all_covers_nested_nodes(team_members):
    forest = build_tree(team_members, "M100").roots
    state = ExpansionState()

    state.expand_all(forest)

    assert state.snapshot() == ["A1", "A2", "A3", "A4", "B1"]


def test_expand_all_then_collapse_all_is_empty(team_members):
    forest = build_tree(team_members, "M100").roots
    state = ExpansionState()

    state.expand_all(forest)
    state.collapse_all()

    assert len(state) == 0
    assert state.snapshot() == []


def test_can_expand_requires_children(team_members):
    forest = build_tree(team_members, "M100").roots
    a1, b1 = forest
    state = ExpansionState(["A1", "B1"])

    assert state.can_expand(a1) is True
    assert state.can_expand(b1) is False


def test_can_expand_requires_expanded(team_members):
    a1 = build_tree(team_members, "M100").roots[0]

    assert ExpansionState().can_expand(a1) is False


def test_restore_round_trips_snapshot():
    state = ExpansionState.restore(["C", "A", "B"])

    assert state.snapshot() == ["A", "B", "C"]
    assert state.is_expanded("B")
