from __future__ import annotations

from app.models.employee import Employee
from app.services.employee_filter import filter_employees, unique_divisions
from app.services.hierarchy import build_tree


def _sids(employees) -> list[str]:
    return [emp.sid for emp in employees]


def test_empty_search_returns_original_list(team_members):
    assert filter_employees(team_members, "") is team_members
    assert filter_employees(team_members, "   ") is team_members
    assert filter_employees(team_members, None) is team_members


def test_search_is_case_insensitive_on_names(team_members):
    assert _sids(filter_employees(team_members, "LINA")) == ["A3"]
    assert _sids(filter_employees(team_members, "nass")) == ["A4"]


def test_search_matches_email_title_and_sid(team_members):
    assert _sids(filter_employees(team_members, "sara.youssef@")) == ["B1"]
    assert _sids(filter_employees(team_members, "software engineer")) == ["A2", "A4"]
    assert _sids(filter_employees(team_members, "a1")) == ["A1"]


def test_search_ignores_other_fields(team_members):
    assert filter_employees(team_members, "Abu Dhabi") == []


def test_missing_fields_never_match():
    bare = Employee(sid="Z9")

    assert _sids(filter_employees([bare], "z9")) == ["Z9"]
    assert filter_employees([bare], "none") == []


def test_division_is_exact_and_applied_after_search(team_members):
    assert _sids(filter_employees(team_members, "", "Finance")) == ["B1"]
    assert filter_employees(team_members, "", "finance") == []
    assert _sids(filter_employees(team_members, "a", "Engineering")) == ["A1", "A2", "A3", "A4"]
    assert filter_employees(team_members, "lina", "Finance") == []


def test_filter_does_not_mutate_input(team_members):
    before = list(team_members)

    filter_employees(team_members, "omar", "Engineering")

    assert team_members == before


def test_no_match_yields_empty_tree(team_members):
    filtered = filter_employees(team_members, "no-such-person")

    assert build_tree(filtered, "M100").roots == []


def test_filtering_disconnects_subordinate_from_unmatched_manager():
    employees = [
        Employee(sid="A", line_manager_sid=None),
        Employee(sid="B", line_manager_sid="A"),
        Employee(sid="C", line_manager_sid="B"),
        Employee(sid="D", line_manager_sid="X"),
    ]

    filtered = filter_employees(employees, "C")
    result = build_tree(filtered, "A")

    assert _sids(filtered) == ["C"]
    assert result.roots == []
    assert _sids(result.unassigned) == ["C"]


def test_unique_divisions_first_seen_order(team_members):
    extra = Employee(sid="N1", division=None)

    assert unique_divisions([*team_members, extra]) == ["Engineering", "Finance"]
