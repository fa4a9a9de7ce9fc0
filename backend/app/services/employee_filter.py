"""Search and division filtering over a flat employee list."""

from __future__ import annotations

from collections.abc import Sequence

from app.models.employee import Employee

SEARCH_FIELDS: tuple[str, ...] = ("first_name", "last_name", "email", "job_title", "sid")


def matches_search(employee: Employee, needle: str) -> bool:
    """``needle`` must already be lower-cased."""
    for field_name in SEARCH_FIELDS:
        value = getattr(employee, field_name)
        if value and needle in value.lower():
            return True
    return False


def filter_employees(
    employees: Sequence[Employee],
    search: str | None = None,
    division: str | None = None,
) -> Sequence[Employee]:
    """Return the employees matching ``search`` and, if set, ``division``.

    A blank search with no division hands back ``employees`` itself. The tree
    is rebuilt from the result, so a manager that does not match drops its
    matching subordinates out of the chart as well.
    """
    needle = (search or "").strip().lower()
    if not needle and not division:
        return employees

    filtered: list[Employee] = list(employees)
    if needle:
        filtered = [emp for emp in filtered if matches_search(emp, needle)]
    if division:
        filtered = [emp for emp in filtered if emp.division == division]
    return filtered


def unique_divisions(employees: Sequence[Employee]) -> list[str]:
    """Non-empty divisions in first-seen order."""
    return list(dict.fromkeys(emp.division for emp in employees if emp.division))
