#!/usr/bin/env python3
"""Print a manager's org chart as an indented text tree.

Members come either from an HR CSV export or from the HR API. Run from the
backend/ directory:

    python3 scripts/org_chart.py --manager SID [--csv HRData.csv]
        [--search TEXT] [--division NAME] [--collapsed] [--verbose]

Employees whose line manager cannot be found are listed under "Unassigned".
Exits with status 1 when the manager links contain a cycle.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import pandas as pd  # noqa: E402
from pydantic import ValidationError  # noqa: E402

from app.core.config import Settings  # noqa: E402
from app.models.employee import Employee  # noqa: E402
from app.services.directory_service import DirectoryService, DirectoryServiceError  # noqa: E402
from app.services.employee_filter import filter_employees  # noqa: E402
from app.services.expansion import ExpansionState  # noqa: E402
from app.services.hierarchy import ManagerCycleError, build_tree  # noqa: E402
from app.services.render_walk import render_rows, render_text  # noqa: E402

logger = logging.getLogger(__name__)

# HR export header -> Employee field
_CSV_COLUMNS: list[tuple[str, str]] = [
    ("SID", "sid"),
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Email", "email"),
    ("JobCode", "job_code"),
    ("Job Title", "job_title"),
    ("Division", "division"),
    ("Unit", "unit"),
    ("Department", "department"),
    ("Section", "section"),
    ("Location", "location"),
    ("Grade", "grade"),
    ("Line Manager SID", "line_manager_sid"),
]


def row_to_record(row: dict[str, Any]) -> dict[str, Any]:
    """Map one CSV row to Employee fields, splitting ``Name`` when needed."""
    record: dict[str, Any] = {}
    for column, field_name in _CSV_COLUMNS:
        value = row.get(column)
        if isinstance(value, str) and value.strip():
            record[field_name] = value.strip()

    name = row.get("Name")
    if isinstance(name, str) and name.strip() and "first_name" not in record:
        first, _, rest = name.strip().partition(" ")
        record["first_name"] = first
        if rest:
            record["last_name"] = rest.strip()

    return record


def load_csv(path: str) -> list[Employee]:
    frame = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    frame.columns = [str(c).strip() for c in frame.columns]

    employees: list[Employee] = []
    for index, row in enumerate(frame.to_dict(orient="records"), start=2):
        try:
            employees.append(Employee(**row_to_record(row)))
        except ValidationError as e:
            logger.warning("Skipping line %d of %s: %s", index, path, e.errors()[0].get("msg"))
    logger.info("Read %d employees from %s", len(employees), path)
    return employees


async def fetch_members(manager_sid: str) -> list[Employee]:
    service = DirectoryService()
    await service.initialize(Settings())
    try:
        return await service.get_hierarchy_members(manager_sid)
    finally:
        await service.close()


def build_chart(
    employees: list[Employee],
    manager_sid: str,
    *,
    search: str = "",
    division: str | None = None,
    collapsed: bool = False,
) -> str:
    filtered = filter_employees(employees, search, division)
    result = build_tree(filtered, manager_sid)

    expansion = ExpansionState()
    if not collapsed:
        expansion.expand_all(result.roots)

    lines = [manager_sid]
    if result.is_empty:
        lines.append("(no team members)")
    else:
        lines.append(render_text(render_rows(result.roots, expansion)))

    if result.unassigned:
        lines.append("")
        lines.append("Unassigned:")
        for emp in result.unassigned:
            label = emp.full_name or emp.sid
            lines.append(f"  {label} ({emp.sid}) manager={emp.line_manager_sid or '-'}")

    return "\n".join(lines)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print a manager's org chart")
    parser.add_argument("--manager", required=True, help="SID of the manager at the top of the chart")
    parser.add_argument("--csv", help="Read members from an HR CSV export instead of the HR API")
    parser.add_argument("--search", default="", help="Only keep members matching this text")
    parser.add_argument("--division", default=None, help="Only keep members of this division")
    parser.add_argument(
        "--collapsed",
        action="store_true",
        help="Show only direct reports (do not expand subtrees)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    if args.csv:
        employees = load_csv(args.csv)
    else:
        try:
            employees = asyncio.run(fetch_members(args.manager))
        except DirectoryServiceError as e:
            logger.error("Could not load team members: %s", e)
            return 1

    try:
        chart = build_chart(
            employees,
            args.manager,
            search=args.search,
            division=args.division,
            collapsed=args.collapsed,
        )
    except ManagerCycleError as e:
        logger.error("%s", e)
        return 1

    print(chart)
    return 0


def main() -> None:
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
