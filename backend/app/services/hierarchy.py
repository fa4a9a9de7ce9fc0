"""Build a manager's reporting forest from a flat employee list."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from app.models.employee import Employee, TreeNode

logger = logging.getLogger(__name__)


class HierarchyError(Exception):
    pass


class ManagerCycleError(HierarchyError):
    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Manager cycle detected: {' -> '.join(cycle + cycle[:1])}")


@dataclass
class HierarchyResult:
    roots: list[TreeNode] = field(default_factory=list)
    unassigned: list[Employee] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.roots


def build_tree(employees: Iterable[Employee], root_sid: str) -> HierarchyResult:
    """Arrange ``employees`` under ``root_sid``.

    Employees whose ``line_manager_sid`` is the root become root nodes; the
    rest are appended to their manager's children in input order. Employees
    whose manager is neither the root nor part of the list are left out of the
    forest and reported in ``unassigned``.

    Raises ManagerCycleError when the manager links among the given employees
    loop back on themselves.
    """
    employees = list(employees)
    nodes: dict[str, TreeNode] = {}
    for emp in employees:
        if emp.sid in nodes:
            logger.warning("Duplicate employee sid %s, keeping first record", emp.sid)
            continue
        nodes[emp.sid] = TreeNode(employee=emp)

    result = HierarchyResult()
    placed: set[str] = set()
    for emp in employees:
        if emp.sid in placed:
            continue
        placed.add(emp.sid)
        if emp.sid == root_sid:
            # the manager's own record is the implicit top of the chart
            continue
        node = nodes[emp.sid]
        manager = emp.line_manager_sid
        if manager == root_sid:
            result.roots.append(node)
        elif manager is not None and manager in nodes:
            nodes[manager].children.append(node)
        else:
            logger.debug("Employee %s has no resolvable manager (%s)", emp.sid, manager)
            result.unassigned.append(emp)

    _check_reachable(nodes, result, root_sid)
    return result


def _check_reachable(nodes: dict[str, TreeNode], result: HierarchyResult, root_sid: str) -> None:
    reachable = {node.sid for node in iter_nodes(result.roots)}
    for emp in result.unassigned:
        reachable.update(node.sid for node in iter_nodes([nodes[emp.sid]]))
    if root_sid in nodes:
        reachable.update(node.sid for node in iter_nodes([nodes[root_sid]]))

    stranded = [sid for sid in nodes if sid not in reachable]
    if stranded:
        raise ManagerCycleError(_find_cycle(nodes, stranded[0]))


def _find_cycle(nodes: dict[str, TreeNode], start: str) -> list[str]:
    path: list[str] = []
    current: str | None = start
    while current is not None and current not in path:
        path.append(current)
        current = nodes[current].employee.line_manager_sid
        if current not in nodes:
            current = None
    if current is None:
        return path
    return path[path.index(current):]


def iter_nodes(forest: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node of ``forest`` depth-first, parents before children."""
    stack = list(reversed(list(forest)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def report_counts(forest: Iterable[TreeNode]) -> dict[str, int]:
    """Direct and indirect reports below every node of ``forest``, keyed by sid."""
    counts: dict[str, int] = {}
    # children come after their parent in pre-order, so reversed is bottom-up
    for node in reversed(list(iter_nodes(forest))):
        counts[node.sid] = sum(1 + counts[child.sid] for child in node.children)
    return counts
