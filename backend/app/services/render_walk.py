from __future__ import annotations

from collections.abc import Iterator, Sequence

from app.models.employee import TreeNode, TreeRow
from app.services.expansion import ExpansionState
from app.services.hierarchy import report_counts


def walk(
    forest: Sequence[TreeNode],
    expansion: ExpansionState,
    depth: int = 0,
    parent_connectors: tuple[bool, ...] = (),
    counts: dict[str, int] | None = None,
) -> Iterator[TreeRow]:
    """Yield one row per visible node, parents first, in children order.

    ``connectors`` carries, for every ancestor level and the node itself,
    whether a later sibling follows (a vertical line continues below).
    """
    if counts is None:
        counts = report_counts(forest)
    last_index = len(forest) - 1
    for index, node in enumerate(forest):
        is_last = index == last_index
        connectors = (*parent_connectors, not is_last)
        expanded = expansion.can_expand(node)
        yield TreeRow(
            sid=node.sid,
            depth=depth,
            is_last=is_last,
            connectors=list(connectors),
            has_children=node.has_children,
            is_expanded=expanded,
            report_count=counts[node.sid],
            employee=node.employee,
        )
        if expanded:
            yield from walk(node.children, expansion, depth + 1, connectors, counts)


def render_rows(forest: Sequence[TreeNode], expansion: ExpansionState) -> list[TreeRow]:
    return list(walk(forest, expansion))


def render_text(rows: Sequence[TreeRow]) -> str:
    """Plain-text org chart using box-drawing connectors."""
    lines: list[str] = []
    for row in rows:
        prefix = "".join("│   " if more else "    " for more in row.connectors[:-1])
        branch = "└── " if row.is_last else "├── "
        marker = ("[-] " if row.is_expanded else "[+] ") if row.has_children else "    "
        emp = row.employee
        label = emp.full_name or emp.sid
        title = f" - {emp.job_title}" if emp.job_title else ""
        lines.append(f"{prefix}{branch}{marker}{label} ({emp.sid}){title}")
    return "\n".join(lines)
