from __future__ import annotations

from collections.abc import Iterable

from app.models.employee import TreeNode
from app.services.hierarchy import iter_nodes


class ExpansionState:
    """Set of sids whose subtrees are currently shown."""

    def __init__(self, expanded: Iterable[str] = ()) -> None:
        self._expanded: set[str] = set(expanded)

    def __contains__(self, sid: object) -> bool:
        return sid in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)

    def toggle(self, sid: str) -> bool:
        """Flip ``sid`` and return whether it is now expanded."""
        if sid in self._expanded:
            self._expanded.discard(sid)
            return False
        self._expanded.add(sid)
        return True

    def expand_all(self, forest: Iterable[TreeNode]) -> None:
        self._expanded = {node.sid for node in iter_nodes(forest)}

    def collapse_all(self) -> None:
        self._expanded.clear()

    def is_expanded(self, sid: str) -> bool:
        return sid in self._expanded

    def can_expand(self, node: TreeNode) -> bool:
        """Children are rendered only for expanded nodes that have any."""
        return node.has_children and node.sid in self._expanded

    def snapshot(self) -> list[str]:
        return sorted(self._expanded)

    @classmethod
    def restore(cls, sids: Iterable[str]) -> ExpansionState:
        return cls(sids)
