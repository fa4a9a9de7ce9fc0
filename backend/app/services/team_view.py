"""State for one manager's org chart: loaded members, filters, expansion."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from enum import Enum
from typing import Protocol

from app.models.employee import Employee, TreeRow
from app.services.employee_filter import filter_employees, unique_divisions
from app.services.expansion import ExpansionState
from app.services.hierarchy import HierarchyResult, build_tree
from app.services.render_walk import render_rows

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class HierarchySource(Protocol):
    async def get_hierarchy_members(self, manager_sid: str) -> list[Employee]: ...


class TeamView:
    def __init__(self, source: HierarchySource, manager_sid: str) -> None:
        self.source = source
        self.manager_sid = manager_sid
        self.state = LoadState.NOT_LOADED
        self.employees: list[Employee] = []
        self.search = ""
        self.division: str | None = None
        self.expansion = ExpansionState()
        self.last_error: Exception | None = None
        self._tokens = itertools.count(1)
        self._latest = 0

    async def refresh(self) -> bool:
        """Fetch the manager's members; return False if the response was stale.

        Only the most recently issued refresh may update the view. An earlier
        request that completes later is dropped.
        """
        token = next(self._tokens)
        self._latest = token
        manager_sid = self.manager_sid
        if self.state != LoadState.LOADED:
            self.state = LoadState.LOADING

        try:
            members = await self.source.get_hierarchy_members(manager_sid)
        except Exception as e:
            if token != self._latest:
                logger.debug("Ignoring failed stale fetch %d for %s", token, manager_sid)
                return False
            logger.exception("Failed to load team members for %s", manager_sid)
            self.last_error = e
            self.state = LoadState.LOADED if self.employees else LoadState.FAILED
            return True

        if token != self._latest or manager_sid != self.manager_sid:
            logger.debug("Discarding stale fetch %d for %s", token, manager_sid)
            return False

        self.employees = list(members)
        self.last_error = None
        self.state = LoadState.LOADED
        logger.info("Loaded %d team members for %s", len(self.employees), manager_sid)
        return True

    async def set_manager(self, manager_sid: str) -> bool:
        if manager_sid != self.manager_sid:
            self.manager_sid = manager_sid
            self.employees = []
            self.state = LoadState.NOT_LOADED
            self.expansion.collapse_all()
        return await self.refresh()

    def set_search(self, search: str) -> None:
        self.search = search

    def set_division(self, division: str | None) -> None:
        self.division = division or None

    @property
    def is_loaded(self) -> bool:
        return self.state == LoadState.LOADED

    def filtered(self) -> Sequence[Employee]:
        return filter_employees(self.employees, self.search, self.division)

    def tree(self) -> HierarchyResult:
        return build_tree(self.filtered(), self.manager_sid)

    def rows(self) -> list[TreeRow]:
        return render_rows(self.tree().roots, self.expansion)

    def divisions(self) -> list[str]:
        return unique_divisions(self.employees)

    def toggle(self, sid: str) -> bool:
        return self.expansion.toggle(sid)

    def expand_all(self) -> None:
        self.expansion.expand_all(self.tree().roots)

    def collapse_all(self) -> None:
        self.expansion.collapse_all()
