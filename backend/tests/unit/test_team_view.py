from __future__ import annotations

import anyio
import pytest

from app.models.employee import Employee
from app.services.directory_service import DirectoryServiceError
from app.services.team_view import LoadState, TeamView


class FakeSource:
    def __init__(self, members: dict[str, list[Employee]]) -> None:
        self.members = members
        self.calls: list[str] = []
        self.error: Exception | None = None

    async def get_hierarchy_members(self, manager_sid: str) -> list[Employee]:
        self.calls.append(manager_sid)
        if self.error is not None:
            raise self.error
        return list(self.members.get(manager_sid, []))


class GatedSource:
    """Responses are released explicitly, in whatever order the test wants."""

    def __init__(self) -> None:
        self.pending: list[tuple[anyio.Event, list[Employee]]] = []

    async def get_hierarchy_members(self, manager_sid: str) -> list[Employee]:
        gate = anyio.Event()
        slot: list[Employee] = []
        self.pending.append((gate, slot))
        await gate.wait()
        return slot


@pytest.mark.anyio
async def test_new_view_is_not_loaded():
    view = TeamView(FakeSource({}), "M100")

    assert view.state == LoadState.NOT_LOADED
    assert view.is_loaded is False
    assert view.rows() == []


@pytest.mark.anyio
async def test_refresh_loads_members(team_members):
    source = FakeSource({"M100": team_members})
    view = TeamView(source, "M100")

    assert await view.refresh() is True

    assert view.state == LoadState.LOADED
    assert [row.sid for row in view.rows()] == ["A1", "B1"]
    assert source.calls == ["M100"]


@pytest.mark.anyio
async def test_loaded_empty_is_distinct_from_not_loaded():
    view = TeamView(FakeSource({}), "M100")

    await view.refresh()

    assert view.state == LoadState.LOADED
    assert view.employees == []
    assert view.tree().is_empty


@pytest.mark.anyio
async def test_failed_first_load_sets_failed_state():
    source = FakeSource({})
    source.error = DirectoryServiceError("boom")
    view = TeamView(source, "M100")

    await view.refresh()

    assert view.state == LoadState.FAILED
    assert isinstance(view.last_error, DirectoryServiceError)


@pytest.mark.anyio
async def test_failed_reload_keeps_previous_members(team_members):
    source = FakeSource({"M100": team_members})
    view = TeamView(source, "M100")
    await view.refresh()

    source.error = DirectoryServiceError("boom")
    await view.refresh()

    assert view.state == LoadState.LOADED
    assert len(view.employees) == len(team_members)
    assert view.last_error is not None


@pytest.mark.anyio
async def test_search_and_division_shape_the_tree(team_members):
    view = TeamView(FakeSource({"M100": team_members}), "M100")
    await view.refresh()

    view.set_search("sara")
    assert [row.sid for row in view.rows()] == ["B1"]

    view.set_search("")
    view.set_division("Engineering")
    assert [row.sid for row in view.rows()] == ["A1"]

    view.set_division("")
    assert view.division is None
    assert view.divisions() == ["Engineering", "Finance"]


@pytest.mark.anyio
async def test_expand_all_uses_filtered_tree(team_members):
    view = TeamView(FakeSource({"M100": team_members}), "M100")
    await view.refresh()
    view.set_division("Finance")

    view.expand_all()

    assert view.expansion.snapshot() == ["B1"]

    view.collapse_all()
    assert view.expansion.snapshot() == []


@pytest.mark.anyio
async def test_toggle_reveals_children(team_members):
    view = TeamView(FakeSource({"M100": team_members}), "M100")
    await view.refresh()

    assert view.toggle("A1") is True

    assert [row.sid for row in view.rows()] == ["A1", "A2", "A3", "B1"]


@pytest.mark.anyio
async def test_set_manager_resets_expansion(team_members):
    other = [Employee(sid="X1", line_manager_sid="M200")]
    view = TeamView(FakeSource({"M100": team_members, "M200": other}), "M100")
    await view.refresh()
    view.toggle("A1")

    await view.set_manager("M200")

    assert view.manager_sid == "M200"
    assert view.expansion.snapshot() == []
    assert [row.sid for row in view.rows()] == ["X1"]


@pytest.mark.anyio
async def test_stale_response_is_discarded(team_members):
    source = GatedSource()
    view = TeamView(source, "M100")
    results: dict[str, bool] = {}

    async def run(name: str) -> None:
        results[name] = await view.refresh()

    async with anyio.create_task_group() as tg:
        tg.start_soon(run, "first")
        await anyio.wait_all_tasks_blocked()
        tg.start_soon(run, "second")
        await anyio.wait_all_tasks_blocked()

        (first_gate, first_slot), (second_gate, second_slot) = source.pending
        second_slot.extend(team_members[:1])
        second_gate.set()
        await anyio.wait_all_tasks_blocked()
        first_slot.extend(team_members)
        first_gate.set()

    assert results == {"first": False, "second": True}
    assert [emp.sid for emp in view.employees] == ["A1"]
