from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from app.models.competency import ProficiencyLevel, TeamJcpsResponse, TeamJobsResponse
from app.models.employee import TeamMember, TeamTreeResponse
from app.services import team_catalog
from app.services.directory_service import (
    DirectoryNotConfiguredError,
    DirectoryServiceError,
    directory_service,
)
from app.services.expansion import ExpansionState
from app.services.hierarchy import ManagerCycleError
from app.services.render_walk import render_rows
from app.services.team_view import LoadState, TeamView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/team", tags=["team"])


def _upstream_error(err: DirectoryServiceError, what: str) -> HTTPException:
    if isinstance(err, DirectoryNotConfiguredError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="HR directory is not configured",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Failed to retrieve {what}",
    )


async def _load_view(manager_sid: str, search: str, division: str | None) -> TeamView:
    view = TeamView(directory_service, manager_sid)
    view.set_search(search)
    view.set_division(division)
    await view.refresh()
    if view.state == LoadState.FAILED:
        if isinstance(view.last_error, DirectoryServiceError):
            raise _upstream_error(view.last_error, "team members") from view.last_error
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve team members",
        ) from view.last_error
    return view


@router.get("/{manager_sid}/tree", response_model=TeamTreeResponse)
async def get_team_tree(
    manager_sid: str,
    search: str = "",
    division: str | None = None,
    expanded: list[str] = Query(default=[]),  # noqa: B008
    expand_all: bool = False,
):
    view = await _load_view(manager_sid, search, division)
    view.expansion = ExpansionState.restore(expanded)

    try:
        tree = view.tree()
        if expand_all:
            view.expansion.expand_all(tree.roots)
    except ManagerCycleError as err:
        logger.warning("Hierarchy under %s is cyclic: %s", manager_sid, err)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(err),
        ) from err

    return TeamTreeResponse(
        manager_sid=manager_sid,
        state=view.state.value,
        rows=render_rows(tree.roots, view.expansion),
        root_count=len(tree.roots),
        total_members=len(view.employees),
        unassigned=[emp.sid for emp in tree.unassigned],
        divisions=view.divisions(),
        expanded=view.expansion.snapshot(),
    )


@router.get("/{manager_sid}/members", response_model=list[TeamMember])
async def get_team_members(
    manager_sid: str,
    search: str = "",
    division: str | None = None,
):
    view = await _load_view(manager_sid, search, division)
    try:
        mappings = await directory_service.get_job_competencies()
    except DirectoryServiceError as err:
        logger.exception("Failed to load JCP mappings")
        raise _upstream_error(err, "job-competency mappings") from err

    return [
        TeamMember(employee=emp, has_jcp=team_catalog.has_jcp(emp.job_code, mappings))
        for emp in view.filtered()
    ]


@router.get("/{manager_sid}/jobs", response_model=TeamJobsResponse)
async def get_team_jobs(
    manager_sid: str,
    search: str = "",
    location: str | None = None,
):
    view = await _load_view(manager_sid, "", None)
    try:
        jobs = await directory_service.get_jobs()
        mappings = await directory_service.get_job_competencies()
    except DirectoryServiceError as err:
        logger.exception("Failed to load job catalog")
        raise _upstream_error(err, "jobs") from err

    team_jobs = team_catalog.jobs_for_team(jobs, view.employees)
    return TeamJobsResponse(
        jobs=team_catalog.filter_jobs(team_jobs, search, location),
        locations=team_catalog.unique_locations(team_jobs),
        stats=team_catalog.job_stats(team_jobs, mappings),
    )


@router.get("/{manager_sid}/jcps", response_model=TeamJcpsResponse)
async def get_team_jcps(
    manager_sid: str,
    search: str = "",
    level: ProficiencyLevel | None = None,
):
    view = await _load_view(manager_sid, "", None)
    try:
        mappings = await directory_service.get_job_competencies()
    except DirectoryServiceError as err:
        logger.exception("Failed to load JCP mappings")
        raise _upstream_error(err, "job-competency mappings") from err

    jcps = team_catalog.group_jcps_by_job(mappings, view.employees)
    return TeamJcpsResponse(
        jcps=team_catalog.filter_jcps(jcps, search, level),
        levels=[lvl.value for lvl in team_catalog.unique_levels(jcps)],
        stats=team_catalog.jcp_stats(jcps),
    )
