"""Job and JCP views restricted to the job codes held by a manager's team."""

from __future__ import annotations

from collections.abc import Sequence

from app.models.competency import (
    Job,
    JcpStats,
    JobCompetencyMapping,
    JobStats,
    ProficiencyLevel,
    TeamJcp,
    TeamJcpCompetency,
)
from app.models.employee import Employee


def _contains(value: str | None, needle: str) -> bool:
    return bool(value) and needle in value.lower()


def team_job_codes(employees: Sequence[Employee]) -> set[str]:
    return {emp.job_code for emp in employees if emp.job_code}


def jcps_for_job(job_code: str | None, mappings: Sequence[JobCompetencyMapping]) -> list[JobCompetencyMapping]:
    if not job_code:
        return []
    return [m for m in mappings if m.job.code == job_code]


def has_jcp(job_code: str | None, mappings: Sequence[JobCompetencyMapping]) -> bool:
    if not job_code:
        return False
    return any(m.job.code == job_code for m in mappings)


def jobs_for_team(jobs: Sequence[Job], employees: Sequence[Employee]) -> list[Job]:
    codes = team_job_codes(employees)
    return [job for job in jobs if job.code in codes]


def filter_jobs(jobs: Sequence[Job], search: str | None = None, location: str | None = None) -> list[Job]:
    needle = (search or "").strip().lower()
    filtered = list(jobs)
    if needle:
        filtered = [
            job
            for job in filtered
            if _contains(job.title, needle)
            or _contains(job.code, needle)
            or _contains(job.description, needle)
            or _contains(job.department, needle)
            or _contains(job.section, needle)
        ]
    if location:
        filtered = [job for job in filtered if job.location == location]
    return filtered


def unique_locations(jobs: Sequence[Job]) -> list[str]:
    return list(dict.fromkeys(job.location for job in jobs if job.location))


def job_stats(jobs: Sequence[Job], mappings: Sequence[JobCompetencyMapping]) -> JobStats:
    return JobStats(
        total=len(jobs),
        with_jcps=sum(1 for job in jobs if has_jcp(job.code, mappings)),
        active=sum(1 for job in jobs if job.is_active),
    )


def group_jcps_by_job(
    mappings: Sequence[JobCompetencyMapping],
    employees: Sequence[Employee],
) -> list[TeamJcp]:
    """Collect the team's JCP entries into one profile per job, first-seen order."""
    codes = team_job_codes(employees)
    grouped: dict[str, TeamJcp] = {}
    for mapping in mappings:
        code = mapping.job.code
        if code not in codes:
            continue
        if code not in grouped:
            grouped[code] = TeamJcp(job_code=code, job_title=mapping.job.title, job=mapping.job)
        grouped[code].competencies.append(
            TeamJcpCompetency(
                competency_name=mapping.competency.name,
                level=mapping.required_level,
                competency=mapping.competency,
            )
        )
    return list(grouped.values())


def filter_jcps(
    jcps: Sequence[TeamJcp],
    search: str | None = None,
    level: ProficiencyLevel | None = None,
) -> list[TeamJcp]:
    needle = (search or "").strip().lower()
    filtered = list(jcps)
    if needle:
        filtered = [
            jcp
            for jcp in filtered
            if _contains(jcp.job_title, needle)
            or _contains(jcp.job_code, needle)
            or any(_contains(c.competency_name, needle) for c in jcp.competencies)
        ]
    if level:
        filtered = [jcp for jcp in filtered if any(c.level == level for c in jcp.competencies)]
    return filtered


def unique_levels(jcps: Sequence[TeamJcp]) -> list[ProficiencyLevel]:
    levels = {c.level for jcp in jcps for c in jcp.competencies}
    return sorted(levels, key=lambda lvl: lvl.rank)


def jcp_stats(jcps: Sequence[TeamJcp]) -> JcpStats:
    by_level = {lvl.value: 0 for lvl in ProficiencyLevel}
    for jcp in jcps:
        for comp in jcp.competencies:
            by_level[comp.level.value] += 1
    return JcpStats(
        total_jobs=len(jcps),
        total_competencies=sum(len(jcp.competencies) for jcp in jcps),
        by_level=by_level,
    )
