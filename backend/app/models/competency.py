"""Job catalog, competency dictionary, JCP, assessor and IDP records."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field, field_validator


class CompetencyType(str, Enum):
    TECHNICAL = "TECHNICAL"
    NON_TECHNICAL = "NON_TECHNICAL"
    BEHAVIORAL = "BEHAVIORAL"
    LEADERSHIP = "LEADERSHIP"
    FUNCTIONAL = "FUNCTIONAL"


class ProficiencyLevel(str, Enum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    MASTERY = "MASTERY"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)


_LEVEL_ORDER = list(ProficiencyLevel)


class IdpStatus(str, Enum):
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class IdpPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Job(BaseModel):
    """Job catalog entry; employees reference it through ``job_code``."""

    code: str = Field(..., min_length=1)
    title: str
    division: str | None = None
    unit: str | None = None
    department: str | None = None
    section: str | None = None
    location: str | None = None
    grade: str | None = None
    description: str | None = None
    is_active: bool = Field(
        default=True,
        validation_alias=AliasChoices("is_active", "isActive"),
    )


class CompetencyLevel(BaseModel):
    level: ProficiencyLevel
    description: str = ""
    indicators: list[str] = []


class Competency(BaseModel):
    id: str
    name: str
    type: CompetencyType
    family: str | None = None
    definition: str | None = None
    levels: list[CompetencyLevel] = []

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        # the HR API hands out integer ids for older competencies
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("levels")
    @classmethod
    def _order_levels(cls, levels: list[CompetencyLevel]) -> list[CompetencyLevel]:
        seen = [lvl.level for lvl in levels]
        if len(seen) != len(set(seen)):
            raise ValueError("each proficiency level may be described only once")
        return sorted(levels, key=lambda lvl: lvl.level.rank)

    def level(self, level: ProficiencyLevel) -> CompetencyLevel | None:
        for entry in self.levels:
            if entry.level == level:
                return entry
        return None


class JobCompetencyMapping(BaseModel):
    """A job-competency profile entry (JCP): the level a job requires."""

    job: Job
    competency: Competency
    required_level: ProficiencyLevel = Field(
        validation_alias=AliasChoices("required_level", "requiredLevel"),
    )
    is_required: bool = Field(
        default=True,
        validation_alias=AliasChoices("is_required", "isRequired"),
    )


class AssessorMapping(BaseModel):
    assessor_sid: str = Field(validation_alias=AliasChoices("assessor_sid", "assessorSid"))
    competency_id: str = Field(validation_alias=AliasChoices("competency_id", "competencyId"))
    competency_level: ProficiencyLevel = Field(
        validation_alias=AliasChoices("competency_level", "competencyLevel"),
    )
    is_active: bool = Field(default=True, validation_alias=AliasChoices("is_active", "isActive"))


class IndividualDevelopmentPlan(BaseModel):
    employee_sid: str
    competency_id: str
    status: IdpStatus = IdpStatus.PLANNED
    priority: IdpPriority = IdpPriority.MEDIUM
    progress_percentage: int = Field(default=0, ge=0, le=100)
    intervention_id: str | None = None
    target_date: date | None = None
    notes: str = ""

    @property
    def is_overdue(self) -> bool:
        if self.target_date is None or self.status == IdpStatus.COMPLETED:
            return False
        return self.target_date < date.today()


class TeamJcpCompetency(BaseModel):
    competency_name: str
    level: ProficiencyLevel
    competency: Competency


class TeamJcp(BaseModel):
    """JCP entries of one job, grouped for the manager view."""

    job_code: str
    job_title: str
    job: Job
    competencies: list[TeamJcpCompetency] = []


class JobStats(BaseModel):
    total: int
    with_jcps: int
    active: int


class JcpStats(BaseModel):
    total_jobs: int
    total_competencies: int
    by_level: dict[str, int]


class TeamJobsResponse(BaseModel):
    jobs: list[Job]
    locations: list[str]
    stats: JobStats


class TeamJcpsResponse(BaseModel):
    jcps: list[TeamJcp]
    levels: list[str]
    stats: JcpStats
