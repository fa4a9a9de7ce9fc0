"""Employee records as delivered by the HR API, plus org-chart tree shapes."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class EmploymentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"
    ON_LEAVE = "ON_LEAVE"
    SUSPENDED = "SUSPENDED"


class Employee(BaseModel):
    """One employee; ``line_manager_sid`` points at another employee's ``sid``."""

    model_config = ConfigDict(frozen=True)

    sid: str = Field(..., min_length=1)
    first_name: str | None = Field(default=None, validation_alias=AliasChoices("first_name", "firstName"))
    last_name: str | None = Field(default=None, validation_alias=AliasChoices("last_name", "lastName"))
    email: str | None = None
    job_code: str | None = Field(default=None, validation_alias=AliasChoices("job_code", "jobCode"))
    job_title: str | None = Field(default=None, validation_alias=AliasChoices("job_title", "jobTitle"))
    division: str | None = None
    unit: str | None = None
    department: str | None = None
    section: str | None = None
    location: str | None = None
    grade: str | None = None
    employment_status: EmploymentStatus = Field(
        default=EmploymentStatus.ACTIVE,
        validation_alias=AliasChoices("employment_status", "employmentStatus"),
    )
    line_manager_sid: str | None = Field(
        default=None,
        validation_alias=AliasChoices("line_manager_sid", "lineManagerSid"),
    )

    @field_validator("sid")
    @classmethod
    def _strip_sid(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("sid must not be blank")
        return value

    @field_validator("line_manager_sid", mode="before")
    @classmethod
    def _blank_manager_is_none(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class TreeNode(BaseModel):
    """An employee wrapped with its direct reports."""

    employee: Employee
    children: list[TreeNode] = []

    @property
    def sid(self) -> str:
        return self.employee.sid

    @property
    def has_children(self) -> bool:
        return bool(self.children)


class TreeRow(BaseModel):
    """A single visual row produced by walking the forest."""

    sid: str
    depth: int = Field(..., ge=0)
    is_last: bool
    connectors: list[bool]
    has_children: bool
    is_expanded: bool
    report_count: int = Field(..., ge=0)
    employee: Employee


class TeamMember(BaseModel):
    """Flat (grid view) entry for a team member."""

    employee: Employee
    has_jcp: bool = False


class TeamTreeResponse(BaseModel):
    manager_sid: str
    state: str
    rows: list[TreeRow]
    root_count: int
    total_members: int
    unassigned: list[str]
    divisions: list[str]
    expanded: list[str]
