"""Project schemas for request validation."""
from pydantic import Field, field_validator

from research_tracker.schemas.common import (
    DecisionChoice,
    NeedsOutreach,
    PortalStatus,
    Priority,
    ProjectStatus,
    RequestModel,
    normalize_date_field,
)


class ProjectCreate(RequestModel):
    name: str = Field("", max_length=255)
    create_folder: bool = True


class ProjectUpdate(RequestModel):
    code: str | None = Field(None, alias="projectId")
    name: str | None = Field(None, max_length=255)
    institution: str | None = None
    region: str | None = None
    program_type: str | None = Field(None, alias="type")
    official_link: str | None = None
    keywords: list[str] | None = None
    pi_lab: str | None = None
    needs_outreach: NeedsOutreach | None = None
    application_round: str | None = Field(None, alias="round")
    deadline: str | None = Field(None, alias="ddl")
    period: str | None = None
    funding: list[str] | None = None
    eligibility: str | None = None
    required_materials: list[str] | None = Field(None, alias="materials")
    portal_status: PortalStatus | None = None
    status: ProjectStatus | None = None
    # Out-of-range scores are clamped by the model, not rejected.
    fit: float | None = None
    risk: float | None = None
    roi: float | None = None
    priority: Priority | None = None
    decision: DecisionChoice | None = None
    next_action: str | None = None
    next_action_date: str | None = None
    notes: str | None = None

    @field_validator("deadline", "next_action_date")
    @classmethod
    def _normalize_dates(cls, v: str | None) -> str | None:
        return normalize_date_field(v)

    @field_validator("keywords", "funding", "required_materials")
    @classmethod
    def _dedupe(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return list(dict.fromkeys(s.strip() for s in v if s.strip()))
