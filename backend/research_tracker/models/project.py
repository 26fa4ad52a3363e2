"""Project model: one research-program application candidacy."""
from pydantic import Field

from research_tracker.models.base import Score, StrList, Text, TrackerModel
from research_tracker.schemas.common import (
    DecisionChoice,
    NeedsOutreach,
    PortalStatus,
    Priority,
    ProjectStatus,
)


class Project(TrackerModel):
    id: str
    code: Text = Field("", alias="projectId")
    name: Text = ""
    institution: Text = ""
    region: Text = ""
    program_type: Text = Field("", alias="type")
    official_link: Text = ""
    keywords: StrList = Field(default_factory=list)
    pi_lab: Text = ""
    needs_outreach: Text = NeedsOutreach.OPTIONAL.value
    application_round: Text = Field("", alias="round")
    deadline: Text = Field("", alias="ddl")
    period: Text = ""
    funding: StrList = Field(default_factory=list)
    eligibility: Text = ""
    required_materials: StrList = Field(default_factory=list, alias="materials")
    portal_status: Text = PortalStatus.NOT_OPEN.value
    status: Text = ProjectStatus.PROSPECTING.value
    fit: Score = 0.0
    risk: Score = 0.0
    roi: Score = 0.0
    priority: Text = Priority.MEDIUM.value
    decision: Text = DecisionChoice.MAYBE.value
    next_action: Text = ""
    next_action_date: Text = ""
    notes: Text = ""

    # outreachIds / materialTaskIds are not stored here: Document derives
    # them from Outreach.project_ids and MaterialTask.target_project.

    def __repr__(self) -> str:
        return f"<Project {self.name!r} ({self.id})>"
