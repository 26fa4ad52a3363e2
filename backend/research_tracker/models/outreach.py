"""Outreach model: a tracked contact with a principal investigator."""
from pydantic import Field

from research_tracker.models.base import OptionalText, StrList, Text, TrackerModel
from research_tracker.schemas.common import OutreachStage, ReplyStatus


class Outreach(TrackerModel):
    id: str
    code: Text = Field("", alias="outreachId")
    pi_name: Text = ""
    institution: Text = ""
    directions: StrList = Field(default_factory=list)
    contact: Text = ""
    first_contact: Text = ""
    email_version: Text = ""
    replied: Text = ReplyStatus.NO_REPLY.value
    reply_date: Text = ""
    reply_summary: Text = ""
    stage: Text = OutreachStage.DRAFTING.value
    next_follow_up: Text = ""
    next_action: Text = ""
    # Stored direction of the Project <-> Outreach relation.
    project_ids: StrList = Field(default_factory=list)
    notes: Text = ""
    thread_id: OptionalText = None

    def __repr__(self) -> str:
        return f"<Outreach {self.pi_name!r} ({self.id})>"
