"""Shared / common schemas: enumerations and small response models."""
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from research_tracker.utils.dates import parse_date_input


# ── Enums ──────────────────────────────────────────────────────────────

class ProjectStatus(str, Enum):
    PROSPECTING = "Prospecting"
    NEED_OUTREACH = "Need Outreach"
    PREPARING = "Preparing"
    SUBMITTED = "Submitted"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    CLOSED = "Closed"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class DecisionChoice(str, Enum):
    APPLY = "Apply"
    MAYBE = "Maybe"
    NO = "No"


class PortalStatus(str, Enum):
    NOT_OPEN = "Not Open"
    OPEN = "Open"
    CLOSED = "Closed"


class NeedsOutreach(str, Enum):
    YES = "Yes"
    NO = "No"
    OPTIONAL = "Optional"


class ReplyStatus(str, Enum):
    NO_REPLY = "No reply"
    REPLIED = "Replied"
    AUTO_REPLY = "Auto-reply"


class OutreachStage(str, Enum):
    DRAFTING = "Drafting"
    SENT = "Sent"
    FOLLOW_UP = "Follow-up"
    MEETING = "Meeting"
    CLOSED = "Closed"


class MaterialType(str, Enum):
    CV = "CV"
    RESEARCH_STATEMENT = "Research Statement"
    SOP = "SOP"
    RECOMMENDATION_LETTER = "Recommendation Letter"
    TRANSCRIPT = "Transcript"
    WRITING_SAMPLE = "Writing Sample"
    LANGUAGE = "Language"
    PORTFOLIO = "Portfolio"
    OTHER = "Other"


class MaterialStatus(str, Enum):
    NOT_STARTED = "Not Started"
    DRAFT = "Draft"
    REVISED = "Revised"
    FINAL = "Final"
    SUBMITTED = "Submitted"


class PostResult(str, Enum):
    NONE = ""
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    NO_RESPONSE = "No response"


# ── Common Responses ───────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime


# ── Request base ───────────────────────────────────────────────────────

class RequestModel(BaseModel):
    """Accepts both camelCase (as the client sends) and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_patch(self) -> dict:
        """Only the fields the caller actually sent with a value, enums as plain strings.

        An explicit ``null`` leaves the stored field unchanged.
        """
        return self.model_dump(exclude_unset=True, exclude_none=True, mode="json")


def normalize_date_field(value: str | None) -> str | None:
    """Field-validator body shared by every date-string field."""
    if value is None:
        return None
    return parse_date_input(value.strip())
