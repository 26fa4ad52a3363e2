"""Outreach schemas for request validation."""
from pydantic import Field, field_validator

from research_tracker.schemas.common import (
    OutreachStage,
    ReplyStatus,
    RequestModel,
    normalize_date_field,
)


class OutreachCreate(RequestModel):
    link_project_id: str | None = None


class OutreachUpdate(RequestModel):
    code: str | None = Field(None, alias="outreachId")
    pi_name: str | None = None
    institution: str | None = None
    directions: list[str] | None = None
    contact: str | None = None
    first_contact: str | None = None
    email_version: str | None = None
    replied: ReplyStatus | None = None
    reply_date: str | None = None
    reply_summary: str | None = None
    stage: OutreachStage | None = None
    next_follow_up: str | None = None
    next_action: str | None = None
    notes: str | None = None
    thread_id: str | None = None

    @field_validator("first_contact", "reply_date", "next_follow_up")
    @classmethod
    def _normalize_dates(cls, v: str | None) -> str | None:
        return normalize_date_field(v)

    @field_validator("directions")
    @classmethod
    def _dedupe(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return list(dict.fromkeys(s.strip() for s in v if s.strip()))
