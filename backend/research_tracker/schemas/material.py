"""Material task schemas for request validation."""
from pydantic import Field, field_validator

from research_tracker.models.base import as_target
from research_tracker.schemas.common import (
    MaterialStatus,
    MaterialType,
    RequestModel,
    normalize_date_field,
)


class MaterialCreate(RequestModel):
    link_project_id: str | None = None


class MaterialUpdate(RequestModel):
    code: str | None = Field(None, alias="taskId")
    material_type: MaterialType | None = Field(None, alias="type")
    # A project id, or null / "unassigned" to make the task reusable.
    target_project: str | None = None
    status: MaterialStatus | None = None
    version: str | None = None
    due: str | None = None
    dependency: str | None = None
    link: str | None = None
    file_name: str | None = None
    file_last_modified: str | None = None
    notes: str | None = None

    @field_validator("target_project")
    @classmethod
    def _target(cls, v: str | None) -> str | None:
        return as_target(v)

    @field_validator("due")
    @classmethod
    def _normalize_dates(cls, v: str | None) -> str | None:
        return normalize_date_field(v)

    def to_patch(self) -> dict:
        patch = super().to_patch()
        # null target means "unassign", so it is kept.
        if "target_project" in self.model_fields_set:
            patch["target_project"] = self.target_project
        return patch
