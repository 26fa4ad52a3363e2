"""MaterialTask model: one application deliverable (CV, statement, letter...)."""
from pydantic import Field

from research_tracker.models.base import OptionalText, TargetRef, Text, TrackerModel
from research_tracker.schemas.common import MaterialStatus, MaterialType


class MaterialTask(TrackerModel):
    id: str
    code: Text = Field("", alias="taskId")
    material_type: Text = Field(MaterialType.CV.value, alias="type")
    # Stored direction of the Project <-> Material relation; None = unassigned.
    target_project: TargetRef = None
    status: Text = MaterialStatus.NOT_STARTED.value
    version: Text = "v1"
    due: Text = ""
    dependency: Text = ""
    link: Text = ""
    file_name: OptionalText = None
    file_last_modified: OptionalText = None
    notes: Text = ""

    @property
    def is_unassigned(self) -> bool:
        return self.target_project is None

    def __repr__(self) -> str:
        return f"<MaterialTask {self.material_type!r} ({self.id})>"
