"""Document: the whole tracker store: four collections plus metadata.

The document is the unit of persistence and of normalization. Links are
stored in one direction only (Outreach -> Project, Material -> Project);
the per-project id lists are a reverse index computed on read, so the two
sides can never drift apart.
"""
from __future__ import annotations

from collections import defaultdict

from pydantic import Field

from research_tracker.models.base import Text, TrackerModel
from research_tracker.models.decision import Decision
from research_tracker.models.material import MaterialTask
from research_tracker.models.outreach import Outreach
from research_tracker.models.project import Project
from research_tracker.utils.dates import utc_now_iso

SCHEMA_VERSION = 1
COLLECTIONS = ("projects", "outreach", "materials", "decisions")


class DocumentMeta(TrackerModel):
    version: int = SCHEMA_VERSION
    created_at: Text = Field(default_factory=utc_now_iso)
    updated_at: Text = Field(default_factory=utc_now_iso)


class Document(TrackerModel):
    projects: list[Project] = Field(default_factory=list)
    outreach: list[Outreach] = Field(default_factory=list)
    materials: list[MaterialTask] = Field(default_factory=list)
    decisions: list[Decision] = Field(default_factory=list)
    meta: DocumentMeta = Field(default_factory=DocumentMeta)

    # ── Lookups ────────────────────────────────────────────────────────

    def get_project(self, project_id: str) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def get_outreach(self, outreach_id: str) -> Outreach | None:
        return next((o for o in self.outreach if o.id == outreach_id), None)

    def get_material(self, material_id: str) -> MaterialTask | None:
        return next((m for m in self.materials if m.id == material_id), None)

    def get_decision(self, decision_id: str) -> Decision | None:
        return next((d for d in self.decisions if d.id == decision_id), None)

    def decision_for_project(self, project_id: str) -> Decision | None:
        return next((d for d in self.decisions if d.project_internal_id == project_id), None)

    # ── Derived reverse index ──────────────────────────────────────────

    def outreach_index(self) -> dict[str, list[str]]:
        """project id -> outreach ids linked to it, in collection order."""
        index: dict[str, list[str]] = defaultdict(list)
        for o in self.outreach:
            for pid in o.project_ids:
                index[pid].append(o.id)
        return index

    def material_index(self) -> dict[str, list[str]]:
        """project id -> material ids targeting it, in collection order."""
        index: dict[str, list[str]] = defaultdict(list)
        for m in self.materials:
            if m.target_project is not None:
                index[m.target_project].append(m.id)
        return index

    def outreach_ids_for(self, project_id: str) -> list[str]:
        return [o.id for o in self.outreach if project_id in o.project_ids]

    def material_ids_for(self, project_id: str) -> list[str]:
        return [m.id for m in self.materials if m.target_project == project_id]

    # ── Serialization ──────────────────────────────────────────────────

    def project_to_wire(self, project: Project) -> dict:
        data = project.to_wire()
        data["outreachIds"] = self.outreach_ids_for(project.id)
        data["materialTaskIds"] = self.material_ids_for(project.id)
        return data

    def to_wire(self) -> dict:
        """The persisted JSON layout, reverse-index lists included."""
        outreach_index = self.outreach_index()
        material_index = self.material_index()
        projects = []
        for p in self.projects:
            data = p.to_wire()
            data["outreachIds"] = list(outreach_index.get(p.id, []))
            data["materialTaskIds"] = list(material_index.get(p.id, []))
            projects.append(data)
        return {
            "projects": projects,
            "outreach": [o.to_wire() for o in self.outreach],
            "materials": [m.to_wire() for m in self.materials],
            "decisions": [d.to_wire() for d in self.decisions],
            "meta": self.meta.to_wire(),
        }
