"""Pure document mutations.

Each function takes the current ``Document`` and returns a new one (and,
for creators, the new entity). Nothing here persists or normalizes;
``TrackerStore.apply`` runs a mutation and sends the result through
``save``. Patches are dicts keyed by Python attribute names.
"""
from __future__ import annotations

import logging
from datetime import date

from research_tracker.exceptions import EntityNotFound
from research_tracker.models import Decision, Document, MaterialTask, Outreach, Project
from research_tracker.schemas.common import (
    DecisionChoice,
    MaterialStatus,
    MaterialType,
    OutreachStage,
    Priority,
    ProjectStatus,
    ReplyStatus,
)
from research_tracker.utils.helpers import make_id

logger = logging.getLogger(__name__)

# Reference fields that patches may not overwrite directly.
_PROJECT_LOCKED = {"id"}
_OUTREACH_LOCKED = {"id", "project_ids"}
_MATERIAL_LOCKED = {"id"}
_DECISION_LOCKED = {"id", "project_internal_id"}


def _clean(patch: dict, locked: set[str]) -> dict:
    return {k: v for k, v in patch.items() if k not in locked}


def _next_code(prefix: str, count: int, year: int | None = None) -> str:
    if year is None:
        return f"{prefix}-{count:02d}"
    return f"{prefix}-{year}-{count:02d}"


# ── Projects ───────────────────────────────────────────────────────────

def add_project(doc: Document, name: str = "", **fields) -> tuple[Document, Project]:
    """Create a project with default fields and prepend it."""
    project = Project(
        id=make_id("p"),
        code=_next_code("SR", len(doc.projects) + 1, date.today().year + 1),
        name=name,
        status=ProjectStatus.PROSPECTING.value,
        priority=Priority.MEDIUM.value,
        decision=DecisionChoice.MAYBE.value,
    )
    if fields:
        project = project.patched(_clean(fields, _PROJECT_LOCKED))
    return doc.model_copy(update={"projects": [project, *doc.projects]}), project


def update_project(doc: Document, project_id: str, patch: dict) -> Document:
    if doc.get_project(project_id) is None:
        raise EntityNotFound("Project", project_id)
    changes = _clean(patch, _PROJECT_LOCKED)
    projects = [p.patched(changes) if p.id == project_id else p for p in doc.projects]
    return doc.model_copy(update={"projects": projects})


def delete_project(doc: Document, project_id: str) -> Document:
    """Remove a project; its decision goes with it, links to it are cut.

    Outreach records lose the project id; materials that targeted it become
    unassigned rather than being deleted.
    """
    if doc.get_project(project_id) is None:
        raise EntityNotFound("Project", project_id)
    return doc.model_copy(update={
        "projects": [p for p in doc.projects if p.id != project_id],
        "decisions": [d for d in doc.decisions if d.project_internal_id != project_id],
        "outreach": [
            o.patched({"project_ids": [pid for pid in o.project_ids if pid != project_id]})
            if project_id in o.project_ids else o
            for o in doc.outreach
        ],
        "materials": [
            m.patched({"target_project": None}) if m.target_project == project_id else m
            for m in doc.materials
        ],
    })


# ── Outreach ───────────────────────────────────────────────────────────

def add_outreach(doc: Document, link_project_id: str | None = None) -> tuple[Document, Outreach]:
    if link_project_id is not None and doc.get_project(link_project_id) is None:
        raise EntityNotFound("Project", link_project_id)
    outreach = Outreach(
        id=make_id("o"),
        code=_next_code("PI", len(doc.outreach) + 1, date.today().year + 1),
        replied=ReplyStatus.NO_REPLY.value,
        stage=OutreachStage.DRAFTING.value,
        project_ids=[link_project_id] if link_project_id else [],
    )
    return doc.model_copy(update={"outreach": [outreach, *doc.outreach]}), outreach


def update_outreach(doc: Document, outreach_id: str, patch: dict) -> Document:
    if doc.get_outreach(outreach_id) is None:
        raise EntityNotFound("Outreach", outreach_id)
    changes = _clean(patch, _OUTREACH_LOCKED)
    outreach = [o.patched(changes) if o.id == outreach_id else o for o in doc.outreach]
    return doc.model_copy(update={"outreach": outreach})


def link_outreach_to_project(doc: Document, outreach_id: str, project_id: str) -> Document:
    """Link both records; unknown ids leave the document untouched."""
    target = doc.get_outreach(outreach_id)
    if target is None or doc.get_project(project_id) is None:
        logger.debug("Ignoring link %s -> %s: record missing", outreach_id, project_id)
        return doc
    if project_id in target.project_ids:
        return doc
    outreach = [
        o.patched({"project_ids": [*o.project_ids, project_id]}) if o.id == outreach_id else o
        for o in doc.outreach
    ]
    return doc.model_copy(update={"outreach": outreach})


def unlink_outreach_from_project(doc: Document, outreach_id: str, project_id: str) -> Document:
    if doc.get_outreach(outreach_id) is None:
        raise EntityNotFound("Outreach", outreach_id)
    outreach = [
        o.patched({"project_ids": [pid for pid in o.project_ids if pid != project_id]})
        if o.id == outreach_id else o
        for o in doc.outreach
    ]
    return doc.model_copy(update={"outreach": outreach})


def delete_outreach(doc: Document, outreach_id: str) -> Document:
    if doc.get_outreach(outreach_id) is None:
        raise EntityNotFound("Outreach", outreach_id)
    return doc.model_copy(update={"outreach": [o for o in doc.outreach if o.id != outreach_id]})


# ── Materials ──────────────────────────────────────────────────────────

def add_material(doc: Document, link_project_id: str | None = None) -> tuple[Document, MaterialTask]:
    if link_project_id is not None and doc.get_project(link_project_id) is None:
        raise EntityNotFound("Project", link_project_id)
    material = MaterialTask(
        id=make_id("m"),
        code=_next_code("MAT", len(doc.materials) + 1),
        material_type=MaterialType.CV.value,
        target_project=link_project_id,
        status=MaterialStatus.NOT_STARTED.value,
        version="v1",
    )
    return doc.model_copy(update={"materials": [material, *doc.materials]}), material


def update_material(doc: Document, material_id: str, patch: dict) -> Document:
    """Apply *patch*; a new ``target_project`` reassigns the task in one step.

    The target is the only stored side of the relation, so moving it
    removes the task from the old project's list and adds it to the new
    one at the same time.
    """
    current = doc.get_material(material_id)
    if current is None:
        raise EntityNotFound("Material", material_id)
    changes = _clean(patch, _MATERIAL_LOCKED)
    new_target = changes.get("target_project", current.target_project)
    if new_target is not None and doc.get_project(new_target) is None:
        raise EntityNotFound("Project", new_target)
    materials = [m.patched(changes) if m.id == material_id else m for m in doc.materials]
    return doc.model_copy(update={"materials": materials})


def delete_material(doc: Document, material_id: str) -> Document:
    if doc.get_material(material_id) is None:
        raise EntityNotFound("Material", material_id)
    return doc.model_copy(update={"materials": [m for m in doc.materials if m.id != material_id]})


# ── Decisions ──────────────────────────────────────────────────────────

def ensure_decision_for_project(doc: Document, project_id: str) -> tuple[Document, Decision]:
    """Return the project's decision card, creating it on first request."""
    existing = doc.decision_for_project(project_id)
    if existing is not None:
        return doc, existing
    project = doc.get_project(project_id)
    if project is None:
        raise EntityNotFound("Project", project_id)
    decision = Decision(
        id=make_id("d"),
        project_internal_id=project_id,
        conclusion=project.decision or DecisionChoice.MAYBE.value,
        priority=project.priority or Priority.MEDIUM.value,
    )
    return doc.model_copy(update={"decisions": [decision, *doc.decisions]}), decision


def update_decision(doc: Document, decision_id: str, patch: dict) -> Document:
    if doc.get_decision(decision_id) is None:
        raise EntityNotFound("Decision", decision_id)
    changes = _clean(patch, _DECISION_LOCKED)
    decisions = [d.patched(changes) if d.id == decision_id else d for d in doc.decisions]
    return doc.model_copy(update={"decisions": decisions})
