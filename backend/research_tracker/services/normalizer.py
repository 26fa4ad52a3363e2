"""Referential-integrity normalization of a tracker document.

``normalize_document()`` turns any candidate (parsed JSON, a ``Document``,
or junk) into a ``Document`` whose links are consistent:

  - every outreach ``projectIds`` entry names an existing project
  - every material target is an existing project or unassigned
  - every decision belongs to an existing project
  - per-project ``outreachIds`` / ``materialTaskIds`` are derived from the
    two lists above, so the reverse side always agrees

It never raises and never invents records. A top-level collection that is
not a list is replaced by the seed document's collection; entries that are
not objects with a string ``id`` are dropped. A link recorded only on the
project side (``outreachIds``) is kept by folding it onto the outreach.
The project-side ``materialTaskIds`` list is discarded instead: the
material's own target wins, so an entry naming an unassigned material is
lost and that material stays unassigned.
Scalar fields are passed through; only references are rewritten.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from research_tracker.models import (
    SCHEMA_VERSION,
    Decision,
    Document,
    DocumentMeta,
    MaterialTask,
    Outreach,
    Project,
)
from research_tracker.services.seed import seed_document
from research_tracker.utils.dates import utc_now_iso

logger = logging.getLogger(__name__)

# Reverse-index keys carried by the wire format; recomputed, never stored.
_DERIVED_PROJECT_KEYS = ("outreachIds", "materialTaskIds", "outreach_ids", "material_task_ids")


def _entries(raw: Any, fallback: list[dict]) -> list[dict]:
    """Keep mapping entries with a usable string id; non-lists take *fallback* wholesale."""
    if not isinstance(raw, list):
        return fallback
    kept = [e for e in raw if isinstance(e, Mapping) and isinstance(e.get("id"), str) and e.get("id")]
    if len(kept) != len(raw):
        logger.debug("Dropped %d malformed entries", len(raw) - len(kept))
    return [dict(e) for e in kept]


def _unique(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    out = []
    for i in ids:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def normalize_document(candidate: Any) -> Document:
    """Return a consistent ``Document`` built only from data present in *candidate*."""
    if isinstance(candidate, Document):
        candidate = candidate.to_wire()
    if not isinstance(candidate, Mapping):
        candidate = {}

    base = seed_document().to_wire()

    raw_projects = _entries(candidate.get("projects"), base["projects"])
    raw_outreach = _entries(candidate.get("outreach"), base["outreach"])
    raw_materials = _entries(candidate.get("materials"), base["materials"])
    raw_decisions = _entries(candidate.get("decisions"), base["decisions"])

    project_ids = {p["id"] for p in raw_projects}
    outreach_ids = {o["id"] for o in raw_outreach}

    # Project side: keep claims on outreach that exists, to fold onto it below.
    claimed_by: dict[str, list[str]] = {}
    projects: list[Project] = []
    for raw in raw_projects:
        for oid in _as_list(raw.get("outreachIds", raw.get("outreach_ids"))):
            if isinstance(oid, str) and oid in outreach_ids:
                claimed_by.setdefault(oid, []).append(raw["id"])
        # materialTaskIds is dropped here without folding, even for unassigned materials.
        for key in _DERIVED_PROJECT_KEYS:
            raw.pop(key, None)
        projects.append(Project.model_validate(raw))

    # Outreach side: prune dangling project ids, then union with the claims.
    outreach: list[Outreach] = []
    pruned = 0
    for raw in raw_outreach:
        held = _as_list(raw.get("projectIds", raw.get("project_ids")))
        valid = [pid for pid in held if isinstance(pid, str) and pid in project_ids]
        pruned += len(held) - len(valid)
        raw.pop("project_ids", None)
        raw["projectIds"] = _unique(valid + claimed_by.get(raw["id"], []))
        outreach.append(Outreach.model_validate(raw))

    materials: list[MaterialTask] = []
    for raw in raw_materials:
        material = MaterialTask.model_validate(raw)
        if material.target_project is not None and material.target_project not in project_ids:
            pruned += 1
            material.target_project = None
        materials.append(material)

    decisions: list[Decision] = []
    for raw in raw_decisions:
        decision = Decision.model_validate(raw)
        if decision.project_internal_id in project_ids:
            decisions.append(decision)
        else:
            pruned += 1

    if pruned:
        logger.debug("Pruned %d dangling reference(s)", pruned)

    raw_meta = candidate.get("meta")
    created_at = raw_meta.get("createdAt") if isinstance(raw_meta, Mapping) else None
    meta = DocumentMeta(
        version=SCHEMA_VERSION,
        created_at=str(created_at) if created_at else base["meta"]["createdAt"],
        updated_at=utc_now_iso(),
    )

    return Document(
        projects=projects,
        outreach=outreach,
        materials=materials,
        decisions=decisions,
        meta=meta,
    )
