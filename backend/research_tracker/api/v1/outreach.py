"""Outreach endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from research_tracker.deps import get_store
from research_tracker.exceptions import EntityNotFound
from research_tracker.schemas.outreach import OutreachCreate, OutreachUpdate
from research_tracker.services import mutations
from research_tracker.services.tracker_store import TrackerStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
def list_outreach(project_id: str | None = None, store: TrackerStore = Depends(get_store)):
    outreach = store.document.outreach
    if project_id:
        outreach = [o for o in outreach if project_id in o.project_ids]
    return [o.to_wire() for o in outreach]


@router.post("", status_code=201)
def create_outreach(payload: OutreachCreate | None = None, store: TrackerStore = Depends(get_store)):
    link_project_id = payload.link_project_id if payload else None
    doc, outreach = store.apply(mutations.add_outreach, link_project_id)
    return doc.get_outreach(outreach.id).to_wire()


@router.get("/{outreach_id}")
def get_outreach(outreach_id: str, store: TrackerStore = Depends(get_store)):
    outreach = store.document.get_outreach(outreach_id)
    if outreach is None:
        raise EntityNotFound("Outreach", outreach_id)
    return outreach.to_wire()


@router.patch("/{outreach_id}")
def update_outreach(outreach_id: str, payload: OutreachUpdate, store: TrackerStore = Depends(get_store)):
    doc = store.apply(mutations.update_outreach, outreach_id, payload.to_patch())
    return doc.get_outreach(outreach_id).to_wire()


@router.delete("/{outreach_id}", status_code=204)
def delete_outreach(outreach_id: str, store: TrackerStore = Depends(get_store)):
    store.apply(mutations.delete_outreach, outreach_id)
    logger.info("Deleted outreach %s", outreach_id)


@router.post("/{outreach_id}/projects/{project_id}")
def link_project(outreach_id: str, project_id: str, store: TrackerStore = Depends(get_store)):
    """Link an outreach record to a project; unknown ids are ignored."""
    doc = store.apply(mutations.link_outreach_to_project, outreach_id, project_id)
    outreach = doc.get_outreach(outreach_id)
    if outreach is None:
        raise EntityNotFound("Outreach", outreach_id)
    return outreach.to_wire()


@router.delete("/{outreach_id}/projects/{project_id}")
def unlink_project(outreach_id: str, project_id: str, store: TrackerStore = Depends(get_store)):
    doc = store.apply(mutations.unlink_outreach_from_project, outreach_id, project_id)
    return doc.get_outreach(outreach_id).to_wire()
