"""Project endpoints, plus the per-project decision card."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from research_tracker.deps import get_file_gateway, get_store
from research_tracker.exceptions import EntityNotFound, TrackerError
from research_tracker.schemas.common import DecisionChoice, Priority, ProjectStatus
from research_tracker.schemas.project import ProjectCreate, ProjectUpdate
from research_tracker.services import mutations
from research_tracker.services.dashboard import filter_projects
from research_tracker.services.file_service import FileGateway
from research_tracker.services.tracker_store import TrackerStore
from research_tracker.utils.helpers import is_present

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
def list_projects(
    q: str = "",
    status: ProjectStatus | None = None,
    priority: Priority | None = None,
    decision: DecisionChoice | None = None,
    upcoming: bool = Query(False, description="Only projects with a future next action or deadline"),
    store: TrackerStore = Depends(get_store),
):
    doc = store.document
    projects = filter_projects(
        doc,
        q=q,
        status=status.value if status else None,
        priority=priority.value if priority else None,
        decision=decision.value if decision else None,
        upcoming_only=upcoming,
    )
    return [doc.project_to_wire(p) for p in projects]


@router.post("", status_code=201)
def create_project(
    payload: ProjectCreate,
    store: TrackerStore = Depends(get_store),
    files: FileGateway = Depends(get_file_gateway),
):
    # Unnamed projects share the General folder, created on first upload.
    if payload.create_folder and is_present(payload.name):
        try:
            files.create_project_folder(payload.name)
        except (OSError, TrackerError) as exc:
            # The record is still created; only the folder is missing.
            logger.warning("Failed to create folder for project %r: %s", payload.name, exc)
    doc, project = store.apply(mutations.add_project, payload.name)
    logger.info("Created project %s (%s)", project.name, project.id)
    return doc.project_to_wire(doc.get_project(project.id))


@router.get("/{project_id}")
def get_project(project_id: str, store: TrackerStore = Depends(get_store)):
    doc = store.document
    project = doc.get_project(project_id)
    if project is None:
        raise EntityNotFound("Project", project_id)
    return doc.project_to_wire(project)


@router.patch("/{project_id}")
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    store: TrackerStore = Depends(get_store),
    files: FileGateway = Depends(get_file_gateway),
):
    current = store.document.get_project(project_id)
    if current is None:
        raise EntityNotFound("Project", project_id)

    # Renaming moves the project's folder and every material link into it.
    if payload.name is not None and current.name and payload.name != current.name:
        try:
            files.rename_folder(current.name, payload.name)
        except (OSError, TrackerError) as exc:
            logger.warning("Failed to rename folder %r -> %r: %s", current.name, payload.name, exc)
        else:
            for m in store.document.materials:
                if m.target_project == project_id and m.link:
                    new_link = files.rewrite_folder_link(m.link, current.name, payload.name)
                    if new_link != m.link:
                        store.apply(mutations.update_material, m.id, {"link": new_link})

    doc = store.apply(mutations.update_project, project_id, payload.to_patch())
    return doc.project_to_wire(doc.get_project(project_id))


@router.delete("/{project_id}", status_code=204)
def delete_project(
    project_id: str,
    delete_files: bool = Query(False, description="Also delete the project's folder"),
    store: TrackerStore = Depends(get_store),
    files: FileGateway = Depends(get_file_gateway),
):
    project = store.document.get_project(project_id)
    if project is None:
        raise EntityNotFound("Project", project_id)

    if delete_files and project.name:
        try:
            files.delete_folder(project.name)
        except (OSError, TrackerError) as exc:
            logger.warning("Failed to delete folder of project %s: %s", project_id, exc)

    store.apply(mutations.delete_project, project_id)
    logger.info("Deleted project %s (%s)", project.name, project_id)


@router.post("/{project_id}/outreach", status_code=201)
def create_linked_outreach(project_id: str, store: TrackerStore = Depends(get_store)):
    doc, outreach = store.apply(mutations.add_outreach, project_id)
    return doc.get_outreach(outreach.id).to_wire()


@router.post("/{project_id}/materials", status_code=201)
def create_linked_material(project_id: str, store: TrackerStore = Depends(get_store)):
    doc, material = store.apply(mutations.add_material, project_id)
    return doc.get_material(material.id).to_wire()


@router.post("/{project_id}/decision")
def ensure_decision(project_id: str, store: TrackerStore = Depends(get_store)):
    """Return the project's decision card, creating it on first request."""
    doc, decision = store.apply(mutations.ensure_decision_for_project, project_id)
    return doc.get_decision(decision.id).to_wire()
