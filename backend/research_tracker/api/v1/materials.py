"""Material task endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from research_tracker.deps import get_file_gateway, get_store
from research_tracker.exceptions import EntityNotFound, TrackerError
from research_tracker.models import Document, MaterialTask
from research_tracker.schemas.material import MaterialCreate, MaterialUpdate
from research_tracker.services import mutations
from research_tracker.services.file_service import FileGateway
from research_tracker.services.tracker_store import TrackerStore

router = APIRouter()
logger = logging.getLogger(__name__)


def _project_name(doc: Document, project_id: str | None) -> str | None:
    project = doc.get_project(project_id) if project_id else None
    return project.name if project else None


@router.get("")
def list_materials(
    project_id: str | None = None,
    unassigned: bool = False,
    store: TrackerStore = Depends(get_store),
):
    materials = store.document.materials
    if project_id:
        materials = [m for m in materials if m.target_project == project_id]
    elif unassigned:
        materials = [m for m in materials if m.is_unassigned]
    return [m.to_wire() for m in materials]


@router.post("", status_code=201)
def create_material(payload: MaterialCreate | None = None, store: TrackerStore = Depends(get_store)):
    link_project_id = payload.link_project_id if payload else None
    doc, material = store.apply(mutations.add_material, link_project_id)
    return doc.get_material(material.id).to_wire()


@router.get("/{material_id}")
def get_material(material_id: str, store: TrackerStore = Depends(get_store)):
    material = store.document.get_material(material_id)
    if material is None:
        raise EntityNotFound("Material", material_id)
    return material.to_wire()


@router.patch("/{material_id}")
def update_material(
    material_id: str,
    payload: MaterialUpdate,
    store: TrackerStore = Depends(get_store),
    files: FileGateway = Depends(get_file_gateway),
):
    doc = store.document
    current = doc.get_material(material_id)
    if current is None:
        raise EntityNotFound("Material", material_id)
    patch = payload.to_patch()
    new_target = patch.get("target_project")
    if new_target is not None and doc.get_project(new_target) is None:
        raise EntityNotFound("Project", new_target)

    if current.link and ("target_project" in patch or "material_type" in patch):
        new_link = _relocate_file(doc, current, patch, files)
        if new_link:
            patch["link"] = new_link

    doc = store.apply(mutations.update_material, material_id, patch)
    return doc.get_material(material_id).to_wire()


def _relocate_file(doc: Document, current: MaterialTask, patch: dict, files: FileGateway) -> str | None:
    """Move the material's file to follow a new target or type; failures keep the old link."""
    new_target = patch.get("target_project", current.target_project)
    new_type = patch.get("material_type")
    try:
        return files.relocate_material_file(
            current.link,
            old_project_name=_project_name(doc, current.target_project),
            new_project_name=_project_name(doc, new_target),
            new_type=new_type if new_type and new_type != current.material_type else None,
        )
    except (OSError, TrackerError) as exc:
        logger.warning("Failed to move file of material %s: %s", current.id, exc)
        return None


@router.delete("/{material_id}", status_code=204)
def delete_material(
    material_id: str,
    delete_file: bool = Query(False, description="Also delete the linked file"),
    store: TrackerStore = Depends(get_store),
    files: FileGateway = Depends(get_file_gateway),
):
    doc = store.document
    material = doc.get_material(material_id)
    if material is None:
        raise EntityNotFound("Material", material_id)

    if delete_file and material.link:
        parsed = files.split_link(material.link)
        if parsed:
            folder = files.folder_for(_project_name(doc, material.target_project))
            try:
                files.delete_file(f"{folder}/{parsed[1]}")
            except (OSError, TrackerError) as exc:
                logger.warning("Failed to delete file of material %s: %s", material_id, exc)

    store.apply(mutations.delete_material, material_id)
    logger.info("Deleted material %s", material_id)
