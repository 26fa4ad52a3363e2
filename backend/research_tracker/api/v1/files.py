"""File gateway endpoints: storage root config, project folders, material files."""
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse

from research_tracker.config import get_settings
from research_tracker.deps import get_file_gateway, get_store
from research_tracker.exceptions import PathOutsideStorageRoot
from research_tracker.schemas.gateway import (
    DeleteFileRequest,
    DeleteFolderRequest,
    MoveFileRequest,
    ProjectFolderRequest,
    RenameFolderRequest,
    StorageConfig,
)
from research_tracker.services.file_service import FileGateway
from research_tracker.services.tracker_store import TrackerStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/config")
def get_config(files: FileGateway = Depends(get_file_gateway)):
    return files.get_config()


@router.post("/config")
def set_config(payload: StorageConfig, files: FileGateway = Depends(get_file_gateway)):
    if not payload.storage_root:
        raise HTTPException(status_code=400, detail="Missing storageRoot")
    return {"success": True, "config": files.set_storage_root(payload.storage_root)}


@router.post("/files/project-folder")
def create_project_folder(payload: ProjectFolderRequest, files: FileGateway = Depends(get_file_gateway)):
    if not payload.project_name:
        raise HTTPException(status_code=400, detail="Missing projectName")
    try:
        path = files.create_project_folder(payload.project_name)
    except OSError as exc:
        logger.error("Error creating project folder: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to create folder")
    return {"success": True, "path": str(path)}


@router.post("/files/rename-folder")
def rename_folder(payload: RenameFolderRequest, files: FileGateway = Depends(get_file_gateway)):
    try:
        files.rename_folder(payload.old_name, payload.new_name)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Folder not found")
    except OSError as exc:
        logger.error("Error renaming folder: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True}


@router.post("/files/delete-folder")
def delete_folder(payload: DeleteFolderRequest, files: FileGateway = Depends(get_file_gateway)):
    try:
        files.delete_folder(payload.folder_name)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Folder not found")
    except OSError as exc:
        logger.error("Error deleting folder: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True}


@router.post("/files/upload")
async def upload_file(
    file: UploadFile = File(...),
    project_id: str | None = Form(None, alias="projectId"),
    project_name: str | None = Form(None, alias="projectName"),
    material_type: str | None = Form(None, alias="type"),
    files: FileGateway = Depends(get_file_gateway),
):
    """Store a material file as ``<project>/<type><ext>`` and return its link."""
    settings = get_settings()
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit")
    try:
        link = files.store_upload(content, file.filename or "", project_id, project_name, material_type)
    except OSError as exc:
        logger.error("Error saving upload: %s", exc)
        raise HTTPException(status_code=500, detail="Error saving file")
    return {"link": link}


@router.post("/files/move")
def move_file(payload: MoveFileRequest, files: FileGateway = Depends(get_file_gateway)):
    if not payload.old_path or not payload.new_path:
        raise HTTPException(status_code=400, detail="Missing paths")
    try:
        files.move_file(payload.old_path, payload.new_path)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="File not found")
    except OSError as exc:
        logger.error("Error moving file: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True}


@router.post("/files/delete")
def delete_file(payload: DeleteFileRequest, files: FileGateway = Depends(get_file_gateway)):
    try:
        files.delete_file(payload.file_path)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="File not found")
    except OSError as exc:
        logger.error("Error deleting file: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True}


@router.post("/files/backup")
def save_backup(
    store: TrackerStore = Depends(get_store),
    files: FileGateway = Depends(get_file_gateway),
):
    """Write a timestamped copy of the tracker into ``<root>/backups`` (newest ten kept)."""
    settings = get_settings()
    try:
        path = store.backup(files.storage_root / settings.BACKUP_DIR_NAME, keep=settings.BACKUP_KEEP)
    except OSError as exc:
        logger.error("Backup failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True, "filename": path.name}


@router.get("/files/{file_path:path}")
def serve_file(file_path: str, files: FileGateway = Depends(get_file_gateway)):
    try:
        full_path = files.resolve(file_path)
    except PathOutsideStorageRoot:
        raise HTTPException(status_code=403, detail="Access denied")
    if not full_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path=str(full_path), filename=Path(full_path).name)
