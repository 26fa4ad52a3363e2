"""Whole-document endpoints: read, reset, import, export and the dashboard."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from research_tracker.deps import get_store
from research_tracker.services.dashboard import build_dashboard
from research_tracker.services.export_service import MEDIA_TYPES, export_document, export_filename
from research_tracker.services.tracker_store import TrackerStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/document")
def get_document(store: TrackerStore = Depends(get_store)):
    return store.document.to_wire()


@router.post("/document/reset")
def reset_document(store: TrackerStore = Depends(get_store)):
    """Replace everything with a fresh example document."""
    return store.reset().to_wire()


@router.post("/document/import")
async def import_document(request: Request, store: TrackerStore = Depends(get_store)):
    """Import an exported JSON document, posted raw or as a multipart ``file``."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if upload is None or isinstance(upload, str):
            raise HTTPException(status_code=400, detail="No file uploaded")
        data = await upload.read()
    else:
        data = await request.body()
    return store.import_json(data).to_wire()


def _download(store: TrackerStore, fmt: str) -> Response:
    body = export_document(store.document, fmt)
    return Response(
        content=body,
        media_type=f"{MEDIA_TYPES[fmt]}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(fmt)}"'},
    )


@router.get("/export/json")
def export_json(store: TrackerStore = Depends(get_store)):
    """Download the whole document, pretty-printed."""
    return _download(store, "json")


@router.get("/export/projects.csv")
def export_projects_csv(store: TrackerStore = Depends(get_store)):
    """Download the projects sheet."""
    return _download(store, "csv")


@router.get("/dashboard")
def dashboard(store: TrackerStore = Depends(get_store)):
    return build_dashboard(store.document)
