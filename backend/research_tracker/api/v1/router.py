"""Aggregate API v1 router, mounts all sub-routers."""
from fastapi import APIRouter
from research_tracker.api.v1 import decisions, export, files, mail, materials, outreach, projects

router = APIRouter(prefix="/api/v1")

router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(outreach.router, prefix="/outreach", tags=["Outreach"])
router.include_router(materials.router, prefix="/materials", tags=["Materials"])
router.include_router(decisions.router, prefix="/decisions", tags=["Decisions"])
router.include_router(export.router, tags=["Document"])
router.include_router(files.router, tags=["Files"])
router.include_router(mail.router, prefix="/mail", tags=["Mail"])
