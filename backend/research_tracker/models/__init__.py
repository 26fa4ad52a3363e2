"""Tracker entity models."""
from research_tracker.models.base import UNASSIGNED
from research_tracker.models.project import Project
from research_tracker.models.outreach import Outreach
from research_tracker.models.material import MaterialTask
from research_tracker.models.decision import Decision
from research_tracker.models.document import COLLECTIONS, SCHEMA_VERSION, Document, DocumentMeta

__all__ = [
    "UNASSIGNED",
    "COLLECTIONS",
    "SCHEMA_VERSION",
    "Project",
    "Outreach",
    "MaterialTask",
    "Decision",
    "Document",
    "DocumentMeta",
]
