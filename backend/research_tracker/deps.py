"""Process-wide service instances and their FastAPI dependency getters.

One ``TrackerStore`` per process: it is the single writer of the tracker
file. The gateways are stateless apart from the storage-root config.
Tests swap any of these through ``app.dependency_overrides``.
"""
from functools import lru_cache
from pathlib import Path

from research_tracker.config import get_settings
from research_tracker.services.file_service import FileGateway
from research_tracker.services.gmail_service import GmailService
from research_tracker.services.tracker_store import TrackerStore


@lru_cache
def _store() -> TrackerStore:
    return TrackerStore(get_settings().data_path)


@lru_cache
def _file_gateway() -> FileGateway:
    settings = get_settings()
    return FileGateway(
        config_path=settings.gateway_config_path,
        default_root=Path(settings.STORAGE_ROOT),
        public_base_url=settings.PUBLIC_BASE_URL,
    )


@lru_cache
def _gmail() -> GmailService:
    settings = get_settings()
    return GmailService(
        token_path=settings.token_path,
        gmail_api_url=settings.GMAIL_API_URL,
        drive_api_url=settings.DRIVE_API_URL,
        drive_upload_url=settings.DRIVE_UPLOAD_URL,
    )


def get_store() -> TrackerStore:
    """FastAPI dependency that returns the tracker store."""
    return _store()


def get_file_gateway() -> FileGateway:
    return _file_gateway()


def get_gmail_service() -> GmailService:
    return _gmail()
