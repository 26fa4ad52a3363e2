"""Domain exceptions raised by the tracker store and the gateways."""
from __future__ import annotations


class TrackerError(Exception):
    """Base class for every error raised by this package."""


class EntityNotFound(TrackerError):
    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")


class ImportRejected(TrackerError):
    """An imported document is not JSON or lacks a top-level collection."""


class PathOutsideStorageRoot(TrackerError):
    def __init__(self, relative: str):
        self.relative = relative
        super().__init__(f"Path escapes the storage root: {relative!r}")


class MailNotConfigured(TrackerError):
    """No Google access token is available on disk."""


class MailUpstreamError(TrackerError):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class InvalidMessage(TrackerError, ValueError):
    """An outgoing email has a header Gmail would not accept as written."""
