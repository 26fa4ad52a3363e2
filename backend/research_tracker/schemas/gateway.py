"""File and mail gateway request bodies (camelCase keys, as the client posts them)."""
from pydantic import Field

from research_tracker.schemas.common import RequestModel


class StorageConfig(RequestModel):
    storage_root: str | None = None


class ProjectFolderRequest(RequestModel):
    project_name: str | None = None


class RenameFolderRequest(RequestModel):
    old_name: str = Field(..., min_length=1)
    new_name: str = Field(..., min_length=1)


class DeleteFolderRequest(RequestModel):
    folder_name: str = Field(..., min_length=1)


class MoveFileRequest(RequestModel):
    old_path: str | None = None
    new_path: str | None = None


class DeleteFileRequest(RequestModel):
    file_path: str = Field(..., min_length=1)


class SendEmailRequest(RequestModel):
    to: str = Field(..., min_length=3)
    subject: str = ""
    body: str = ""


class FollowupCheckRequest(RequestModel):
    # Raw outreach records; the stored outreach is used when omitted.
    outreach_list: list[dict] | None = None
