"""File gateway: project folders and material files under a storage root.

The storage root is user-configurable at runtime and persisted in a small
JSON config file (``{"storageRoot": ...}``). Every relative path is joined
with ``werkzeug.security.safe_join`` so nothing outside the root can be
touched. Material files live at ``<root>/<project folder>/<type><ext>``
and are linked as ``<public base>/api/v1/files/<folder>/<file>``.
"""
from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from urllib.parse import quote, unquote, urlparse

from werkzeug.security import safe_join

from research_tracker.exceptions import PathOutsideStorageRoot
from research_tracker.utils.helpers import file_extension, is_present, sanitize_name

logger = logging.getLogger(__name__)

GENERAL_FOLDER = "General"
DEFAULT_FILE_STEM = "File"
FILES_ROUTE = "/api/v1/files"


class FileGateway:
    def __init__(self, config_path: Path, default_root: Path | str, public_base_url: str):
        self.config_path = Path(config_path)
        self.default_root = str(default_root)
        self.public_base_url = public_base_url.rstrip("/")
        self._config: dict | None = None

    # ── Config ─────────────────────────────────────────────────────────

    def get_config(self) -> dict:
        if self._config is None:
            self._config = {"storageRoot": self.default_root}
            if self.config_path.exists():
                try:
                    saved = json.loads(self.config_path.read_text(encoding="utf-8"))
                except (OSError, json.JSONDecodeError) as exc:
                    logger.error("Failed to load gateway config %s: %s", self.config_path, exc)
                else:
                    if isinstance(saved, dict) and saved.get("storageRoot"):
                        self._config["storageRoot"] = str(saved["storageRoot"])
        return dict(self._config)

    def set_storage_root(self, storage_root: str) -> dict:
        config = self.get_config()
        config["storageRoot"] = storage_root
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(json.dumps(config, indent=2), encoding="utf-8")
        self._config = config
        logger.info("Storage root set to %s", storage_root)
        return dict(config)

    @property
    def storage_root(self) -> Path:
        return Path(self.get_config()["storageRoot"])

    # ── Paths ──────────────────────────────────────────────────────────

    def resolve(self, relative: str) -> Path:
        """Absolute path of *relative* inside the storage root."""
        joined = safe_join(str(self.storage_root), relative.strip("/"))
        if joined is None:
            raise PathOutsideStorageRoot(relative)
        return Path(joined)

    def folder_for(self, project_name: str | None) -> str:
        return sanitize_name(project_name) if is_present(project_name) else GENERAL_FOLDER

    def file_link(self, folder: str, filename: str) -> str:
        return f"{self.public_base_url}{FILES_ROUTE}/{quote(folder)}/{quote(filename)}"

    @staticmethod
    def split_link(link: str) -> tuple[str, str] | None:
        """``(folder, filename)`` from a file link, or None if it is not one."""
        if not link:
            return None
        parts = [p for p in urlparse(link).path.split("/") if p]
        if len(parts) < 2:
            return None
        return unquote(parts[-2]), unquote(parts[-1])

    # ── Folders ────────────────────────────────────────────────────────

    def create_project_folder(self, project_name: str) -> Path:
        target = self.resolve(self.folder_for(project_name))
        target.mkdir(parents=True, exist_ok=True)
        return target

    def rename_folder(self, old_name: str, new_name: str) -> Path:
        src = self.resolve(self.folder_for(old_name))
        dst = self.resolve(self.folder_for(new_name))
        if not src.exists():
            raise FileNotFoundError(f"Folder not found: {old_name}")
        src.rename(dst)
        logger.info("Renamed folder %s -> %s", src.name, dst.name)
        return dst

    def delete_folder(self, folder_name: str) -> None:
        target = self.resolve(self.folder_for(folder_name))
        if not target.exists():
            raise FileNotFoundError(f"Folder not found: {folder_name}")
        shutil.rmtree(target)
        logger.info("Removed folder %s", target)

    # ── Files ──────────────────────────────────────────────────────────

    def move_file(self, old_path: str, new_path: str) -> Path:
        src = self.resolve(old_path)
        dst = self.resolve(new_path)
        if not src.is_file():
            raise FileNotFoundError(f"File not found: {old_path}")
        dst.parent.mkdir(parents=True, exist_ok=True)
        src.replace(dst)
        return dst

    def delete_file(self, file_path: str) -> None:
        target = self.resolve(file_path)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")
        target.unlink()

    def store_upload(
        self,
        content: bytes,
        original_filename: str,
        project_id: str | None = None,
        project_name: str | None = None,
        material_type: str | None = None,
    ) -> str:
        """Save an upload as ``<project>/<type><ext>`` (overwriting) and return its link."""
        if is_present(project_name):
            folder = sanitize_name(project_name)
        elif is_present(project_id):
            folder = sanitize_name(project_id)
        else:
            folder = GENERAL_FOLDER
        stem = sanitize_name(material_type) if is_present(material_type) else DEFAULT_FILE_STEM
        filename = f"{stem}{file_extension(original_filename)}"

        target = self.resolve(f"{folder}/{filename}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info("Stored upload %s (%d bytes)", target, len(content))
        return self.file_link(folder, filename)

    def relocate_material_file(
        self,
        link: str,
        old_project_name: str | None,
        new_project_name: str | None,
        new_type: str | None = None,
    ) -> str | None:
        """Move a material's file after its target or type changed.

        Returns the new link, or None when nothing had to move.
        """
        parsed = self.split_link(link)
        if parsed is None:
            return None
        _, old_filename = parsed
        old_folder = self.folder_for(old_project_name)
        new_folder = self.folder_for(new_project_name)
        new_filename = old_filename
        if new_type:
            new_filename = f"{sanitize_name(new_type)}{Path(old_filename).suffix}"
        if old_folder == new_folder and old_filename == new_filename:
            return None
        self.move_file(f"{old_folder}/{old_filename}", f"{new_folder}/{new_filename}")
        return self.file_link(new_folder, new_filename)

    def rewrite_folder_link(self, link: str, old_project_name: str, new_project_name: str) -> str:
        old_prefix = f"{FILES_ROUTE}/{quote(self.folder_for(old_project_name))}/"
        new_prefix = f"{FILES_ROUTE}/{quote(self.folder_for(new_project_name))}/"
        return link.replace(old_prefix, new_prefix)
