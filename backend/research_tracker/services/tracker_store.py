"""JSON-file backed tracker store.

The whole ``Document`` lives in one JSON file, written wholesale on every
change. Every write goes through ``save()``, which normalizes first, so the
in-memory copy and the file never disagree and no caller can persist an
inconsistent link.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from research_tracker.exceptions import ImportRejected
from research_tracker.models import COLLECTIONS, SCHEMA_VERSION, Document
from research_tracker.services.normalizer import normalize_document
from research_tracker.services.seed import seed_document
from research_tracker.utils.dates import utc_now_iso

logger = logging.getLogger(__name__)


def has_all_collections(parsed: Any) -> bool:
    """True when *parsed* is an object whose four collections are all lists (empty lists count).

    ``null``, ``false``, ``0``, ``""`` or an object in place of a list counts as missing.
    """
    return isinstance(parsed, dict) and all(isinstance(parsed.get(key), list) for key in COLLECTIONS)


class TrackerStore:
    """Owner of the current document and its file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._document: Document | None = None

    @property
    def document(self) -> Document:
        if self._document is None:
            self._document = self.load()
        return self._document

    # ── Load / save ────────────────────────────────────────────────────

    def load(self) -> Document:
        """Read the file; fall back to the seed document if it cannot be trusted."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No tracker file at %s; starting from the example document", self.path)
            return seed_document()
        except OSError as exc:
            logger.warning("Could not read %s: %s; using the example document", self.path, exc)
            return seed_document()

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Tracker file %s is not valid JSON (%s); using the example document", self.path, exc)
            return seed_document()

        if not has_all_collections(parsed):
            logger.warning("Tracker file %s is missing a collection; using the example document", self.path)
            return seed_document()
        return normalize_document(parsed)

    def save(self, document: Document) -> Document:
        """Normalize, persist and return *document*; it becomes the current one."""
        with self._lock:
            stamped = document.model_copy(
                update={"meta": document.meta.model_copy(update={"updated_at": utc_now_iso()})}
            )
            normalized = normalize_document(stamped)
            self._write(normalized)
            self._document = normalized
            return normalized

    def _write(self, document: Document) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(document.to_wire(), ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)

    def apply(self, mutation: Callable[..., Any], *args, **kwargs) -> Any:
        """Run a pure mutation on the current document and save the result.

        Mutations return either a ``Document`` or ``(Document, entity)``.
        The return value has the same shape, with the saved document.
        """
        with self._lock:
            result = mutation(self.document, *args, **kwargs)
            if isinstance(result, tuple):
                doc, *rest = result
                return (self.save(doc), *rest)
            return self.save(result)

    # ── Whole-document operations ──────────────────────────────────────

    def import_json(self, text: str | bytes) -> Document:
        """Replace the document with an exported one.

        Raises ``ImportRejected`` (no state change) when *text* is not JSON
        or lacks one of the four collections.
        """
        try:
            parsed = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ImportRejected(f"Not a JSON document: {exc}") from exc
        if not has_all_collections(parsed):
            raise ImportRejected("Invalid file shape: projects, outreach, materials and decisions must all be lists")

        meta = parsed.get("meta") if isinstance(parsed.get("meta"), dict) else {}
        parsed["meta"] = {**meta, "version": SCHEMA_VERSION}
        with self._lock:
            document = self.save(normalize_document(parsed))
        logger.info(
            "Imported %d project(s), %d outreach, %d material(s), %d decision(s)",
            len(document.projects), len(document.outreach),
            len(document.materials), len(document.decisions),
        )
        return document

    def reset(self) -> Document:
        logger.info("Resetting tracker to the example document")
        return self.save(seed_document())

    def backup(self, directory: Path, keep: int = 10) -> Path:
        """Write a timestamped copy of the current document; keep the newest *keep*."""
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        target = directory / f"backup-{stamp}.json"
        target.write_text(
            json.dumps(self.document.to_wire(), indent=2, ensure_ascii=False), encoding="utf-8"
        )
        backups = sorted(directory.glob("backup-*.json"), reverse=True)
        for old in backups[keep:]:
            old.unlink()
            logger.debug("Removed old backup %s", old.name)
        return target
