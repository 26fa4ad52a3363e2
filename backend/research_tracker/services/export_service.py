"""Export service: whole-document JSON and the projects CSV sheet."""
from __future__ import annotations

import csv
import io
import json
import logging

from research_tracker.models import Document
from research_tracker.utils.dates import today_iso

logger = logging.getLogger(__name__)

PROJECT_CSV_HEADERS = [
    "ProjectID",
    "Name",
    "Institution",
    "Region",
    "Type",
    "DDL",
    "Funding",
    "Status",
    "Fit",
    "Risk",
    "ROI",
    "Priority",
    "Decision",
    "NextAction",
    "NextActionDate",
    "OfficialLink",
]


def format_score(value: float) -> str:
    """``9.0`` -> ``"9"``, ``7.4`` -> ``"7.4"``."""
    return f"{value:g}"


def to_json(doc: Document) -> str:
    """Full document, pretty-printed, in the persisted layout."""
    return json.dumps(doc.to_wire(), indent=2, ensure_ascii=False)


def to_projects_csv(doc: Document) -> str:
    """One row per project; funding tags joined with ``;``.

    Fields holding a comma, quote or newline are quoted with inner quotes
    doubled (``csv.QUOTE_MINIMAL``).
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(PROJECT_CSV_HEADERS)
    for p in doc.projects:
        writer.writerow([
            p.code,
            p.name,
            p.institution,
            p.region,
            p.program_type,
            p.deadline,
            ";".join(p.funding),
            p.status,
            format_score(p.fit),
            format_score(p.risk),
            format_score(p.roi),
            p.priority,
            p.decision,
            p.next_action,
            p.next_action_date,
            p.official_link,
        ])
    return buf.getvalue()


EXPORTERS = {
    "json": to_json,
    "csv": to_projects_csv,
}

MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
}


def export_filename(fmt: str) -> str:
    if fmt == "csv":
        return f"projects_{today_iso()}.csv"
    return f"summer-research-tracker_{today_iso()}.json"


def export_document(doc: Document, fmt: str) -> str:
    """Render *doc* in the given format."""
    if fmt not in EXPORTERS:
        raise ValueError(f"Unsupported export format: {fmt}")
    data = EXPORTERS[fmt](doc)
    logger.info(f"Exported {len(doc.projects)} projects as {fmt}")
    return data
