"""Read-side views: dashboard summary and project filtering."""
from __future__ import annotations

from datetime import date

from research_tracker.models import Document, Project
from research_tracker.schemas.common import DecisionChoice, ProjectStatus
from research_tracker.utils.dates import date_sort_key, parse_date_or_none

UPCOMING_FOLLOWUPS = 5
TASKS_DUE = 6
NEXT_ACTIONS = 6


def build_dashboard(doc: Document, today: date | None = None) -> dict:
    today = today or date.today()

    counts = {s.value: 0 for s in ProjectStatus}
    for p in doc.projects:
        counts[p.status] = counts.get(p.status, 0) + 1

    def _upcoming(text: str) -> bool:
        parsed = parse_date_or_none(text)
        return parsed is not None and parsed >= today

    by_deadline = sorted(doc.projects, key=lambda p: date_sort_key(p.deadline))
    next_deadline = next((p for p in by_deadline if _upcoming(p.deadline)), None) \
        or next((p for p in by_deadline if p.deadline), None)

    follow_ups = sorted(
        (o for o in doc.outreach if o.next_follow_up),
        key=lambda o: date_sort_key(o.next_follow_up),
    )[:UPCOMING_FOLLOWUPS]

    tasks_due = sorted(
        (m for m in doc.materials if m.due),
        key=lambda m: date_sort_key(m.due),
    )[:TASKS_DUE]

    actions = sorted(
        (p for p in doc.projects if p.next_action_date),
        key=lambda p: date_sort_key(p.next_action_date),
    )[:NEXT_ACTIONS]

    conclusions = [d.conclusion for d in doc.decisions]
    return {
        "status_counts": counts,
        "next_deadline": doc.project_to_wire(next_deadline) if next_deadline else None,
        "upcoming_follow_ups": [o.to_wire() for o in follow_ups],
        "tasks_due": [m.to_wire() for m in tasks_due],
        "next_actions": [doc.project_to_wire(p) for p in actions],
        "decision_stats": {
            "total": len(conclusions),
            "apply": conclusions.count(DecisionChoice.APPLY.value),
            "maybe": conclusions.count(DecisionChoice.MAYBE.value),
            "no": conclusions.count(DecisionChoice.NO.value),
        },
    }


def filter_projects(
    doc: Document,
    q: str = "",
    status: str | None = None,
    priority: str | None = None,
    decision: str | None = None,
    upcoming_only: bool = False,
    today: date | None = None,
) -> list[Project]:
    """Projects matching every given filter, nearest deadline first.

    *q* is a case-insensitive substring search over the descriptive
    fields, keywords and required materials. *upcoming_only* keeps
    projects whose next action or deadline is today or later.
    """
    today = today or date.today()
    needle = q.strip().lower()

    def _future(text: str) -> bool:
        parsed = parse_date_or_none(text)
        return parsed is not None and parsed >= today

    matches = []
    for p in doc.projects:
        if status and p.status != status:
            continue
        if priority and p.priority != priority:
            continue
        if decision and p.decision != decision:
            continue
        if upcoming_only and not (_future(p.next_action_date) or _future(p.deadline)):
            continue
        if needle:
            hay = " | ".join([
                p.code, p.name, p.institution, p.region, p.program_type, p.pi_lab,
                " ".join(p.keywords), " ".join(p.required_materials), p.notes,
            ]).lower()
            if needle not in hay:
                continue
        matches.append(p)
    return sorted(matches, key=lambda p: date_sort_key(p.deadline))
