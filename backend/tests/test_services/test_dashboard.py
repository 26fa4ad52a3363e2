"""Tests for the dashboard summary and project filters."""
from datetime import date

from research_tracker.services import mutations
from research_tracker.services.dashboard import build_dashboard, filter_projects

TODAY = date(2026, 2, 15)


class TestBuildDashboard:
    def test_status_counts_cover_every_status(self, linked_doc):
        counts = build_dashboard(linked_doc, today=TODAY)["status_counts"]
        assert counts["Prospecting"] == 2
        assert counts["Offer"] == 0

    def test_next_deadline_skips_past(self, linked_doc):
        summary = build_dashboard(linked_doc, today=TODAY)
        assert summary["next_deadline"]["id"] == "p2"

    def test_next_deadline_falls_back_to_earliest(self, linked_doc):
        summary = build_dashboard(linked_doc, today=date(2027, 1, 1))
        assert summary["next_deadline"]["id"] == "p1"

    def test_decision_stats(self, linked_doc):
        doc, _ = mutations.ensure_decision_for_project(linked_doc, "p2")
        stats = build_dashboard(doc, today=TODAY)["decision_stats"]
        assert stats == {"total": 2, "apply": 1, "maybe": 1, "no": 0}

    def test_tasks_sorted_by_due(self, linked_doc):
        doc = mutations.update_material(linked_doc, "m1", {"due": "03/01/2026"})
        doc = mutations.update_material(doc, "m2", {"due": "2026-01-10"})
        tasks = build_dashboard(doc, today=TODAY)["tasks_due"]
        assert [t["id"] for t in tasks] == ["m2", "m1"]


class TestFilterProjects:
    def test_text_search_is_case_insensitive(self, linked_doc):
        doc = mutations.update_project(linked_doc, "p2", {"keywords": ["GPCR", "Docking"]})
        assert [p.id for p in filter_projects(doc, q="gpcr")] == ["p2"]
        assert [p.id for p in filter_projects(doc, q="alpha")] == ["p1"]

    def test_status_filter(self, linked_doc):
        doc = mutations.update_project(linked_doc, "p1", {"status": "Preparing"})
        assert [p.id for p in filter_projects(doc, status="Preparing")] == ["p1"]

    def test_upcoming_only(self, linked_doc):
        assert [p.id for p in filter_projects(linked_doc, upcoming_only=True, today=TODAY)] == ["p2"]

    def test_sorted_by_deadline(self, linked_doc):
        doc = mutations.update_project(linked_doc, "p1", {"deadline": "12/01/2026"})
        assert [p.id for p in filter_projects(doc)] == ["p2", "p1"]
