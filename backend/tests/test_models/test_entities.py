"""Tests for the tracker entity models and their lenient field types."""
import pytest

from research_tracker.models import UNASSIGNED, Decision, MaterialTask, Outreach, Project
from research_tracker.models.base import clamp_score


class TestScoreClamping:
    @pytest.mark.parametrize("raw, expected", [
        (11.2, 10.0),
        (-1, 0.0),
        (7.36, 7.4),
        (7.25, 7.3),
        (9, 9.0),
        ("8", 8.0),
    ])
    def test_clamped_and_rounded(self, raw, expected):
        assert clamp_score(raw) == expected

    @pytest.mark.parametrize("raw", [None, "abc", True, float("nan"), [], {}])
    def test_junk_becomes_zero(self, raw):
        assert clamp_score(raw) == 0.0

    def test_project_fields_are_clamped(self):
        project = Project.model_validate({"id": "p1", "fit": 11.2, "risk": -1, "roi": 7.36})
        assert (project.fit, project.risk, project.roi) == (10.0, 0.0, 7.4)


class TestMaterialTarget:
    @pytest.mark.parametrize("raw", [UNASSIGNED, "通用", "General", "", None, 42])
    def test_sentinels_mean_unassigned(self, raw):
        material = MaterialTask.model_validate({"id": "m1", "targetProject": raw})
        assert material.target_project is None
        assert material.is_unassigned

    def test_project_id_is_kept(self):
        material = MaterialTask.model_validate({"id": "m1", "targetProject": "p1"})
        assert material.target_project == "p1"
        assert not material.is_unassigned

    def test_unassigned_serializes_as_sentinel(self):
        assert MaterialTask(id="m1").to_wire()["targetProject"] == UNASSIGNED
        assert MaterialTask(id="m1", target_project="p1").to_wire()["targetProject"] == "p1"


class TestWireFormat:
    def test_project_aliases(self):
        wire = Project(id="p1", code="SR-2026-01", program_type="REU", deadline="02/01/2026").to_wire()
        assert wire["projectId"] == "SR-2026-01"
        assert wire["type"] == "REU"
        assert wire["ddl"] == "02/01/2026"
        assert "outreachIds" not in wire

    def test_accepts_snake_case_and_camel_case(self):
        a = Outreach.model_validate({"id": "o1", "piName": "A. Smith", "projectIds": ["p1"]})
        b = Outreach.model_validate({"id": "o1", "pi_name": "A. Smith", "project_ids": ["p1"]})
        assert a == b

    def test_unknown_keys_survive(self):
        wire = Project.model_validate({"id": "p1", "customColumn": "kept"}).to_wire()
        assert wire["customColumn"] == "kept"

    def test_scalars_are_coerced_not_rejected(self):
        project = Project.model_validate({"id": "p1", "name": None, "region": 5, "keywords": "ML"})
        assert project.name == ""
        assert project.region == "5"
        assert project.keywords == []

    def test_null_post_result_becomes_empty(self):
        assert Decision.model_validate({"id": "d1", "postResult": None}).post_result == ""


class TestPatched:
    def test_returns_revalidated_copy(self):
        project = Project(id="p1", name="Old")
        updated = project.patched({"name": "New", "fit": 12})
        assert updated.name == "New"
        assert updated.fit == 10.0
        assert project.name == "Old"

    def test_target_sentinel_in_patch(self):
        material = MaterialTask(id="m1", target_project="p1")
        assert material.patched({"target_project": UNASSIGNED}).target_project is None
