"""Test configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient

from research_tracker.deps import get_file_gateway, get_store
from research_tracker.models import Decision, Document, MaterialTask, Outreach, Project
from research_tracker.services.file_service import FileGateway
from research_tracker.services.tracker_store import TrackerStore


@pytest.fixture
def linked_doc():
    """Two projects; o1 and m2 point at p1, m1 is unassigned, d1 belongs to p1."""
    return Document(
        projects=[
            Project(id="p1", code="SR-2026-01", name="Alpha Program", deadline="02/01/2026"),
            Project(id="p2", code="SR-2026-02", name="Beta Program", deadline="03/15/2026"),
        ],
        outreach=[Outreach(id="o1", pi_name="A. Smith", project_ids=["p1"])],
        materials=[
            MaterialTask(id="m1", material_type="CV"),
            MaterialTask(id="m2", material_type="Research Statement", target_project="p1"),
        ],
        decisions=[Decision(id="d1", project_internal_id="p1", conclusion="Apply")],
    )


@pytest.fixture
def store(tmp_path):
    """A tracker store backed by a JSON file in a temp directory."""
    return TrackerStore(tmp_path / "tracker.json")


@pytest.fixture
def gateway(tmp_path):
    return FileGateway(
        config_path=tmp_path / "config.json",
        default_root=tmp_path / "storage",
        public_base_url="http://localhost:3001",
    )


@pytest.fixture
def client(store, gateway):
    """HTTP client wired to the temp store and storage root (lifespan not run)."""
    from research_tracker.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_file_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
