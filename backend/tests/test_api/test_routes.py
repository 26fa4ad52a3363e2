"""HTTP-level tests for the tracker API."""
import json

import pytest

from research_tracker.deps import get_gmail_service
from research_tracker.exceptions import MailNotConfigured
from research_tracker.services.gmail_service import GmailService


@pytest.fixture
def seeded(client, store, linked_doc):
    store.save(linked_doc)
    return client


class TestDocument:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_get_document_first_run(self, client):
        data = client.get("/api/v1/document").json()
        assert len(data["projects"]) == 1
        assert data["meta"]["version"] == 1

    def test_import_raw_json(self, client, linked_doc):
        resp = client.post("/api/v1/document/import", content=json.dumps(linked_doc.to_wire()),
                           headers={"Content-Type": "application/json"})
        assert resp.status_code == 200
        assert [p["id"] for p in resp.json()["projects"]] == ["p1", "p2"]

    def test_import_uploaded_file(self, client, linked_doc):
        body = json.dumps(linked_doc.to_wire()).encode("utf-8")
        resp = client.post("/api/v1/document/import", files={"file": ("tracker.json", body, "application/json")})
        assert resp.status_code == 200
        assert len(resp.json()["materials"]) == 2

    def test_import_rejected(self, seeded):
        resp = seeded.post("/api/v1/document/import", content=json.dumps({"projects": []}),
                           headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert "detail" in resp.json()
        assert len(seeded.get("/api/v1/projects").json()) == 2

    def test_reset(self, seeded):
        data = seeded.post("/api/v1/document/reset").json()
        assert len(data["projects"]) == 1

    def test_csv_export(self, seeded):
        resp = seeded.get("/api/v1/export/projects.csv")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "attachment; filename=" in resp.headers["content-disposition"]
        assert resp.text.startswith("ProjectID,Name,")

    def test_json_export(self, seeded):
        data = json.loads(seeded.get("/api/v1/export/json").text)
        assert data["projects"][0]["outreachIds"] == ["o1"]

    def test_dashboard(self, seeded):
        data = seeded.get("/api/v1/dashboard").json()
        assert data["decision_stats"]["apply"] == 1


class TestProjects:
    def test_create_makes_folder(self, client, gateway):
        resp = client.post("/api/v1/projects", json={"name": "Gamma Program"})
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Gamma Program"
        assert body["outreachIds"] == []
        assert (gateway.storage_root / "Gamma Program").is_dir()

    def test_create_unnamed_makes_no_placeholder_folder(self, client, gateway):
        resp = client.post("/api/v1/projects", json={})
        assert resp.status_code == 201
        assert resp.json()["name"] == ""
        assert not (gateway.storage_root / "Untitled").exists()
        assert gateway.folder_for(resp.json()["name"]) == "General"

    def test_patch_normalizes_input(self, seeded):
        resp = seeded.patch("/api/v1/projects/p1", json={"ddl": "0301", "fit": 11.2, "keywords": ["ML", "ML", " "]})
        body = resp.json()
        assert body["ddl"].startswith("03/01/")
        assert body["fit"] == 10
        assert body["keywords"] == ["ML"]

    def test_patch_nulls_keep_stored_values(self, seeded):
        seeded.patch("/api/v1/projects/p1", json={"status": "Submitted", "priority": "High", "fit": 8})
        resp = seeded.patch("/api/v1/projects/p1", json={"status": None, "priority": None, "fit": None, "name": None})
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "Submitted"
        assert body["priority"] == "High"
        assert body["fit"] == 8
        assert body["name"] == "Alpha Program"

    def test_patch_rejects_unknown_status(self, seeded):
        assert seeded.patch("/api/v1/projects/p1", json={"status": "Dreaming"}).status_code == 422

    def test_unknown_project_404(self, seeded):
        assert seeded.get("/api/v1/projects/nope").status_code == 404
        assert seeded.patch("/api/v1/projects/nope", json={"name": "x"}).status_code == 404

    def test_filters(self, seeded):
        assert [p["id"] for p in seeded.get("/api/v1/projects", params={"q": "beta"}).json()] == ["p2"]

    def test_delete_cascades(self, seeded):
        assert seeded.delete("/api/v1/projects/p1").status_code == 204
        doc = seeded.get("/api/v1/document").json()
        assert doc["outreach"][0]["projectIds"] == []
        assert {m["id"]: m["targetProject"] for m in doc["materials"]} == {"m1": "unassigned", "m2": "unassigned"}
        assert doc["decisions"] == []

    def test_ensure_decision(self, seeded):
        first = seeded.post("/api/v1/projects/p2/decision").json()
        second = seeded.post("/api/v1/projects/p2/decision").json()
        assert first["id"] == second["id"]
        assert first["projectInternalId"] == "p2"


class TestLinks:
    def test_outreach_link_unlink(self, seeded):
        seeded.post("/api/v1/outreach/o1/projects/p2")
        assert seeded.get("/api/v1/projects/p2").json()["outreachIds"] == ["o1"]
        seeded.delete("/api/v1/outreach/o1/projects/p2")
        assert seeded.get("/api/v1/projects/p2").json()["outreachIds"] == []

    def test_linked_creation(self, seeded):
        outreach = seeded.post("/api/v1/projects/p2/outreach").json()
        material = seeded.post("/api/v1/projects/p2/materials").json()
        project = seeded.get("/api/v1/projects/p2").json()
        assert project["outreachIds"] == [outreach["id"]]
        assert project["materialTaskIds"] == [material["id"]]

    def test_material_reassignment(self, seeded):
        resp = seeded.patch("/api/v1/materials/m2", json={"targetProject": "p2"})
        assert resp.json()["targetProject"] == "p2"
        assert seeded.get("/api/v1/projects/p1").json()["materialTaskIds"] == []
        assert seeded.get("/api/v1/projects/p2").json()["materialTaskIds"] == ["m2"]

    def test_material_unassign_with_sentinel(self, seeded):
        resp = seeded.patch("/api/v1/materials/m2", json={"targetProject": "unassigned"})
        assert resp.json()["targetProject"] == "unassigned"
        unassigned = seeded.get("/api/v1/materials", params={"unassigned": True}).json()
        assert [m["id"] for m in unassigned] == ["m1", "m2"]

    def test_material_unassign_with_null(self, seeded):
        resp = seeded.patch("/api/v1/materials/m2", json={"targetProject": None})
        assert resp.json()["targetProject"] == "unassigned"
        assert seeded.get("/api/v1/projects/p1").json()["materialTaskIds"] == []

    def test_material_unknown_target_404(self, seeded):
        assert seeded.patch("/api/v1/materials/m1", json={"targetProject": "nope"}).status_code == 404

    def test_decision_patch(self, seeded):
        resp = seeded.patch("/api/v1/decisions/d1", json={"postResult": "Offer", "takeaways": "Start early"})
        assert resp.json()["postResult"] == "Offer"


class TestFiles:
    def test_upload_serve_and_traversal(self, client, gateway):
        resp = client.post(
            "/api/v1/files/upload",
            files={"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")},
            data={"projectName": "Alpha", "type": "CV"},
        )
        assert resp.status_code == 200
        assert resp.json()["link"].endswith("/api/v1/files/Alpha/CV.pdf")

        served = client.get("/api/v1/files/Alpha/CV.pdf")
        assert served.status_code == 200
        assert served.content == b"%PDF-1.4"

        assert client.get("/api/v1/files/Alpha/missing.pdf").status_code == 404
        assert client.get("/api/v1/files/..%2F..%2Fetc%2Fpasswd").status_code in (403, 404)

    def test_config_requires_root(self, client):
        assert client.post("/api/v1/config", json={}).status_code == 400

    def test_backup(self, seeded, gateway):
        resp = seeded.post("/api/v1/files/backup")
        assert resp.status_code == 200
        assert (gateway.storage_root / "backups" / resp.json()["filename"]).is_file()


class TestMail:
    def test_unconfigured_is_503(self, client):
        class Unauthorized:
            async def send_email(self, to, subject, body):
                raise MailNotConfigured("no token")

        client.app.dependency_overrides[get_gmail_service] = lambda: Unauthorized()
        resp = client.post("/api/v1/mail/send", json={"to": "pi@example.edu", "subject": "Hi", "body": "x"})
        assert resp.status_code == 503

    def test_header_line_break_is_400(self, client, tmp_path):
        gmail = GmailService(tmp_path / "none.json", "https://gmail.test", "https://drive.test", "https://upload.test")
        client.app.dependency_overrides[get_gmail_service] = lambda: gmail
        resp = client.post("/api/v1/mail/send",
                           json={"to": "pi@example.edu", "subject": "Hi\r\nBcc: evil@example.com", "body": "x"})
        assert resp.status_code == 400
        assert "Invalid message headers" in resp.json()["detail"]
