"""Tests for the Gmail / Drive gateway, with Google stubbed by httpx.MockTransport."""
import asyncio
import base64
import email
import email.policy
import json
from datetime import date

import httpx
import pytest

from research_tracker.exceptions import InvalidMessage, MailNotConfigured, MailUpstreamError
from research_tracker.models import Outreach
from research_tracker.services.gmail_service import GmailService, build_raw_message, load_access_token

GMAIL = "https://gmail.test/gmail/v1"
DRIVE = "https://drive.test/drive/v3"
UPLOAD = "https://drive.test/upload/drive/v3"


@pytest.fixture
def token_path(tmp_path):
    path = tmp_path / "token.json"
    path.write_text(json.dumps({"access_token": "secret"}))
    return path


def _service(token_path, handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GmailService(token_path, GMAIL, DRIVE, UPLOAD, client=client)


class TestToken:
    def test_missing_file(self, tmp_path):
        with pytest.raises(MailNotConfigured):
            load_access_token(tmp_path / "none.json")

    def test_alternate_key(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text(json.dumps({"token": "abc"}))
        assert load_access_token(path) == "abc"

    def test_no_token_key(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text(json.dumps({"refresh_token": "r"}))
        with pytest.raises(MailNotConfigured):
            load_access_token(path)


class TestRawMessage:
    @staticmethod
    def _parse(raw):
        return email.message_from_bytes(base64.urlsafe_b64decode(raw), policy=email.policy.default)

    def test_headers_and_body(self):
        raw = build_raw_message("pi@example.edu", "Hello", "Body text")
        decoded = base64.urlsafe_b64decode(raw)
        assert b"To: pi@example.edu\r\n" in decoded
        assert b"Subject: Hello\r\n" in decoded
        msg = self._parse(raw)
        assert msg.get_content().strip() == "Body text"
        assert msg.get_content_charset() == "utf-8"

    def test_non_ascii_subject_is_encoded(self):
        raw = build_raw_message("pi@example.edu", "暑期科研申请", "您好")
        decoded = base64.urlsafe_b64decode(raw)
        assert b"=?utf-8?" in decoded
        assert "暑期科研申请".encode("utf-8") not in decoded
        msg = self._parse(raw)
        assert msg["Subject"] == "暑期科研申请"
        assert msg.get_content().strip() == "您好"

    @pytest.mark.parametrize("to, subject", [
        ("pi@example.edu", "Hi\r\nBcc: evil@example.com"),
        ("pi@example.edu\nBcc: evil@example.com", "Hi"),
    ])
    def test_line_breaks_in_headers_rejected(self, to, subject):
        with pytest.raises(InvalidMessage):
            build_raw_message(to, subject, "body")


class TestSend:
    def test_send_returns_ids(self, token_path):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"id": "msg1", "threadId": "th1"})

        gmail = _service(token_path, handler)
        result = asyncio.run(gmail.send_email("pi@example.edu", "Hi", "Body"))
        assert result == {"messageId": "msg1", "threadId": "th1"}
        assert seen["auth"] == "Bearer secret"
        assert seen["url"] == f"{GMAIL}/users/me/messages/send"

    def test_upstream_error(self, token_path):
        gmail = _service(token_path, lambda request: httpx.Response(401, json={"error": "expired"}))
        with pytest.raises(MailUpstreamError) as exc_info:
            asyncio.run(gmail.send_email("pi@example.edu", "Hi", "Body"))
        assert exc_info.value.status_code == 401


def _thread(*labels):
    return {"messages": [
        {"id": f"m{i}", "snippet": f"s{i}", "internalDate": "1", "labelIds": list(lbl)}
        for i, lbl in enumerate(labels)
    ]}


class TestReplies:
    def test_only_received_messages_count(self, token_path):
        gmail = _service(token_path, lambda r: httpx.Response(200, json=_thread(["SENT"], ["INBOX"])))
        replies = asyncio.run(gmail.check_replies("th1"))
        assert [r["id"] for r in replies] == ["m1"]

    def test_followups(self, token_path):
        threads = {"quiet": _thread(["SENT"]), "answered": _thread(["SENT"], ["INBOX"])}

        def handler(request):
            return httpx.Response(200, json=threads[request.url.path.rsplit("/", 1)[-1]])

        outreach = [
            Outreach(id="o1", pi_name="Quiet PI", thread_id="quiet",
                     first_contact="01/05/2026", next_follow_up="01/08/2026"),
            Outreach(id="o2", pi_name="Chatty PI", thread_id="answered",
                     first_contact="01/05/2026", next_follow_up="01/08/2026"),
            Outreach(id="o3", pi_name="No thread", next_follow_up="01/08/2026"),
            Outreach(id="o4", pi_name="Later", thread_id="quiet", next_follow_up="03/01/2026"),
        ]
        gmail = _service(token_path, handler)
        results = asyncio.run(gmail.check_followups(outreach, today=date(2026, 1, 10)))
        assert len(results) == 1
        assert results[0]["outreachId"] == "o1"
        assert results[0]["daysSinceContact"] == 5
        assert results[0]["needsFollowup"] is True


class TestDrive:
    def test_upload_then_share(self, token_path):
        calls = []

        def handler(request):
            calls.append((request.method, request.url.path))
            if request.url.path.endswith("/permissions"):
                return httpx.Response(200, json={"id": "perm"})
            assert request.headers["Content-Type"].startswith("multipart/related; boundary=")
            return httpx.Response(200, json={"id": "f1", "webViewLink": "https://drive.test/f1"})

        gmail = _service(token_path, handler)
        link = asyncio.run(gmail.upload_to_drive("cv.pdf", b"%PDF", "application/pdf"))
        assert link == "https://drive.test/f1"
        assert calls == [("POST", "/upload/drive/v3/files"), ("POST", "/drive/v3/files/f1/permissions")]
