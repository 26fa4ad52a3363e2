"""Gmail / Drive gateway over the Google REST APIs.

Authorisation is out of scope: an OAuth access token is expected in a JSON
file (``access_token`` or ``token`` key) written by whatever tool performed
the consent flow. Every call sends it as a bearer token.

No retry logic lives here; a failed upstream call surfaces as
``MailUpstreamError`` and the caller reports it.
"""
from __future__ import annotations

import base64
import json
import logging
import uuid
from datetime import date
from email.message import EmailMessage
from email.policy import SMTP
from pathlib import Path
from typing import Any

import httpx

from research_tracker.exceptions import InvalidMessage, MailNotConfigured, MailUpstreamError
from research_tracker.models import Outreach
from research_tracker.schemas.common import ReplyStatus
from research_tracker.services.http_client_manager import get_http_client
from research_tracker.utils.dates import parse_date_or_none

logger = logging.getLogger(__name__)

SENT_LABEL = "SENT"


def load_access_token(token_path: Path) -> str:
    try:
        data = json.loads(token_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise MailNotConfigured(f"No Google token at {token_path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise MailNotConfigured(f"Unreadable Google token at {token_path}: {exc}") from exc
    token = None
    if isinstance(data, dict):
        token = data.get("access_token") or data.get("token")
    if not token:
        raise MailNotConfigured(f"Google token file {token_path} has no access token")
    return token


def build_raw_message(to: str, subject: str, body: str) -> str:
    """RFC 822 message, base64url-encoded as Gmail's ``raw`` field expects.

    Non-ASCII headers are RFC 2047 encoded. A CR or LF in ``to`` or
    ``subject`` raises ``InvalidMessage``.
    """
    msg = EmailMessage()
    try:
        msg["To"] = to
        msg["Subject"] = subject
    except ValueError as exc:
        raise InvalidMessage(str(exc)) from exc
    msg.set_content(body, charset="utf-8")
    return base64.urlsafe_b64encode(msg.as_bytes(policy=SMTP)).decode("ascii")


def _multipart_related(metadata: dict, content: bytes, mime_type: str) -> tuple[bytes, str]:
    boundary = f"tracker-{uuid.uuid4().hex}"
    head = (
        f"--{boundary}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        f"{json.dumps(metadata)}\r\n"
        f"--{boundary}\r\n"
        f"Content-Type: {mime_type}\r\n\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{boundary}--\r\n".encode("utf-8")
    return head + content + tail, f"multipart/related; boundary={boundary}"


class GmailService:
    def __init__(
        self,
        token_path: Path,
        gmail_api_url: str,
        drive_api_url: str,
        drive_upload_url: str,
        client: httpx.AsyncClient | None = None,
    ):
        self.token_path = Path(token_path)
        self.gmail_api_url = gmail_api_url.rstrip("/")
        self.drive_api_url = drive_api_url.rstrip("/")
        self.drive_upload_url = drive_upload_url.rstrip("/")
        self._client = client

    def _http(self, service: str) -> httpx.AsyncClient:
        return self._client or get_http_client(service)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {load_access_token(self.token_path)}"}

    async def _request(self, service: str, method: str, url: str, **kwargs) -> dict[str, Any]:
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        try:
            resp = await self._http(service).request(method, url, headers=headers, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("%s %s failed: %s", method, url, exc.response.status_code)
            raise MailUpstreamError(
                f"Google API error {exc.response.status_code}: {exc.response.text[:200]}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("%s %s unreachable: %s", method, url, exc)
            raise MailUpstreamError(f"Google API unreachable: {exc}") from exc
        return resp.json() if resp.content else {}

    # ── Gmail ──────────────────────────────────────────────────────────

    async def send_email(self, to: str, subject: str, body: str) -> dict[str, str]:
        data = await self._request(
            "gmail", "POST",
            f"{self.gmail_api_url}/users/me/messages/send",
            json={"raw": build_raw_message(to, subject, body)},
        )
        logger.info("Sent email to %s (thread %s)", to, data.get("threadId"))
        return {"messageId": data.get("id", ""), "threadId": data.get("threadId", "")}

    async def thread_messages(self, thread_id: str) -> list[dict]:
        data = await self._request(
            "gmail", "GET",
            f"{self.gmail_api_url}/users/me/threads/{thread_id}",
            params={"format": "metadata"},
        )
        return data.get("messages", [])

    async def check_replies(self, thread_id: str) -> list[dict]:
        """Messages in the thread that were not sent by us."""
        return [
            {"id": m.get("id"), "snippet": m.get("snippet", ""), "date": m.get("internalDate")}
            for m in await self.thread_messages(thread_id)
            if SENT_LABEL not in (m.get("labelIds") or [])
        ]

    async def check_followups(
        self,
        outreach: list[Outreach],
        today: date | None = None,
        followup_after_days: int = 3,
    ) -> list[dict]:
        """Outreach past its follow-up date whose thread still has no reply."""
        today = today or date.today()
        results = []
        for o in outreach:
            if not o.thread_id or not o.next_follow_up:
                continue
            due = parse_date_or_none(o.next_follow_up)
            if due is None or due > today or o.replied != ReplyStatus.NO_REPLY.value:
                continue
            if await self.check_replies(o.thread_id):
                continue
            first = parse_date_or_none(o.first_contact)
            days_since = (today - first).days if first else 0
            results.append({
                "outreachId": o.id,
                "piName": o.pi_name,
                "daysSinceContact": days_since,
                "needsFollowup": days_since >= followup_after_days,
                "message": f"No reply from {o.pi_name} after {days_since} days",
            })
        return results

    # ── Drive ──────────────────────────────────────────────────────────

    async def upload_to_drive(self, filename: str, content: bytes, mime_type: str) -> str:
        """Upload a file, make it readable by link, return its web link."""
        body, content_type = _multipart_related(
            {"name": filename}, content, mime_type or "application/octet-stream"
        )
        created = await self._request(
            "drive", "POST",
            f"{self.drive_upload_url}/files",
            params={"uploadType": "multipart", "fields": "id,webViewLink"},
            content=body,
            headers={"Content-Type": content_type},
        )
        file_id = created.get("id")
        if not file_id:
            raise MailUpstreamError("Drive upload returned no file id")
        await self._request(
            "drive", "POST",
            f"{self.drive_api_url}/files/{file_id}/permissions",
            json={"type": "anyone", "role": "reader"},
        )
        return created.get("webViewLink", "")
