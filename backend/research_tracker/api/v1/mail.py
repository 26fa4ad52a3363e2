"""Gmail / Drive gateway endpoints.

Failures map through the app-level handlers: ``MailNotConfigured`` becomes
503 and ``MailUpstreamError`` becomes 502.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import ValidationError

from research_tracker.config import get_settings
from research_tracker.deps import get_gmail_service, get_store
from research_tracker.exceptions import InvalidMessage
from research_tracker.models import Outreach
from research_tracker.schemas.gateway import FollowupCheckRequest, SendEmailRequest
from research_tracker.services.gmail_service import GmailService
from research_tracker.services.tracker_store import TrackerStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/send")
async def send_email(payload: SendEmailRequest, gmail: GmailService = Depends(get_gmail_service)):
    try:
        result = await gmail.send_email(payload.to, payload.subject, payload.body)
    except InvalidMessage as exc:
        raise HTTPException(status_code=400, detail=f"Invalid message headers: {exc}")
    return {"success": True, **result}


@router.get("/replies/{thread_id}")
async def check_replies(thread_id: str, gmail: GmailService = Depends(get_gmail_service)):
    replies = await gmail.check_replies(thread_id)
    return {"hasReply": bool(replies), "replies": replies}


@router.post("/check-followups")
async def check_followups(
    payload: FollowupCheckRequest | None = None,
    store: TrackerStore = Depends(get_store),
    gmail: GmailService = Depends(get_gmail_service),
):
    """List outreach whose follow-up date has passed without a reply in its thread."""
    if payload is not None and payload.outreach_list is not None:
        try:
            outreach = [Outreach.model_validate(raw) for raw in payload.outreach_list]
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid outreach list: {exc.error_count()} errors")
    else:
        outreach = store.document.outreach
    followups = await gmail.check_followups(
        outreach, followup_after_days=get_settings().FOLLOWUP_AFTER_DAYS
    )
    return {"followups": followups}


@router.post("/upload-drive")
async def upload_drive(
    file: UploadFile = File(...),
    gmail: GmailService = Depends(get_gmail_service),
):
    content = await file.read()
    link = await gmail.upload_to_drive(
        file.filename or "upload", content, file.content_type or "application/octet-stream"
    )
    logger.info("Uploaded %s to Drive", file.filename)
    return {"link": link}
