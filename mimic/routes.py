"""HTTP endpoints.

  GET  /health          liveness
  POST /api/message     store one message {user_id, message}
  GET  /api/messages    generate text for ?user_id=... ("*" for everyone)
  GET  /api/authors     distinct author ids
  POST /slack/events    Slack Events API webhook

Shared state (storage, pipeline, dedup gate, event handler) lives on
app.state and is set up by create_app().
"""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from pydantic import BaseModel

from mimic.cache import NoMessagesForScope
from mimic.events import parse_callback, verify_signature
from mimic.models import Message

logger = logging.getLogger(__name__)

router = APIRouter()


class StoreMessageBody(BaseModel):
    user_id: str
    message: str
    ts: str | None = None


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.post("/api/message")
async def store_message(body: StoreMessageBody, request: Request):
    """Append one message to the log."""
    request.app.state.storage.append_messages([
        Message(author_id=body.user_id, text=body.message, ts=body.ts),
    ])
    return {"success": True, "message": "Message stored"}


@router.get("/api/messages")
async def generate_message(request: Request, user_id: str = ""):
    """Generate a message in the style of user_id."""
    if not user_id:
        raise HTTPException(400, "user_id is required")
    try:
        reply = request.app.state.pipeline.run(user_id)
    except NoMessagesForScope:
        raise HTTPException(404, "No messages found for this user")
    return {
        "success": True,
        "rawdata": reply.sequence.lines(),
        "data": reply.text,
        "haiku": reply.is_haiku,
    }


@router.get("/api/authors")
async def list_authors(request: Request):
    """Distinct author ids in first-seen order."""
    return request.app.state.storage.authors()


@router.post("/slack/events")
async def slack_events(request: Request, background_tasks: BackgroundTasks):
    """Slack Events API webhook: acknowledge now, handle in the background."""
    body = await request.body()
    secret = request.app.state.settings.slack_signing_secret
    if secret and not verify_signature(
        secret,
        request.headers.get("X-Slack-Request-Timestamp"),
        body,
        request.headers.get("X-Slack-Signature"),
    ):
        raise HTTPException(401, "Invalid request signature")

    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        raise HTTPException(400, "Request body is not valid JSON")
    if not isinstance(payload, dict):
        raise HTTPException(400, "Request body must be a JSON object")

    if payload.get("type") == "url_verification":
        return {"challenge": payload.get("challenge", "")}

    event = parse_callback(payload)
    if event is None:
        return {"ok": True}

    if event.event_id and request.app.state.dedup.seen(event.event_id):
        logger.debug("duplicate event %s dropped", event.event_id)
        return {"ok": True}

    background_tasks.add_task(request.app.state.events.handle, event)
    return {"ok": True}
