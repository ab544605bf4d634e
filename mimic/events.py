"""Slack Events API handling: request signing, deduplication and dispatch.

Two event types matter:

    message      → appended to the message log (human, no subtype, not
                   addressed to the bot, mention markup removed)
    app_mention  → parsed as a request; the reply is posted to the channel

The webhook route acknowledges immediately and hands the event to
EventHandler.handle() in a background task. Slack retries unacknowledged
deliveries, so every event_id passes the DedupGate first.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import threading
import time
from collections import deque
from typing import Any

from pydantic import BaseModel

from mimic.cache import NoMessagesForScope
from mimic.mentions import mentions_user, parse_request, strip_mentions
from mimic.models import ALL_AUTHORS, Message
from mimic.pipeline import ANONYMOUS, GenerationPipeline
from mimic.slack import Notifier, ProfileLookup, SlackError
from mimic.storage import Storage

logger = logging.getLogger(__name__)

SIGNATURE_MAX_AGE = 60 * 5


class InboundEvent(BaseModel):
    """The inner "event" object of an event_callback, plus its event_id."""

    event_id: str = ""
    type: str
    user: str | None = None
    text: str = ""
    channel: str = ""
    ts: str | None = None
    subtype: str | None = None
    bot_id: str | None = None


def parse_callback(payload: dict[str, Any]) -> InboundEvent | None:
    """Extract the event from an event_callback envelope. None for anything else."""
    if payload.get("type") != "event_callback":
        return None
    event = payload.get("event")
    if not isinstance(event, dict) or "type" not in event:
        return None
    return InboundEvent.model_validate({**event, "event_id": payload.get("event_id", "")})


# ---------------------------------------------------------------------------
# Request signing
# ---------------------------------------------------------------------------

def compute_signature(secret: str, timestamp: str, body: bytes) -> str:
    base = b"v0:" + timestamp.encode() + b":" + body
    return "v0=" + hmac.new(secret.encode(), base, hashlib.sha256).hexdigest()


def verify_signature(
    secret: str,
    timestamp: str | None,
    body: bytes,
    signature: str | None,
    now: float | None = None,
) -> bool:
    if not timestamp or not signature:
        return False
    try:
        age = abs((now if now is not None else time.time()) - int(timestamp))
    except ValueError:
        return False
    if age > SIGNATURE_MAX_AGE:
        return False
    return hmac.compare_digest(compute_signature(secret, timestamp, body), signature)


# ---------------------------------------------------------------------------
# Dedup gate
# ---------------------------------------------------------------------------

class DedupGate:
    """Remembers the last max_size event ids."""

    def __init__(self, max_size: int = 1000) -> None:
        self._order: deque[str] = deque()
        self._ids: set[str] = set()
        self._max_size = max_size
        self._lock = threading.Lock()

    def seen(self, event_id: str) -> bool:
        """True if event_id was already recorded; records it otherwise."""
        with self._lock:
            if event_id in self._ids:
                return True
            self._ids.add(event_id)
            self._order.append(event_id)
            if len(self._order) > self._max_size:
                self._ids.discard(self._order.popleft())
            return False


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class EventHandler:
    def __init__(
        self,
        storage: Storage,
        pipeline: GenerationPipeline,
        notifier: Notifier,
        profiles: ProfileLookup,
        self_id: str,
    ) -> None:
        self._storage = storage
        self._pipeline = pipeline
        self._notifier = notifier
        self._profiles = profiles
        self._self_id = self_id

    async def handle(self, event: InboundEvent) -> str | None:
        """Process one event. Returns the text posted, if any."""
        if event.type == "message":
            self.ingest(event)
            return None
        if event.type == "app_mention":
            if self._from_bot(event):
                logger.debug("ignoring bot-authored mention in %s", event.channel)
                return None
            return await self.handle_mention(event)
        logger.debug("ignoring event type %r", event.type)
        return None

    def _from_bot(self, event: InboundEvent) -> bool:
        return bool(event.bot_id) or (bool(self._self_id) and event.user == self._self_id)

    def ingest(self, event: InboundEvent) -> bool:
        """Store a human message. Requests addressed to the bot are not corpus text."""
        if event.subtype or self._from_bot(event) or not event.user:
            return False
        if self._self_id and mentions_user(event.text, self._self_id):
            return False
        text = strip_mentions(event.text)
        if not text:
            return False
        self._storage.append_messages([
            Message(author_id=event.user, text=text, ts=event.ts),
        ])
        return True

    async def handle_mention(self, event: InboundEvent) -> str | None:
        request = parse_request(event.text, self._self_id)
        if request is None:
            logger.debug("mention without a target in %s, ignored", event.channel)
            return None

        author_name = await self._author_name(request.scope)
        try:
            reply = self._pipeline.run(request.scope, request.seed, author_name)
            text = reply.text
        except NoMessagesForScope:
            text = no_messages_text(request.scope)

        try:
            await self._notifier.post(event.channel, text)
        except SlackError as e:
            logger.warning("could not deliver reply to %s: %s", event.channel, e)
        return text

    async def _author_name(self, scope: str) -> str:
        if scope == ALL_AUTHORS:
            return ANONYMOUS
        try:
            return await self._profiles.name(scope)
        except SlackError as e:
            logger.warning("profile lookup failed for %s: %s", scope, e)
            return scope


def no_messages_text(scope: str) -> str:
    if scope == ALL_AUTHORS:
        return "I don't have any messages yet."
    return f"I don't have any messages from <@{scope}> yet."
