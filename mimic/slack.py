"""Slack Web API client: outbound notifications and profile lookups.

The event handler talks to two small protocols:

    class Notifier(Protocol):
        async def post(self, channel: str, text: str) -> None: ...

    class ProfileLookup(Protocol):
        async def name(self, user_id: str) -> str: ...

SlackClient implements both over httpx. Tests pass stubs instead.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://slack.com/api"


# ---------------------------------------------------------------------------
# Protocols: what the event handler needs
# ---------------------------------------------------------------------------

class Notifier(Protocol):
    async def post(self, channel: str, text: str) -> None: ...


class ProfileLookup(Protocol):
    async def name(self, user_id: str) -> str: ...


# ---------------------------------------------------------------------------
# SlackClient: connects to the real Web API
# ---------------------------------------------------------------------------

class SlackClient:
    """Async client for the two Web API methods the bot uses.

      chat.postMessage  POST {"channel": ..., "text": ...}
      users.info        GET  ?user=...

    Args:
        token:    Bot token ("xoxb-..."), sent as a Bearer header.
        api_url:  Base URL of the Web API. Defaults to https://slack.com/api.
        timeout:  HTTP timeout in seconds. Defaults to 10.
    """

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, timeout: float = 10.0) -> None:
        self._token = token
        self._base_url = api_url.rstrip("/")
        self._timeout = timeout
        self._names: dict[str, str] = {}

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json; charset=utf-8"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _call(self, http_method: str, method: str, **kwargs: Any) -> dict:
        url = f"{self._base_url}/{method}"
        logger.debug("slack call method=%s", method)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(http_method, url, headers=self._headers(), **kwargs)
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise SlackError(f"Cannot connect to Slack at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise SlackError(f"Slack returned HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise SlackError(f"Slack timed out after {self._timeout}s") from e

        data = resp.json()
        if not data.get("ok"):
            raise SlackError(f"Slack {method} failed: {data.get('error', 'unknown error')}")
        return data

    async def post(self, channel: str, text: str) -> None:
        await self._call("POST", "chat.postMessage", json={"channel": channel, "text": text})

    async def name(self, user_id: str) -> str:
        """Display name, then real name, then the id itself. Memoised."""
        if user_id in self._names:
            return self._names[user_id]
        data = await self._call("GET", "users.info", params={"user": user_id})
        user = data.get("user") or {}
        profile = user.get("profile") or {}
        name = profile.get("display_name") or user.get("real_name") or user_id
        self._names[user_id] = name
        return name


# ---------------------------------------------------------------------------
# SlackError: raised by SlackClient for all connection and protocol failures
# ---------------------------------------------------------------------------

class SlackError(RuntimeError):
    """Raised when Slack cannot be reached or rejects the call."""
