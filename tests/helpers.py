"""Shared test doubles."""

from mimic.models import ALL_AUTHORS, Message
from mimic.syllables import SyllableCounter


class CountingStore:
    """In-memory store that records every fetch."""

    def __init__(self, messages: list[Message] | None = None) -> None:
        self.messages = list(messages or [])
        self.fetches: list[str] = []

    def fetch_messages(self, scope: str) -> list[Message]:
        self.fetches.append(scope)
        if scope == ALL_AUTHORS:
            return list(self.messages)
        return [m for m in self.messages if m.author_id == scope]


class StubNotifier:
    def __init__(self, error: Exception | None = None) -> None:
        self.posts: list[tuple[str, str]] = []
        self._error = error

    async def post(self, channel: str, text: str) -> None:
        if self._error is not None:
            raise self._error
        self.posts.append((channel, text))


class StubProfiles:
    def __init__(self, names: dict[str, str] | None = None, error: Exception | None = None) -> None:
        self._names = names or {}
        self._error = error

    async def name(self, user_id: str) -> str:
        if self._error is not None:
            raise self._error
        return self._names.get(user_id, user_id)


def table_counter(table: dict[str, int], default: int = 1) -> SyllableCounter:
    """Syllable counter backed by a fixed word -> count table."""
    return SyllableCounter(lambda token: table.get(token.lower(), default))


def msg(author: str, text: str) -> Message:
    return Message(author_id=author, text=text)
