"""JSON file storage.

All messages live in one flat JSON file under a configurable base directory.
There is no database or ORM; reads and writes go through plain helper
methods that load and dump JSON.

Directory layout:

    {base}/
      messages.json   ← append-only Message log, insertion order preserved
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any

from mimic.models import ALL_AUTHORS, Message


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._base.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    @property
    def _messages_file(self) -> Path:
        return self._base / "messages.json"

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text())

    def _write_json(self, path: Path, data: Any) -> None:
        path.write_text(json.dumps(data, indent=2))

    def _load(self) -> list[Message]:
        path = self._messages_file
        if not path.exists():
            return []
        return [Message.model_validate(m) for m in self._read_json(path)]

    # ------------------------------------------------------------------
    # Messages (append-only)
    # ------------------------------------------------------------------

    def append_messages(self, messages: list[Message]) -> None:
        if not messages:
            return
        with self._lock:
            existing = self._load()
            existing.extend(messages)
            self._write_json(
                self._messages_file,
                [m.model_dump() for m in existing],
            )

    def fetch_messages(self, scope: str) -> list[Message]:
        """Messages for one author, or every message for ALL_AUTHORS."""
        messages = self._load()
        if scope == ALL_AUTHORS:
            return messages
        return [m for m in messages if m.author_id == scope]

    def authors(self) -> list[str]:
        """Distinct author ids in first-seen order."""
        return list(dict.fromkeys(m.author_id for m in self._load()))

    def count(self) -> int:
        return len(self._load())
