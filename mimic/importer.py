"""Slack export import.

A Slack workspace export is a directory of per-channel folders, each holding
one JSON array of message objects per day. Both that layout and a flat
directory of JSON files are accepted. Only plain messages with a user and
text are kept.
"""

import json
import logging
from pathlib import Path

from mimic.models import Message
from mimic.storage import Storage

logger = logging.getLogger(__name__)


def export_files(export_dir: Path) -> list[Path]:
    """JSON files directly in export_dir or one level below, sorted."""
    files = list(export_dir.glob("*.json")) + list(export_dir.glob("*/*.json"))
    return sorted(files)


def messages_from_file(path: Path) -> list[Message]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        return []
    return [
        Message(author_id=obj["user"], text=obj["text"], ts=obj.get("ts"))
        for obj in data
        if isinstance(obj, dict)
        and obj.get("type") == "message"
        and obj.get("user")
        and obj.get("text")
    ]


def import_export(storage: Storage, export_dir: Path) -> int:
    """Append every message of a Slack export to storage. Returns the count."""
    if not export_dir.is_dir():
        raise FileNotFoundError(f"Slack export directory not found: {export_dir}")

    files = export_files(export_dir)
    logger.info("importing %d JSON files from %s", len(files), export_dir)

    total = 0
    for path in files:
        try:
            messages = messages_from_file(path)
        except json.JSONDecodeError as e:
            logger.warning("skipping %s: invalid JSON (%s)", path, e)
            continue
        if messages:
            storage.append_messages(messages)
            total += len(messages)
            logger.info("imported %d messages from %s", len(messages), path.name)

    logger.info("done, imported %d messages", total)
    return total
