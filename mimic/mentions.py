"""Mention parsing for inbound chat text.

Recognised syntax:
  <@U123>        user mention
  <@U123|alice>  user mention with a display label
  <!everyone>, <!channel>, <!here>   broadcast, resolves to ALL_AUTHORS

A request looks like "<@BOT> some words <@TARGET> more words". The bot is
the self mention; the target is whichever mention follows it. The words on
either side of the target become the seed for generation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mimic.models import ALL_AUTHORS, NoSeed, Seed, SeedAfter, SeedBefore, SeedBoth
from mimic.text import tokenize

MENTION_RE = re.compile(r"<@([A-Z0-9]+)(?:\|[^>]*)?>|<!(everyone|channel|here)>")


@dataclass(frozen=True)
class Mention:
    target_id: str
    start: int  # index of "<"
    end: int    # index just past ">"


@dataclass(frozen=True)
class Resolution:
    self_mention: Mention | None
    target: Mention | None


def extract_mentions(text: str) -> list[Mention]:
    """All mentions in left-to-right order."""
    mentions = []
    for match in MENTION_RE.finditer(text):
        target_id = match.group(1) if match.group(1) else ALL_AUTHORS
        mentions.append(Mention(target_id, match.start(), match.end()))
    return mentions


def resolve_target(mentions: list[Mention], self_id: str) -> Resolution:
    """First mention of self_id and the mention right after it, if any."""
    for i, mention in enumerate(mentions):
        if mention.target_id == self_id:
            target = mentions[i + 1] if i + 1 < len(mentions) else None
            return Resolution(mention, target)
    return Resolution(None, None)


def split_context(text: str, self_mention: Mention, target: Mention) -> tuple[str, str]:
    """(text between the two mentions, text after the target).

    Offsets that do not describe self_mention ending before target starts
    give ("", "").
    """
    if not (0 <= self_mention.end <= target.start <= target.end <= len(text)):
        return "", ""
    return text[self_mention.end:target.start], text[target.end:]


def seed_from_context(before: str, after: str) -> Seed:
    before_tokens = tuple(tokenize(before))
    after_tokens = tuple(tokenize(after))
    if before_tokens and after_tokens:
        return SeedBoth(before=before_tokens, after=after_tokens)
    if before_tokens:
        return SeedBefore(tokens=before_tokens)
    if after_tokens:
        return SeedAfter(tokens=after_tokens)
    return NoSeed()


@dataclass(frozen=True)
class Request:
    """A parsed "imitate someone" request."""

    scope: str
    seed: Seed


def parse_request(text: str, self_id: str) -> Request | None:
    """Parse text addressed to self_id. None unless self and a target are both mentioned."""
    resolution = resolve_target(extract_mentions(text), self_id)
    if resolution.self_mention is None or resolution.target is None:
        return None
    before, after = split_context(text, resolution.self_mention, resolution.target)
    return Request(scope=resolution.target.target_id, seed=seed_from_context(before, after))


def mentions_user(text: str, user_id: str) -> bool:
    return any(m.target_id == user_id for m in extract_mentions(text))


def strip_mentions(text: str) -> str:
    """Text with every mention removed and whitespace collapsed."""
    return " ".join(MENTION_RE.sub(" ", text).split())
