"""Core domain models.

Messages cross the storage and HTTP boundaries, so they are pydantic models
validated on the way in and out. The seed variants and generation results are
small value types passed between the engine components.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

# Scope sentinel: a model built over every stored message.
ALL_AUTHORS = "*"


class Message(BaseModel):
    """A single entry in the append-only message log."""

    model_config = ConfigDict(frozen=True)

    author_id: str
    text: str
    ts: str | None = None  # opaque, ordered (Slack "1700000000.000100")


# ---------------------------------------------------------------------------
# Seeds: where the requester put their own words relative to the target
# ---------------------------------------------------------------------------

class NoSeed(BaseModel):
    model_config = ConfigDict(frozen=True)


class SeedBefore(BaseModel):
    """Words written between the bot mention and the target mention."""

    model_config = ConfigDict(frozen=True)

    tokens: tuple[str, ...]


class SeedAfter(BaseModel):
    """Words written after the target mention."""

    model_config = ConfigDict(frozen=True)

    tokens: tuple[str, ...]


class SeedBoth(BaseModel):
    """Words on both sides of the target. Generation ignores them."""

    model_config = ConfigDict(frozen=True)

    before: tuple[str, ...]
    after: tuple[str, ...]


Seed = Union[NoSeed, SeedBefore, SeedAfter, SeedBoth]


# ---------------------------------------------------------------------------
# Generation results
# ---------------------------------------------------------------------------

class GeneratedSequence(BaseModel):
    """Three token lines produced by one generation call.

    Seeded: prefix is the generated lead-in, middle is the literal seed and
    suffix is the continuation. Unseeded: three independent walks.
    """

    model_config = ConfigDict(frozen=True)

    prefix: list[str] = Field(default_factory=list)
    middle: list[str] = Field(default_factory=list)
    suffix: list[str] = Field(default_factory=list)

    def lines(self) -> list[list[str]]:
        return [list(self.prefix), list(self.middle), list(self.suffix)]


class HaikuResult(BaseModel):
    is_haiku: bool
    lines: list[str] | None = None  # [line1, line2, line3] when is_haiku
    text: str = ""


class Reply(BaseModel):
    """What the pipeline hands back to the transport."""

    text: str
    is_haiku: bool = False
    sequence: GeneratedSequence
