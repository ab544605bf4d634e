"""Tests for mimic.pipeline."""

import random
import re

import pytest

from helpers import CountingStore, msg, table_counter
from mimic.cache import ModelCache, NoMessagesForScope
from mimic.haiku import HaikuDetector
from mimic.models import ALL_AUTHORS, GeneratedSequence, NoSeed, SeedAfter, SeedBefore, SeedBoth
from mimic.pipeline import HAIKU_YEARS, GenerationPipeline, format_haiku, select_tokens, seed_tokens

SEQ = GeneratedSequence(prefix=["lead"], middle=["seed"], suffix=["more"])

HAIKU_TEXT = "w1 w2 w3 w4 w5 w6 w7 w8 w9 w10 w11 w12 w13 w14 w15 w16 w17"


def _pipeline(*messages, seed_rng: int = 0) -> GenerationPipeline:
    store = CountingStore([msg("U1", m) for m in messages])
    cache = ModelCache(store, rng=random.Random(seed_rng))
    return GenerationPipeline(
        cache,
        detector=HaikuDetector(table_counter({})),
        rng=random.Random(seed_rng),
    )


class TestSelectTokens:
    def test_before_keeps_seed_and_continuation(self) -> None:
        assert select_tokens(SeedBefore(tokens=("seed",)), SEQ) == ["seed", "more"]

    def test_after_keeps_lead_in_and_seed(self) -> None:
        assert select_tokens(SeedAfter(tokens=("seed",)), SEQ) == ["lead", "seed"]

    def test_no_seed_uses_third_line(self) -> None:
        assert select_tokens(NoSeed(), SEQ) == ["more"]

    def test_both_sides_use_third_line(self) -> None:
        assert select_tokens(SeedBoth(before=("a",), after=("b",)), SEQ) == ["more"]


class TestSeedTokens:
    def test_before_and_after_pass_tokens(self) -> None:
        assert seed_tokens(SeedBefore(tokens=("a", "b"))) == ["a", "b"]
        assert seed_tokens(SeedAfter(tokens=("c",))) == ["c"]

    def test_both_and_none_are_unseeded(self) -> None:
        assert seed_tokens(SeedBoth(before=("a",), after=("b",))) is None
        assert seed_tokens(NoSeed()) is None


class TestFormatHaiku:
    def test_layout(self) -> None:
        text = format_haiku(["one", "two", "three"], "Alice", 1701)
        assert text == "_one_\n_two_\n_three_\n~ Alice, 1701"


class TestGenerationPipeline:
    def test_unseeded(self) -> None:
        reply = _pipeline("one two three four five").run("U1")
        assert reply.text == "one two three four five"
        assert not reply.is_haiku

    def test_seed_before(self) -> None:
        reply = _pipeline("one two three four five").run("U1", SeedBefore(tokens=("three",)))
        assert reply.text == "three four five"

    def test_seed_after(self) -> None:
        reply = _pipeline("one two three four five").run("U1", SeedAfter(tokens=("three",)))
        assert reply.text == "one two three"

    def test_seed_both_is_ignored(self) -> None:
        seed = SeedBoth(before=("two",), after=("four",))
        reply = _pipeline("one two three four five").run("U1", seed)
        assert reply.text == "one two three four five"

    def test_literal_unknown_seed_is_echoed(self) -> None:
        reply = _pipeline("one two").run("U1", SeedBefore(tokens=("hello", "there")))
        assert reply.text == "hello there"

    def test_haiku_is_formatted(self) -> None:
        reply = _pipeline(HAIKU_TEXT).run("U1", author_name="Alice")
        assert reply.is_haiku
        lines = reply.text.split("\n")
        assert lines[:3] == [
            "_w1 w2 w3 w4 w5_",
            "_w6 w7 w8 w9 w10 w11 w12_",
            "_w13 w14 w15 w16 w17_",
        ]
        match = re.fullmatch(r"~ Alice, (\d{4})", lines[3])
        assert match
        assert HAIKU_YEARS[0] <= int(match.group(1)) <= HAIKU_YEARS[1]

    def test_haiku_attribution_falls_back_to_scope(self) -> None:
        reply = _pipeline(HAIKU_TEXT).run("U1")
        assert reply.text.endswith(tuple(f"~ U1, {y}" for y in range(HAIKU_YEARS[0], HAIKU_YEARS[1] + 1)))

    def test_everyone_haiku_is_anonymous(self) -> None:
        reply = _pipeline(HAIKU_TEXT).run(ALL_AUTHORS)
        assert re.fullmatch(r"~ Anonymous, \d{4}", reply.text.split("\n")[3])

    def test_explicit_name_wins_for_everyone(self) -> None:
        reply = _pipeline(HAIKU_TEXT).run(ALL_AUTHORS, author_name="The Channel")
        assert "~ The Channel, " in reply.text

    def test_raw_sequence_returned(self) -> None:
        reply = _pipeline("one two").run("U1")
        assert reply.sequence.suffix == ["one", "two"]
        assert len(reply.sequence.lines()) == 3

    def test_unknown_scope_raises_not_found(self) -> None:
        with pytest.raises(NoMessagesForScope):
            _pipeline("one two").run("U404")
