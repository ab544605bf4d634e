"""Tests for mimic.syllables."""

import pytest

from mimic.syllables import (
    SyllableCounter,
    estimate_syllables,
    syllables_heuristic,
)


class TestHeuristic:
    @pytest.mark.parametrize("word, expected", [
        ("frog", 1),
        ("water", 2),
        ("silent", 2),
        ("silence", 2),
        ("table", 2),
        ("leaped", 1),
        ("wanted", 2),
        ("rhythm", 1),
        ("banana", 3),
    ])
    def test_counts(self, word: str, expected: int) -> None:
        assert syllables_heuristic(word) == expected

    def test_ignores_case_and_punctuation(self) -> None:
        assert syllables_heuristic("Water!!") == 2

    def test_no_letters_is_zero(self) -> None:
        assert syllables_heuristic("1234") == 0
        assert syllables_heuristic("hmm") == 0


class TestEstimate:
    def test_override_wins(self) -> None:
        assert estimate_syllables("Every") == 2
        assert estimate_syllables("quiet,") == 2

    def test_no_letters_is_zero(self) -> None:
        assert estimate_syllables("🎉") == 0
        assert estimate_syllables("...") == 0

    @pytest.mark.parametrize("word, expected", [
        ("pond", 1),
        ("the", 1),
        ("into", 2),
        ("silent", 2),
        ("again", 2),
    ])
    def test_common_words(self, word: str, expected: int) -> None:
        assert estimate_syllables(word) == expected


class TestSyllableCounter:
    def test_uses_injected_estimator(self) -> None:
        counter = SyllableCounter(lambda token: len(token))
        assert counter.count("abc") == 3

    def test_zero_falls_back_to_one(self) -> None:
        counter = SyllableCounter(lambda token: 0)
        assert counter.count("anything") == 1

    def test_default_estimator_never_returns_zero(self) -> None:
        counter = SyllableCounter()
        assert counter("🎉") == 1
        assert counter("<@U123>") >= 1

    def test_callable(self) -> None:
        counter = SyllableCounter(lambda token: 4)
        assert counter("x") == counter.count("x") == 4
