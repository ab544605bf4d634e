"""Tests for mimic.text."""

from mimic.text import detokenize, tokenize


class TestTokenize:
    def test_splits_on_whitespace(self) -> None:
        assert tokenize("hello there world") == ["hello", "there", "world"]

    def test_collapses_runs_and_edges(self) -> None:
        assert tokenize("  hello \t there\n\nworld  ") == ["hello", "there", "world"]

    def test_empty_text(self) -> None:
        assert tokenize("") == []
        assert tokenize("   \n ") == []

    def test_punctuation_stays_attached(self) -> None:
        assert tokenize("wait, what?!") == ["wait,", "what?!"]

    def test_rejoin_round_trip_preserves_tokens(self) -> None:
        original = "  lunch   at\tnoon?\n maybe  "
        tokens = tokenize(original)
        assert tokenize(detokenize(tokens)) == tokens
        assert detokenize(tokens) == "lunch at noon? maybe"
