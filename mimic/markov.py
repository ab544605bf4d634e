"""Order-1 Markov chain over whitespace tokens.

Every message becomes a chain BEGIN -> t1 -> ... -> tn -> END, and each
observed transition adds one to its weight. A second table holds the same
chains reversed (END -> tn -> ... -> t1 -> BEGIN) so that text can be grown
backwards from a seed as well as forwards.

Generation:

    generate()          three independent walks BEGIN -> END
    generate(seed)      [lead-in walked backwards from seed[0],
                         the seed itself,
                         continuation walked forwards from seed[-1]]

Each line is capped at max_line_tokens generated tokens; a walk that hits the
cap is truncated there.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Iterable, Sequence
from itertools import accumulate
from typing import Union

from mimic.models import GeneratedSequence

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINE_TOKENS = 60


class _Sentinel:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


BEGIN = _Sentinel("BEGIN")
END = _Sentinel("END")

State = Union[str, _Sentinel]


class EmptyCorpus(ValueError):
    """Raised when a model is built from a corpus with no usable messages."""


class GenerationStepLimitExceeded(RuntimeError):
    """A walk did not reach its sentinel within the line ceiling.

    Carries the tokens generated up to the ceiling so the caller can keep them.
    """

    def __init__(self, tokens: list[str], limit: int) -> None:
        super().__init__(f"walk exceeded {limit} tokens")
        self.tokens = tokens
        self.limit = limit


# ---------------------------------------------------------------------------
# Transition table: frozen cumulative weights per state
# ---------------------------------------------------------------------------

class _TransitionTable:
    def __init__(self, counts: dict[State, Counter]) -> None:
        self._choices: dict[State, tuple[tuple[State, ...], tuple[int, ...]]] = {}
        for state, nexts in counts.items():
            targets = tuple(nexts.keys())
            self._choices[state] = (targets, tuple(accumulate(nexts[t] for t in targets)))

    def weights(self, state: State) -> dict[State, int]:
        entry = self._choices.get(state)
        if entry is None:
            return {}
        targets, cum = entry
        return {t: c - p for t, c, p in zip(targets, cum, (0,) + cum[:-1])}

    def choose(self, state: State, rng: random.Random) -> State | None:
        """Weighted draw over the cumulative mass of state's transitions."""
        entry = self._choices.get(state)
        if entry is None:
            return None
        targets, cum = entry
        return rng.choices(targets, cum_weights=cum)[0]

    def states(self) -> list[State]:
        return list(self._choices)


# ---------------------------------------------------------------------------
# MarkovModel
# ---------------------------------------------------------------------------

class MarkovModel:
    """Immutable order-1 chain. Build with MarkovModel.build()."""

    def __init__(
        self,
        forward: _TransitionTable,
        backward: _TransitionTable,
        message_count: int,
        max_line_tokens: int = DEFAULT_MAX_LINE_TOKENS,
        rng: random.Random | None = None,
    ) -> None:
        self._forward = forward
        self._backward = backward
        self._message_count = message_count
        self._max_line_tokens = max_line_tokens
        self._rng = rng or random.Random()

    @classmethod
    def build(
        cls,
        corpus: Iterable[Sequence[str]],
        max_line_tokens: int = DEFAULT_MAX_LINE_TOKENS,
        rng: random.Random | None = None,
    ) -> MarkovModel:
        """Build a model from tokenized messages. Empty messages are skipped."""
        forward: dict[State, Counter] = {}
        backward: dict[State, Counter] = {}
        used = 0

        for tokens in corpus:
            if not tokens:
                continue
            used += 1
            chain: list[State] = [BEGIN, *tokens, END]
            for a, b in zip(chain, chain[1:]):
                forward.setdefault(a, Counter())[b] += 1
                backward.setdefault(b, Counter())[a] += 1

        if not used:
            raise EmptyCorpus("corpus contains no messages")

        logger.debug("built markov model messages=%d states=%d", used, len(forward) - 1)
        return cls(
            _TransitionTable(forward),
            _TransitionTable(backward),
            used,
            max_line_tokens=max_line_tokens,
            rng=rng,
        )

    @property
    def message_count(self) -> int:
        return self._message_count

    @property
    def max_line_tokens(self) -> int:
        return self._max_line_tokens

    def vocabulary(self) -> set[str]:
        return {s for s in self._forward.states() if isinstance(s, str)}

    def transitions(self, state: State) -> dict[State, int]:
        """Observed successors of state and their weights (a copy)."""
        return self._forward.weights(state)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self, seed: Sequence[str] | None = None) -> GeneratedSequence:
        if not seed:
            return GeneratedSequence(
                prefix=self._line(self._forward, BEGIN),
                middle=self._line(self._forward, BEGIN),
                suffix=self._line(self._forward, BEGIN),
            )

        lead_in = self._line(self._backward, seed[0])
        lead_in.reverse()
        return GeneratedSequence(
            prefix=lead_in,
            middle=list(seed),
            suffix=self._line(self._forward, seed[-1]),
        )

    def _line(self, table: _TransitionTable, start: State) -> list[str]:
        try:
            return self._walk(table, start)
        except GenerationStepLimitExceeded as e:
            logger.warning("markov walk from %r truncated at %d tokens", start, e.limit)
            return e.tokens

    def _walk(self, table: _TransitionTable, start: State) -> list[str]:
        """Walk from start until a sentinel. Unknown start states yield []."""
        tokens: list[str] = []
        state = start
        while True:
            nxt = table.choose(state, self._rng)
            if nxt is None or isinstance(nxt, _Sentinel):
                return tokens
            if len(tokens) >= self._max_line_tokens:
                raise GenerationStepLimitExceeded(tokens, self._max_line_tokens)
            tokens.append(nxt)
            state = nxt
