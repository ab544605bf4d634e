"""Generation pipeline: turns one resolved request into reply text.

Flow:
  1. Fetch (or build) the Markov model for the scope from the ModelCache.
  2. Generate with the seed tokens, if the seed is usable.
  3. Keep two of the three generated lines depending on where the requester
     put their words (select_tokens).
  4. Run the haiku detector on the joined text.
  5. Return haiku-formatted text with an attribution line, or the raw text.
     Haikus drawn from every author are signed "Anonymous".

NoMessagesForScope from step 1 propagates to the caller.
"""

from __future__ import annotations

import logging
import random

from mimic.cache import ModelCache
from mimic.haiku import HaikuDetector
from mimic.models import ALL_AUTHORS, GeneratedSequence, NoSeed, Reply, Seed, SeedAfter, SeedBefore
from mimic.text import detokenize

logger = logging.getLogger(__name__)

HAIKU_YEARS = (1600, 1900)
ANONYMOUS = "Anonymous"


def seed_tokens(seed: Seed) -> list[str] | None:
    """Tokens to force into generation. SeedBoth is ignored."""
    if isinstance(seed, (SeedBefore, SeedAfter)):
        return list(seed.tokens)
    return None


def select_tokens(seed: Seed, sequence: GeneratedSequence) -> list[str]:
    """Recombine the generated lines.

    Words written before the target are continued (seed + continuation);
    words written after the target are led into (lead-in + seed). Anything
    else uses the third line alone.
    """
    if isinstance(seed, SeedBefore):
        return sequence.middle + sequence.suffix
    if isinstance(seed, SeedAfter):
        return sequence.prefix + sequence.middle
    return list(sequence.suffix)


def attribution(scope: str) -> str:
    return ANONYMOUS if scope == ALL_AUTHORS else scope


def format_haiku(lines: list[str], author_name: str, year: int) -> str:
    body = "\n".join(f"_{line}_" for line in lines)
    return f"{body}\n~ {author_name}, {year}"


class GenerationPipeline:
    def __init__(
        self,
        cache: ModelCache,
        detector: HaikuDetector | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._cache = cache
        self._detector = detector or HaikuDetector()
        self._rng = rng or random.Random()

    def run(self, scope: str, seed: Seed | None = None, author_name: str = "") -> Reply:
        seed = seed or NoSeed()
        model = self._cache.get_or_build(scope)
        sequence = model.generate(seed_tokens(seed))
        text = detokenize(select_tokens(seed, sequence))

        result = self._detector.detect(text)
        logger.debug(
            "generated scope=%s seed=%s tokens=%d haiku=%s",
            scope, type(seed).__name__, len(text.split()), result.is_haiku,
        )
        if not result.is_haiku or result.lines is None:
            return Reply(text=text, is_haiku=False, sequence=sequence)

        year = self._rng.randint(*HAIKU_YEARS)
        return Reply(
            text=format_haiku(result.lines, author_name or attribution(scope), year),
            is_haiku=True,
            sequence=sequence,
        )
