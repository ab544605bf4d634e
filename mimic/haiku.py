"""Haiku detection - finds an exact 5-7-5 syllable split of a whole text."""

from __future__ import annotations

from mimic.models import HaikuResult
from mimic.syllables import SyllableCounter
from mimic.text import detokenize, tokenize

LINE_TARGETS = (5, 7, 5)


class HaikuDetector:
    """Greedy 5-7-5 segmenter.

    Tokens fill the current line while they fit its budget. A token that does
    not fit moves to the next line only if the current line is exactly full;
    otherwise the text is not a haiku. Every token must be used: tokens left
    over once the third line is full also fail the match.
    """

    def __init__(self, counter: SyllableCounter | None = None) -> None:
        self._count = counter or SyllableCounter()

    def detect(self, text: str) -> HaikuResult:
        tokens = tokenize(text)
        if len(tokens) < 3:
            return HaikuResult(is_haiku=False, text=text)

        lines: list[list[str]] = [[], [], []]
        line_index = 0
        running = 0

        for token in tokens:
            n = self._count(token)
            if running + n <= LINE_TARGETS[line_index]:
                lines[line_index].append(token)
                running += n
            elif running == LINE_TARGETS[line_index]:
                line_index += 1
                if line_index > 2:
                    return HaikuResult(is_haiku=False, text=text)
                lines[line_index].append(token)
                running = n
            else:
                return HaikuResult(is_haiku=False, text=text)

        # running only tracks the current line; check every line from scratch
        sums = tuple(sum(self._count(t) for t in line) for line in lines)
        if sums != LINE_TARGETS:
            return HaikuResult(is_haiku=False, text=text)

        return HaikuResult(
            is_haiku=True,
            lines=[detokenize(line) for line in lines],
            text=text,
        )
