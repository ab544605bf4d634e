"""Per-scope memo of built Markov models.

Models are built lazily on the first request for a scope and kept for the
lifetime of the process. New messages do not invalidate a cached model; a
restart rebuilds everything from the store.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Protocol

from mimic.markov import DEFAULT_MAX_LINE_TOKENS, EmptyCorpus, MarkovModel
from mimic.models import Message
from mimic.text import tokenize

logger = logging.getLogger(__name__)


class CorpusStore(Protocol):
    def fetch_messages(self, scope: str) -> list[Message]: ...


class NoMessagesForScope(LookupError):
    """No stored messages exist for the requested author (or at all)."""

    def __init__(self, scope: str) -> None:
        super().__init__(f"No messages found for scope {scope!r}")
        self.scope = scope


class ModelCache:
    """scope -> MarkovModel, guarded by a lock.

    Builds run outside the lock; two concurrent misses on the same scope may
    both build, and the second result replaces the first.

    Args:
        store:           anything with fetch_messages(scope).
        max_line_tokens: step ceiling handed to every model built.
        rng:             random source shared by the models (tests seed it).
    """

    def __init__(
        self,
        store: CorpusStore,
        max_line_tokens: int = DEFAULT_MAX_LINE_TOKENS,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._max_line_tokens = max_line_tokens
        self._rng = rng
        self._models: dict[str, MarkovModel] = {}
        self._lock = threading.Lock()

    def __contains__(self, scope: str) -> bool:
        with self._lock:
            return scope in self._models

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)

    def get_or_build(self, scope: str) -> MarkovModel:
        with self._lock:
            model = self._models.get(scope)
        if model is not None:
            return model

        corpus = [tokenize(m.text) for m in self._store.fetch_messages(scope)]
        try:
            model = MarkovModel.build(
                corpus, max_line_tokens=self._max_line_tokens, rng=self._rng,
            )
        except EmptyCorpus as e:
            raise NoMessagesForScope(scope) from e

        logger.info("cached markov model scope=%s messages=%d", scope, model.message_count)
        with self._lock:
            self._models[scope] = model
        return model
