"""
Predictive Text Module

Suggests likely next words from a word-level frequency model, the way a
keyboard suggestion bar does: look at the last word typed, rank what has
followed it before, and fall back to common starting words for unknown
words.

Usage:
    predictor = PredictiveText()
    predictor.learn("the cat sat on the mat")
    predictor.suggest("I saw the")        # ['cat', 'mat']
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .model import FrequencyModel
from .nodes import NgramOrder, SequenceKind
from .store import ItemProbability, TallyStore
from .text_cleaning import normalize_word
from .tokenization import word_sequence

logger = logging.getLogger(__name__)


def _ranked_words(probabilities: Iterable[ItemProbability]) -> List[str]:
    literals = [p for p in probabilities if p.node.is_literal]
    return [p.node.item for p in sorted(literals, key=lambda p: p.probability, reverse=True)]


class PredictiveText:
    """
    Next-word suggestions backed by a FrequencyModel of words.

    Attributes:
        model: Underlying frequency model, words normalized by `normalize_word`
        limit: Default number of suggestions returned
    """

    def __init__(self, order: NgramOrder | int = 2,
                 sequence_kind: SequenceKind = SequenceKind.CONTINUOUS,
                 limit: int = 3,
                 store: Optional[TallyStore] = None,
                 model: Optional[FrequencyModel] = None):
        self.model = model or FrequencyModel(sequence_kind, order,
                                             normalizer=normalize_word, store=store)
        self.limit = limit

    def learn(self, text: str) -> int:
        """Observe the words of `text` as one sequence. Returns the word count."""
        words = word_sequence(text)
        if words:
            self.model.observe_sequence(words)
        return len(words)

    def learn_all(self, texts: Iterable[str]) -> int:
        total = sum(self.learn(text) for text in texts)
        logger.info(f"Learned {total} words")
        return total

    def starting_words(self, limit: Optional[int] = None) -> List[str]:
        return _ranked_words(self.model.starting_items())[: self.limit if limit is None else limit]

    def suggest(self, text: str, limit: Optional[int] = None) -> List[str]:
        """
        Most likely words to follow `text`.

        Uses the last `order - 1` words, dropping the oldest while nothing is
        known to follow them. With no match at all the most likely starting
        words are suggested instead.
        """
        words = word_sequence(text)
        context = words[-self.model.order.context_length:] if words else []

        suggestions = []
        while context and not suggestions:
            suggestions = _ranked_words(self.model.probabilities_after(context))
            context = context[1:]
        if not suggestions:
            suggestions = _ranked_words(self.model.starting_items())
        return suggestions[: self.limit if limit is None else limit]
