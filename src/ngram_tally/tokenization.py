from __future__ import annotations

import re

from .text_cleaning import clean_text, normalize_word


_TOKEN_RE = re.compile(r"[^\W\d_]+(?:'[^\W\d_]+)?|\d+(?:\.\d+)?")
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


def simple_tokenize(text: str) -> list[str]:
    """Regex tokenization: words (optionally with apostrophes) + numbers."""

    return _TOKEN_RE.findall(text)


def word_sequence(text: str) -> list[str]:
    """Whitespace split, normalized, empty words dropped."""

    words = (normalize_word(w) for w in text.split())
    return [w for w in words if w]


def sentences_from_text(text: str) -> list[list[str]]:
    """Split running text into sentences, each a list of tokens."""

    sentences = []
    for chunk in _SENTENCE_END_RE.split(clean_text(text)):
        tokens = simple_tokenize(chunk)
        if tokens:
            sentences.append(tokens)
    return sentences
