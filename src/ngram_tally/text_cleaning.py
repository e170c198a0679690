from __future__ import annotations

import regex  # type: ignore


# URLs and e-mail addresses carry dots that would end a sentence early
_ADDRESS_RE = regex.compile(r"https?://\S+|www\.\S+|\S+@\S+\.\w+")
_CONTROL_OR_SPACE_RE = regex.compile(r"[\p{Cc}\s]+")
_EDGE_PUNCT_RE = regex.compile(r"^[\p{P}\p{Z}\s]+|[\p{P}\p{Z}\s]+$")


def clean_text(text: str) -> str:
    """Lowercase running text and drop addresses before sentence splitting."""

    s = _ADDRESS_RE.sub(" ", text.lower())
    return _CONTROL_OR_SPACE_RE.sub(" ", s).strip()


def normalize_word(word: str) -> str:
    """Lowercase a word and trim surrounding whitespace and punctuation.

    Suitable as a FrequencyModel normalizer: applying it twice changes nothing.
    """

    return _EDGE_PUNCT_RE.sub("", word.lower())
