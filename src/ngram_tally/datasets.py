from __future__ import annotations

from pathlib import Path

import pandas as pd

from .tokenization import word_sequence


def load_sequences_txt(path: str | Path) -> list[list[str]]:
    """One sequence per non-empty line, whitespace separated words."""

    with open(path, "r", encoding="utf-8") as f:
        sequences = [word_sequence(line) for line in f]
    return [s for s in sequences if s]


def load_sequences_csv(path: str | Path, column: str = "text") -> list[list[str]]:
    df = pd.read_csv(path)
    if column not in df.columns:
        raise ValueError(f"CSV must have a column named {column!r}")
    sequences = [word_sequence(text) for text in df[column].dropna().astype(str)]
    return [s for s in sequences if s]
