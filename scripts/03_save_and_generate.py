from __future__ import annotations

import tempfile
from pathlib import Path

from ngram_tally import FrequencyModel, SequenceKind, Walker, export_model, import_model
from ngram_tally.flat_file import load_json, save_json
from ngram_tally.text_cleaning import normalize_word
from ngram_tally.tokenization import sentences_from_text


CAPTIONS = (
    "I told you the meeting was casual. "
    "I told you not to feed the shark. "
    "The meeting will resume after the shark leaves. "
    "You were told the dress code was casual."
)


def main() -> None:
    model = FrequencyModel(SequenceKind.DISCRETE, order=3, normalizer=normalize_word)
    for sentence in sentences_from_text(CAPTIONS):
        model.observe_sequence(sentence)

    flat = export_model(model)
    with tempfile.TemporaryDirectory() as tmp:
        path = save_json(flat, Path(tmp) / "captions.json")
        print(f"Saved {len(flat)} records to {path.name}")
        restored = import_model(load_json(path), normalizer=normalize_word)

    walker = Walker(restored, rng=2024)
    for _ in range(5):
        print(" ".join(walker.fill(20)).capitalize() + ".")


if __name__ == "__main__":
    main()
