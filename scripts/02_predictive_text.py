from __future__ import annotations

from ngram_tally import PredictiveText
from ngram_tally.tokenization import sentences_from_text


TEXT = (
    "The quick brown fox jumps over the lazy dog. "
    "The lazy dog sleeps all day. "
    "A quick brown cat jumps over the fence. "
    "The fox runs over the hill and the dog follows."
)


def main() -> None:
    predictor = PredictiveText(order=3)
    predictor.learn_all(" ".join(s) for s in sentences_from_text(TEXT))

    for typed in ["", "the", "the lazy", "jumps over", "penguin"]:
        print(f"{typed!r:>14} -> {predictor.suggest(typed)}")


if __name__ == "__main__":
    main()
