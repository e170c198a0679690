from __future__ import annotations

from collections import Counter

from ngram_tally import FrequencyModel, Walker, WalkMode


def main() -> None:
    observed = ["🌧", "🌧", "🌧", "☀️", "☀️", "🌥", "☀️", "☀️", "☀️", "🌧", "🌧", "🌥"]

    model = FrequencyModel(order=3)
    model.observe_sequence(observed)

    print("OBSERVED:", " ".join(observed))
    for probability, node in model.distributions():
        print(f"  {node.item}: {probability:.2f}")

    for mode in (WalkMode.markov_chain(), WalkMode.match_model()):
        walker = Walker(model, mode, rng=7)
        month = walker.fill(30)
        print(f"{mode.name.upper()}:", " ".join(month))
        print("  counts:", dict(Counter(month)))


if __name__ == "__main__":
    main()
