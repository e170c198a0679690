#!/usr/bin/env python3
"""
ngram-tally command line tool

Train a word-level frequency model from a text corpus, save it, and use a
saved model to generate sequences or suggest next words.

Usage:
    ngram-tally train corpus.txt -o model.json --order 3 --discrete
    ngram-tally generate model.json --count 5 --length 12 --seed 7
    ngram-tally suggest model.json "the cat"
    ngram-tally demo
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .bridge import export_model, import_model
from .config import TallyConfig
from .datasets import load_sequences_csv, load_sequences_txt
from .errors import TallyError
from .flat_file import load_csv, load_json, save_csv, save_json
from .model import FrequencyModel
from .predictive import PredictiveText
from .text_cleaning import normalize_word
from .walker import Walker

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def load_config(path: Optional[str]) -> TallyConfig:
    if not path:
        return TallyConfig()
    with open(path, 'r', encoding='utf-8') as f:
        return TallyConfig.from_dict(json.load(f))


def save_model(model: FrequencyModel, path: str) -> Path:
    flat = export_model(model)
    if path.endswith('.csv'):
        return save_csv(flat, path)
    return save_json(flat, path)


def open_model(path: str, config: TallyConfig) -> FrequencyModel:
    flat = load_csv(path) if path.endswith('.csv') else load_json(path)
    return import_model(flat, strict=config.strict_import, normalizer=normalize_word)


def run_train(args: argparse.Namespace, config: TallyConfig) -> None:
    if args.input.endswith('.csv'):
        sequences = load_sequences_csv(args.input, column=args.column)
    else:
        sequences = load_sequences_txt(args.input)

    model = FrequencyModel(config.kind, config.order, normalizer=normalize_word)
    for sequence in sequences:
        model.observe_sequence(sequence)

    logger.info(f"Observed {len(sequences)} sequences")
    path = save_model(model, args.output)
    print(f"Model with {len(model.distributions())} distinct items written to {path}")


def run_generate(args: argparse.Namespace, config: TallyConfig) -> None:
    model = open_model(args.model, config)
    walker = Walker(model, config.walk, rng=config.seed)

    for _ in range(args.count):
        sequence = walker.fill(args.length or config.fill_size)
        print(" ".join(str(item) for item in sequence))
        walker.end_walk()


def run_suggest(args: argparse.Namespace, config: TallyConfig) -> None:
    predictor = PredictiveText(model=open_model(args.model, config),
                               limit=config.suggestion_limit)
    for word in predictor.suggest(args.text):
        print(word)


def run_demo(args: argparse.Namespace, config: TallyConfig) -> None:
    """Weather demo: learn a week of weather and generate a few more."""
    print("=" * 50)
    print("ngram-tally weather demo")
    print("=" * 50)

    weather = ["🌧", "🌧", "🌧", "🌧", "☀️", "☀️", "☀️", "☀️"]
    model = FrequencyModel(order=config.order)
    model.observe_sequence(weather)

    print(f"\nObserved: {' '.join(weather)}")
    print("\nOverall distribution:")
    for probability, node in model.distributions():
        print(f"  {node.item}  {probability:.2f}")

    print("\nAfter ☀️:")
    for probability, node in model.probabilities_after(["☀️"]):
        label = node.item if node.is_literal else node.kind.name
        print(f"  {label}  {probability:.2f}")

    walker = Walker(model, config.walk, rng=config.seed)
    print("\nGenerated weeks:")
    for _ in range(args.count):
        print("  " + " ".join(walker.fill(7)))
        walker.end_walk()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Build n-gram frequency models and generate sequences from them',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--config', type=str, help='JSON file with TallyConfig settings')
    parser.add_argument('--order', type=int, help='Largest n-gram to count')
    parser.add_argument('--seed', type=int, help='Random seed for generation')
    parser.add_argument('--walk', choices=['markov_chain', 'match_model', 'fixed_steps'],
                        help='Context policy for generation')
    parser.add_argument('--steps', type=int, help='Context length for --walk fixed_steps')
    parser.add_argument('--lenient', action='store_true',
                        help='Skip records with missing children instead of failing')
    parser.add_argument('--log-level', type=str, help='Logging level')

    sub = parser.add_subparsers(dest='command', required=True)

    train = sub.add_parser('train', help='Train a model from a corpus')
    train.add_argument('input', help='Text file (one sequence per line) or CSV')
    train.add_argument('-o', '--output', required=True, help='Model file (.json or .csv)')
    train.add_argument('--column', default='text', help='CSV column holding the text')
    train.add_argument('--discrete', action='store_true',
                       help='Treat each line as a sequence with a real start and end')
    train.set_defaults(func=run_train)

    generate = sub.add_parser('generate', help='Generate sequences from a saved model')
    generate.add_argument('model', help='Model file')
    generate.add_argument('-n', '--count', type=int, default=1, help='Number of sequences')
    generate.add_argument('-l', '--length', type=int, help='Items per sequence')
    generate.set_defaults(func=run_generate)

    suggest = sub.add_parser('suggest', help='Suggest next words')
    suggest.add_argument('model', help='Model file')
    suggest.add_argument('text', help='Text typed so far')
    suggest.set_defaults(func=run_suggest)

    demo = sub.add_parser('demo', help='Run the weather demonstration')
    demo.add_argument('-n', '--count', type=int, default=3, help='Number of generated weeks')
    demo.set_defaults(func=run_demo)

    return parser


def config_from_args(args: argparse.Namespace) -> TallyConfig:
    values = load_config(args.config).to_dict()
    overrides = {
        'ngram_size': args.order,
        'seed': args.seed,
        'walk_mode': args.walk,
        'walk_steps': args.steps,
        'log_level': args.log_level,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    if args.lenient:
        values['strict_import'] = False
    if getattr(args, 'discrete', False):
        values['sequence_kind'] = 'discrete'
    return TallyConfig.from_dict(values)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except (OSError, json.JSONDecodeError, TallyError) as e:
        parser.error(str(e))

    setup_logging(config.log_level)

    try:
        args.func(args, config)
    except (TallyError, OSError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
