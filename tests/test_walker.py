"""
Tests for Walker and the weighted sampling primitive.
"""

import unittest
import sys
from pathlib import Path

import numpy as np

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ngram_tally.errors import ConfigurationError, PreconditionError
from ngram_tally.model import FrequencyModel
from ngram_tally.nodes import Node, SequenceKind
from ngram_tally.store import ItemProbability
from ngram_tally.walker import WalkMode, Walker, weighted_choice

RAIN, SUN = "🌧", "☀️"
A, B, C = (Node.literal(x) for x in "ABC")


class TestWeightedChoice(unittest.TestCase):

    def setUp(self):
        # lower limits: 0.75, 0.25, 0.0
        self.possible = [ItemProbability(0.25, A), ItemProbability(0.5, B),
                         ItemProbability(0.25, C)]

    def test_draw_selects_by_lower_limit(self):
        self.assertEqual(weighted_choice(self.possible, 0.9), A)
        self.assertEqual(weighted_choice(self.possible, 0.5), B)
        self.assertEqual(weighted_choice(self.possible, 0.1), C)

    def test_limit_equal_to_draw_is_skipped(self):
        self.assertEqual(weighted_choice(self.possible, 0.75), B)

    def test_zero_draw_falls_back_to_last(self):
        self.assertEqual(weighted_choice(self.possible, 0.0), C)

    def test_single_possibility(self):
        self.assertEqual(weighted_choice([ItemProbability(1.0, A)], 0.3), A)

    def test_empty_possibilities(self):
        with self.assertRaises(PreconditionError):
            weighted_choice([], 0.5)


class TestWalkMode(unittest.TestCase):

    def test_context_lengths(self):
        model = FrequencyModel(order=4)
        self.assertEqual(WalkMode.markov_chain().context_length(model), 1)
        self.assertEqual(WalkMode.match_model().context_length(model), 3)
        self.assertEqual(WalkMode.fixed_steps(2).context_length(model), 2)

    def test_invalid_steps(self):
        with self.assertRaises(ConfigurationError):
            WalkMode.fixed_steps(0)

    def test_from_name(self):
        self.assertEqual(WalkMode.from_name("markov_chain"), WalkMode.markov_chain())
        self.assertEqual(WalkMode.from_name("fixed_steps", 2), WalkMode.fixed_steps(2))
        with self.assertRaises(ConfigurationError):
            WalkMode.from_name("fixed_steps")
        with self.assertRaises(ConfigurationError):
            WalkMode.from_name("sideways")


class TestEmptyModel(unittest.TestCase):

    def test_empty_model_returns_nothing(self):
        walker = Walker(FrequencyModel(), rng=0)
        with self.assertLogs('ngram_tally.walker', level='WARNING'):
            self.assertIsNone(walker.next_item())
        with self.assertLogs('ngram_tally.walker', level='WARNING'):
            self.assertEqual(walker.fill(5), [])


class TestContinuousWalker(unittest.TestCase):

    def setUp(self):
        self.model = FrequencyModel()
        self.model.observe_sequence([RAIN, RAIN, RAIN, RAIN, SUN, SUN, SUN, SUN])

    def test_fill_returns_requested_size(self):
        walker = Walker(self.model, rng=1)
        sunny, rainy = [], []
        for _ in range(500):
            sequence = walker.fill(10)
            self.assertEqual(len(sequence), 10)
            self.assertTrue(set(sequence) <= {RAIN, SUN})
            sunny.append(sequence.count(SUN))
            rainy.append(sequence.count(RAIN))
        self.assertAlmostEqual(np.mean(sunny), np.mean(rainy), delta=1.0)

    def test_same_seed_same_walk(self):
        first = Walker(self.model, rng=42).fill(50)
        second = Walker(self.model, rng=np.random.default_rng(42)).fill(50)
        self.assertEqual(first, second)

    def test_single_item_model_is_deterministic(self):
        model = FrequencyModel()
        model.observe_sequence(["x", "x", "x"])
        for seed in range(5):
            self.assertEqual(Walker(model, rng=seed).fill(8), ["x"] * 8)

    def test_boundary_falls_back_to_other_items(self):
        # in order 3 nothing literal follows (b, c), only the trailing marker
        model = FrequencyModel(order=3)
        model.observe_sequence(["a", "b", "c"])
        walker = Walker(model, rng=5)
        for _ in range(20):
            sequence = walker.fill(15)
            self.assertEqual(len(sequence), 15)
            self.assertTrue(set(sequence) <= {"a", "b", "c"})
            walker.end_walk()

    def test_context_is_bounded(self):
        model = FrequencyModel(order=3)
        model.observe_sequence(list("abcabcabd"))
        walker = Walker(model, WalkMode.markov_chain(), rng=3)
        walker.fill(30)
        self.assertLessEqual(len(walker.last_steps), 2)
        self.assertTrue(all(step.is_literal for step in walker.last_steps))

    def test_walker_does_not_change_model(self):
        before = self.model.distributions()
        Walker(self.model, rng=9).fill(100)
        self.assertEqual(self.model.distributions(), before)


class TestDiscreteWalker(unittest.TestCase):

    def setUp(self):
        self.model = FrequencyModel(SequenceKind.DISCRETE, order=2)
        self.model.observe_sequence(["the", "cat", "sat"])

    def test_single_path_is_reproduced(self):
        walker = Walker(self.model, rng=0)
        self.assertEqual(walker.fill(10), ["the", "cat", "sat"])
        self.assertEqual(walker.fill(10), ["the", "cat", "sat"])

    def test_fill_stops_at_request(self):
        self.assertEqual(Walker(self.model, rng=0).fill(2), ["the", "cat"])

    def test_end_of_sequence_returns_none(self):
        walker = Walker(self.model, rng=0)
        self.assertEqual([walker.next_item() for _ in range(3)], ["the", "cat", "sat"])
        self.assertIsNone(walker.next_item())

    def test_end_walk_starts_over(self):
        walker = Walker(self.model, rng=0)
        walker.next_item()
        walker.next_item()
        walker.end_walk()
        self.assertTrue(walker.is_new_sequence)
        self.assertEqual(walker.last_steps, [])
        self.assertEqual(walker.next_item(), "the")

    def test_iteration_stops_at_end(self):
        self.assertEqual(list(Walker(self.model, rng=0)), ["the", "cat", "sat"])

    def test_trigram_walk(self):
        model = FrequencyModel(SequenceKind.DISCRETE, order=3)
        model.observe_sequence(["the", "cat", "sat", "on", "the", "mat"])
        model.observe_sequence(["the", "dog", "ran"])
        walker = Walker(model, rng=4)
        for _ in range(20):
            sequence = walker.fill(20)
            self.assertIn(sequence, [
                ["the", "cat", "sat", "on", "the", "mat"],
                ["the", "dog", "ran"],
                # "the" is also followed by "mat" in the first sentence
                ["the", "mat"],
            ])


if __name__ == '__main__':
    unittest.main()
