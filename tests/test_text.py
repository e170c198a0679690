"""
Tests for text helpers, corpus loading and predictive text.
"""

import unittest
import sys
import tempfile
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ngram_tally.datasets import load_sequences_csv, load_sequences_txt
from ngram_tally.nodes import SequenceKind
from ngram_tally.predictive import PredictiveText
from ngram_tally.text_cleaning import clean_text, normalize_word
from ngram_tally.tokenization import sentences_from_text, simple_tokenize, word_sequence


class TestTextCleaning(unittest.TestCase):

    def test_normalize_word(self):
        self.assertEqual(normalize_word("Hello,"), "hello")
        self.assertEqual(normalize_word("  «Quoted»  "), "quoted")
        self.assertEqual(normalize_word("don't"), "don't")
        self.assertEqual(normalize_word("..."), "")

    def test_normalize_word_is_idempotent(self):
        for word in ["Cat!", "(the)", "Ünïcode.", "x"]:
            once = normalize_word(word)
            self.assertEqual(normalize_word(once), once)

    def test_clean_text(self):
        self.assertEqual(clean_text("Visit  https://example.com NOW\n"), "visit now")
        self.assertEqual(clean_text("mail me@example.com"), "mail")

    def test_addresses_do_not_split_sentences(self):
        text = "See www.example.com today. Write to a.b@example.org now."
        self.assertEqual(sentences_from_text(text),
                         [["see", "today"], ["write", "to", "now"]])


class TestTokenization(unittest.TestCase):

    def test_simple_tokenize(self):
        self.assertEqual(simple_tokenize("it's 3.5 degrees"), ["it's", "3.5", "degrees"])

    def test_word_sequence(self):
        self.assertEqual(word_sequence("The cat, sat - down."), ["the", "cat", "sat", "down"])

    def test_sentences(self):
        text = "The cat sat. The dog ran! Did it?"
        self.assertEqual(sentences_from_text(text),
                         [["the", "cat", "sat"], ["the", "dog", "ran"], ["did", "it"]])


class TestDatasets(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_txt(self):
        path = self.dir / "captions.txt"
        path.write_text("The cat sat.\n\nA dog ran\n", encoding="utf-8")
        self.assertEqual(load_sequences_txt(path), [["the", "cat", "sat"], ["a", "dog", "ran"]])

    def test_load_csv(self):
        path = self.dir / "captions.csv"
        path.write_text("id,text\n1,Hello world\n2,\n3,Bye now\n", encoding="utf-8")
        self.assertEqual(load_sequences_csv(path), [["hello", "world"], ["bye", "now"]])
        with self.assertRaises(ValueError):
            load_sequences_csv(path, column="caption")


class TestPredictiveText(unittest.TestCase):

    def setUp(self):
        self.predictor = PredictiveText()
        self.predictor.learn_all([
            "The cat sat on the mat.",
            "The cat ate the fish",
            "A dog sat on the cat",
        ])

    def test_suggest_ranks_by_probability(self):
        self.assertEqual(self.predictor.suggest("I saw the"), ["cat", "mat", "fish"])
        self.assertEqual(self.predictor.suggest("I saw THE", limit=1), ["cat"])

    def test_zero_limit_returns_nothing(self):
        self.assertEqual(self.predictor.suggest("I saw the", limit=0), [])
        self.assertEqual(self.predictor.starting_words(limit=0), [])

    def test_unknown_word_falls_back_to_starting_words(self):
        suggestions = self.predictor.suggest("zebra")
        self.assertEqual(suggestions, self.predictor.starting_words())
        self.assertEqual(suggestions[0], "the")

    def test_empty_text(self):
        self.assertEqual(self.predictor.suggest(""), self.predictor.starting_words())

    def test_boundaries_never_suggested(self):
        self.assertEqual(self.predictor.suggest("mat"), self.predictor.starting_words())

    def test_learn_returns_word_count(self):
        self.assertEqual(PredictiveText().learn("one two  three"), 3)
        self.assertEqual(PredictiveText().learn("   "), 0)

    def test_discrete_trigram(self):
        predictor = PredictiveText(order=3, sequence_kind=SequenceKind.DISCRETE)
        predictor.learn("we went to the park")
        predictor.learn("we went to the zoo")
        predictor.learn("they went home")
        self.assertEqual(predictor.suggest("so we went"), ["to"])
        self.assertEqual(predictor.suggest("they went"), ["home"])
        self.assertEqual(predictor.starting_words(), ["we", "they"])


if __name__ == '__main__':
    unittest.main()
