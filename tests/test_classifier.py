"""Tests for the Naive Bayes classifier.

Covers the counting model, the probability estimators, the argmax decision
rule with its tie-breaking, and the error taxonomy.
"""

from __future__ import annotations

import math
import threading
import warnings

import pytest

from wordbayes.classifier import (
    ClassifierStats,
    EmptyInputWarning,
    NaiveBayesClassifier,
    UntrainedModelError,
)
from wordbayes.corpus import LabeledExample


class CommaTokenizer:
    """Splits on commas only, keeping case."""

    def tokenize(self, text: str) -> list[str]:
        return [t for t in text.split(",") if t]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:

    def test_defaults(self, classifier):
        assert classifier.smoothing == 1.0
        assert not classifier.is_trained
        assert classifier.categories == []
        assert classifier.training_count == 0
        assert classifier.word_count == 0

    @pytest.mark.parametrize("smoothing", [0, -1.0, math.nan, math.inf])
    def test_invalid_smoothing_raises(self, smoothing):
        with pytest.raises(ValueError, match="smoothing"):
            NaiveBayesClassifier(smoothing=smoothing)

    def test_custom_tokenizer_is_used(self):
        nb = NaiveBayesClassifier(tokenizer=CommaTokenizer())
        nb.train("Red,green,Red", "colors")
        assert nb.word_count == 2
        assert nb.word_category_count("Red", "colors") == 1
        assert nb.word_category_count("green", "colors") == 1


# ---------------------------------------------------------------------------
# Training
# ---------------------------------------------------------------------------

class TestTraining:

    def test_train_registers_category(self, classifier):
        classifier.train("hello world", "greeting")
        assert classifier.is_trained
        assert classifier.categories == ["greeting"]
        assert classifier.category_count("greeting") == 1
        assert classifier.training_count == 1

    def test_duplicate_tokens_count_once_per_example(self, classifier):
        classifier.train_tokens(["a", "a", "b"], "X")
        assert classifier.word_category_count("a", "X") == 1
        assert classifier.word_category_count("b", "X") == 1
        assert classifier.word_count == 2

    def test_repeated_examples_accumulate(self, classifier):
        classifier.train_tokens(["a"], "X")
        classifier.train_tokens(["a"], "X")
        classifier.train_tokens(["a"], "Y")
        assert classifier.word_category_count("a", "X") == 2
        assert classifier.word_category_count("a", "Y") == 1
        assert classifier.total_occurrences("a") == 3
        assert classifier.word_count == 1

    def test_empty_example_still_counts(self, classifier):
        with pytest.warns(EmptyInputWarning):
            classifier.train_tokens([], "X")
        assert classifier.training_count == 1
        assert classifier.categories == ["X"]
        assert classifier.word_count == 0

    def test_empty_text_warns(self, classifier):
        with pytest.warns(EmptyInputWarning):
            classifier.train("  ...  ", "X")
        assert classifier.category_count("X") == 1

    def test_vocabulary_grows_by_new_words_only(self, classifier):
        classifier.train_tokens(["a", "b"], "X")
        classifier.train_tokens(["b", "c"], "Y")
        assert classifier.word_count == 3
        classifier.train_tokens(["a", "c"], "Z")
        assert classifier.word_count == 3
        classifier.train_tokens(["d"], "X")
        assert classifier.word_count == 4

    def test_tokens_are_case_sensitive(self, classifier):
        classifier.train_tokens(["Cat", "cat"], "X")
        assert classifier.word_count == 2

    def test_counts_never_decrease(self, classifier):
        examples = [
            (["a", "b"], "X"), (["b"], "Y"), ([], "X"), (["c", "a"], "Y"), (["a"], "X"),
        ]
        previous = (0, 0, {})
        with pytest.warns(EmptyInputWarning):
            for tokens, category in examples:
                classifier.train_tokens(tokens, category)
                current = (
                    classifier.training_count,
                    classifier.word_count,
                    {(w, c): classifier.word_category_count(w, c)
                     for w in "abc" for c in "XY"},
                )
                assert current[0] == previous[0] + 1
                assert current[1] >= previous[1]
                for key, count in previous[2].items():
                    assert current[2][key] >= count
                previous = current

    def test_training_count_equals_sum_of_category_counts(self, classifier, sentiment_examples):
        classifier.train_batch(sentiment_examples)
        stats = classifier.stats()
        assert stats.training_count == len(sentiment_examples)
        assert sum(stats.category_counts.values()) == stats.training_count

    def test_train_batch_accepts_labeled_examples(self, classifier):
        trained = classifier.train_batch([
            LabeledExample("good fun", "positive"),
            ("bad news", "negative"),
        ])
        assert trained == 2
        assert classifier.categories == ["negative", "positive"]

    def test_stats_is_a_snapshot(self, pets_classifier):
        stats = pets_classifier.stats()
        assert isinstance(stats, ClassifierStats)
        stats.category_counts["positive"] = 99
        assert pets_classifier.category_count("positive") == 2

    def test_stats_to_dict(self, pets_classifier):
        data = pets_classifier.stats().to_dict()
        assert data["training_count"] == 3
        assert data["word_count"] == 5
        assert data["category_counts"] == {"negative": 1, "positive": 2}
        assert data["priors"] == {"negative": 0.3333, "positive": 0.6667}


# ---------------------------------------------------------------------------
# Probabilities
# ---------------------------------------------------------------------------

class TestProbabilities:

    def test_priors_are_exact(self, classifier):
        classifier.train_tokens(["x"], "A")
        classifier.train_tokens(["y"], "A")
        classifier.train_tokens(["z"], "B")
        assert classifier.p_category("A") == 2 / 3
        assert classifier.p_category("B") == 1 / 3
        assert classifier.p_category("C") == 0.0

    def test_p_word_uses_distinct_word_count(self, classifier):
        classifier.train_tokens(["a", "b"], "X")
        classifier.train_tokens(["a"], "Y")
        # total occurrences of "a" is 2, distinct words is 2
        assert classifier.p_word("a") == 1.0
        assert classifier.p_word("b") == 0.5
        assert classifier.p_word("unseen") == 0.0

    def test_p_category_given_word(self, classifier):
        classifier.train_tokens(["a", "b"], "X")
        classifier.train_tokens(["a"], "Y")
        classifier.train_tokens(["a"], "Y")
        assert classifier.p_category_given_word("X", "a") == pytest.approx(1 / 3)
        assert classifier.p_category_given_word("Y", "a") == pytest.approx(2 / 3)
        assert classifier.p_category_given_word("Y", "b") == 0.0
        assert classifier.p_category_given_word("X", "unseen") == 0.0

    def test_p_word_given_category_formula(self, pets_classifier):
        # "i" seen in 3 examples (2 positive); 5 distinct words; P(positive) = 2/3
        expected = ((2 / 3) * (3 / 5) + 1) / (2 / 3 + 1 * 5)
        assert pets_classifier.p_word_given_category("i", "positive") == pytest.approx(expected)

    def test_p_word_given_category_unseen_word(self, pets_classifier):
        expected = 1 / (1 / 3 + 5)
        assert pets_classifier.p_word_given_category("birds", "negative") == pytest.approx(expected)

    def test_smoothing_parameter_is_applied(self):
        nb = NaiveBayesClassifier(smoothing=2.0)
        nb.train_tokens(["a"], "X")
        nb.train_tokens(["b"], "Y")
        # P(X|a)=1, P(a)=1/2, P(X)=1/2, two distinct words
        expected = (1 * 0.5 + 2.0) / (0.5 + 2.0 * 2)
        assert nb.p_word_given_category("a", "X") == pytest.approx(expected)

    def test_smoothed_estimate_is_always_positive(self, pets_classifier):
        for word in ("i", "love", "hate", "cats", "dogs", "never-seen"):
            for category in pets_classifier.categories:
                assert pets_classifier.p_word_given_category(word, category) > 0

    def test_untrained_probabilities_are_zero(self, classifier):
        assert classifier.p_category("A") == 0.0
        assert classifier.p_word("a") == 0.0


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassification:

    def test_end_to_end_pets(self, pets_classifier):
        assert pets_classifier.classify("I love birds") == "positive"

    def test_untrained_raises(self, classifier):
        with pytest.raises(UntrainedModelError, match="no trained categories"):
            classifier.classify("anything at all")

    def test_untrained_error_is_runtime_error(self, classifier):
        with pytest.raises(RuntimeError):
            classifier.classify_tokens(["word"])

    def test_untrained_empty_input_raises_without_warning(self, classifier):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            with pytest.raises(UntrainedModelError):
                classifier.classify_tokens([])

    def test_classify_does_not_deduplicate(self, classifier):
        classifier.train_tokens(["a"], "X")
        classifier.train_tokens(["b"], "Y")
        classifier.train_tokens(["c"], "Y")
        # One "a" is not enough to beat Y's prior; two are.
        assert classifier.classify_tokens(["a"]) == "Y"
        assert classifier.classify_tokens(["a", "a"]) == "X"

    def test_empty_input_uses_priors(self, classifier):
        classifier.train_tokens(["x"], "B")
        classifier.train_tokens(["y"], "A")
        classifier.train_tokens(["z"], "A")
        with pytest.warns(EmptyInputWarning):
            assert classifier.classify_tokens([]) == "A"

    def test_tie_goes_to_first_sorted_category(self, classifier):
        classifier.train_tokens(["w"], "beta")
        classifier.train_tokens(["w"], "alpha")
        assert classifier.classify_tokens(["w"]) == "alpha"
        with pytest.warns(EmptyInputWarning):
            assert classifier.classify_tokens([]) == "alpha"

    def test_unseen_words_do_not_fail(self, pets_classifier):
        assert pets_classifier.classify("zebra giraffe okapi") in pets_classifier.categories

    def test_trained_only_on_empty_examples(self, classifier):
        with pytest.warns(EmptyInputWarning):
            classifier.train_tokens([], "B")
            classifier.train_tokens([], "A")
            classifier.train_tokens([], "B")
        assert classifier.classify_tokens(["anything"]) in classifier.categories

    def test_result_is_deterministic(self, sentiment_examples):
        texts = ["wonderful music", "awful and dull", "a film", "nothing known here"]
        first = NaiveBayesClassifier()
        second = NaiveBayesClassifier()
        first.train_batch(sentiment_examples)
        second.train_batch(sentiment_examples)
        assert first.classify_batch(texts) == second.classify_batch(texts)
        assert first.classify_batch(texts) == first.classify_batch(texts)

    def test_sentiment_corpus(self, classifier, sentiment_examples):
        classifier.train_batch(sentiment_examples)
        assert classifier.classify("What a wonderful, delightful film") == "positive"
        assert classifier.classify("boring and awful") == "negative"

    def test_classify_batch(self, pets_classifier):
        assert pets_classifier.classify_batch(["love love", "hate hate hate cats"]) == [
            "positive", "negative",
        ]

    def test_repr(self, pets_classifier):
        assert "training_count=3" in repr(pets_classifier)


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

class TestConcurrency:

    def test_concurrent_training_keeps_counts_consistent(self, classifier):
        def worker(category: str) -> None:
            for i in range(200):
                classifier.train_tokens([f"{category}-{i}", "shared"], category)

        threads = [threading.Thread(target=worker, args=(c,)) for c in ("a", "b", "c", "d")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert classifier.training_count == 800
        assert classifier.word_count == 801
        assert classifier.total_occurrences("shared") == 800
        assert all(classifier.category_count(c) == 200 for c in "abcd")

    def test_classify_while_training(self, pets_classifier):
        errors: list[Exception] = []

        def trainer() -> None:
            for i in range(300):
                pets_classifier.train_tokens([f"w{i}", "love"], "positive")

        def reader() -> None:
            try:
                for _ in range(300):
                    pets_classifier.classify_tokens(["love", "cats"])
            except Exception as e:  # pragma: no cover - surfaced below
                errors.append(e)

        threads = [threading.Thread(target=trainer), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
