"""Naive Bayes text classifier over unigram word presence.

The model keeps four counters, all owned by :class:`NaiveBayesClassifier`
and only ever increased by training:

- ``word -> category -> count``: how many training examples of a category
  contained the word (each word counts once per example);
- ``category -> count``: how many examples were trained per category;
- the number of distinct words seen;
- the total number of training examples.

Classification picks::

    argmax_c  ln P(c) + sum_{token} ln P(token | c)

where ``P(token | c)`` is estimated from ``P(c | token)`` and ``P(token)``
through Bayes' rule, with additive smoothing::

    P(w | c) = (P(c | w) * P(w) + s) / (P(c) + s * distinct_words)

Note that ``P(w)`` is total occurrences of ``w`` divided by the number of
distinct words, not by the total number of occurrences. Both this and the
smoothed estimator above differ from the textbook multinomial model.
"""

from __future__ import annotations

import logging
import math
import threading
import warnings
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from .corpus import LabeledExample
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING = 1.0


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class UntrainedModelError(RuntimeError):
    """Raised when classifying before any training example was seen."""


class EmptyInputWarning(UserWarning):
    """Issued when training or classifying with zero tokens."""


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

@dataclass
class ClassifierStats:
    """Snapshot of the classifier's training counters.

    Attributes:
        training_count: Number of training examples seen.
        word_count: Number of distinct words seen.
        category_counts: Training examples per category.
    """

    training_count: int = 0
    word_count: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)

    @property
    def priors(self) -> dict[str, float]:
        """P(category) for every category."""
        if not self.training_count:
            return {}
        return {
            cat: count / self.training_count
            for cat, count in sorted(self.category_counts.items())
        }

    def to_dict(self) -> dict:
        return {
            "training_count": self.training_count,
            "word_count": self.word_count,
            "category_counts": dict(sorted(self.category_counts.items())),
            "priors": {k: round(v, 4) for k, v in self.priors.items()},
        }


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

class NaiveBayesClassifier:
    """Naive Bayes classifier that learns word/category frequencies.

    Example::

        classifier = NaiveBayesClassifier()
        classifier.train("I love cats", "positive")
        classifier.train("I hate cats", "negative")
        classifier.classify("I love dogs")   # "positive"

    Pre-tokenized input is accepted through :meth:`train_tokens` and
    :meth:`classify_tokens`, for callers that tokenize once and reuse the
    result.

    All training and classification calls hold a single internal lock, so
    the instance can be shared between threads. Concurrent ``classify``
    calls therefore run one at a time rather than in parallel.

    Args:
        tokenizer: Object with a ``tokenize(text) -> list[str]`` method.
            Defaults to :class:`~wordbayes.tokenizer.Tokenizer`.
        smoothing: Additive smoothing constant (must be positive).
    """

    def __init__(
        self,
        tokenizer: Optional[Tokenizer] = None,
        smoothing: float = DEFAULT_SMOOTHING,
    ) -> None:
        if not math.isfinite(smoothing) or smoothing <= 0:
            raise ValueError(f"smoothing must be a positive finite number, got {smoothing}")

        self.tokenizer = tokenizer if tokenizer is not None else Tokenizer()
        self.smoothing = float(smoothing)

        self._word_occurrences: dict[str, dict[str, int]] = {}
        self._category_occurrences: dict[str, int] = defaultdict(int)
        self._word_count = 0
        self._training_count = 0
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return (
            f"NaiveBayesClassifier(smoothing={self.smoothing}, "
            f"categories={len(self._category_occurrences)}, "
            f"training_count={self._training_count})"
        )

    # -- training ----------------------------------------------------------

    def train(self, text: str, category: str) -> None:
        """Tokenize ``text`` and train on it as an example of ``category``."""
        self.train_tokens(self.tokenizer.tokenize(text), category)

    def train_tokens(self, tokens: Iterable[str], category: str) -> None:
        """Train on one pre-tokenized example.

        Each distinct token counts once, however often it repeats in the
        example. An empty token list still registers the category and counts
        as a training example.

        Args:
            tokens: Word tokens of the example.
            category: Category label of the example.
        """
        words = set(tokens)
        if not words:
            warnings.warn(
                f"training example for category {category!r} has no tokens",
                EmptyInputWarning,
                stacklevel=2,
            )

        with self._lock:
            new_words = 0
            for word in words:
                per_category = self._word_occurrences.get(word)
                if per_category is None:
                    per_category = self._word_occurrences[word] = {}
                    self._word_count += 1
                    new_words += 1
                per_category[category] = per_category.get(category, 0) + 1
            self._category_occurrences[category] += 1
            self._training_count += 1

        logger.debug(
            "Trained %r on %d unique tokens (%d new); %d examples total",
            category, len(words), new_words, self._training_count,
        )

    def train_batch(
        self,
        examples: Iterable[LabeledExample | tuple[str, str]],
    ) -> int:
        """Train on many ``(text, category)`` pairs or labeled examples.

        Returns:
            Number of examples trained.
        """
        trained = 0
        for text, category in examples:
            self.train(text, category)
            trained += 1
        logger.info("Trained on %d examples", trained)
        return trained

    # -- classification ----------------------------------------------------

    def classify(self, text: str) -> str:
        """Tokenize ``text`` and return its best-fit category.

        Raises:
            UntrainedModelError: If nothing has been trained yet.
        """
        return self.classify_tokens(self.tokenizer.tokenize(text))

    def classify_tokens(self, tokens: Sequence[str]) -> str:
        """Return the category with the highest log-probability score.

        Tokens are not deduplicated: a token repeated twice contributes its
        term twice. Categories are scanned in sorted order and only a
        strictly greater score replaces the current best, so ties go to the
        alphabetically first category.

        Args:
            tokens: Word tokens of the text to classify.

        Returns:
            The chosen category.

        Raises:
            UntrainedModelError: If nothing has been trained yet.
        """
        tokens = list(tokens)
        with self._lock:
            if not self._training_count:
                raise UntrainedModelError(
                    "Classifier has no trained categories. Call train() first."
                )
            if not tokens:
                warnings.warn(
                    "classifying an empty token list; using category priors only",
                    EmptyInputWarning,
                    stacklevel=2,
                )

            best_category: Optional[str] = None
            best_score = -math.inf
            for category in sorted(self._category_occurrences):
                score = self._score(tokens, category)
                if score > best_score:
                    best_score = score
                    best_category = category

        logger.debug(
            "Classified %d tokens as %r (score %.4f)", len(tokens), best_category, best_score
        )
        return best_category  # type: ignore[return-value]

    def classify_batch(self, texts: Iterable[str]) -> list[str]:
        """Classify several raw texts."""
        return [self.classify(text) for text in texts]

    def _score(self, tokens: list[str], category: str) -> float:
        """ln P(category) + sum of ln P(token | category)."""
        p_category = self.p_category(category)
        score = math.log(p_category)
        denominator = p_category + self.smoothing * self._word_count
        for token in tokens:
            numerator = self.p_category_given_word(category, token) * self.p_word(token)
            score += math.log((numerator + self.smoothing) / denominator)
        return score

    # -- probabilities -----------------------------------------------------

    def p_category(self, category: str) -> float:
        """P(C=category): share of training examples in ``category``."""
        if not self._training_count:
            return 0.0
        return self._category_occurrences.get(category, 0) / self._training_count

    def p_word(self, word: str) -> float:
        """P(W=word): total occurrences of ``word`` over distinct word count."""
        if not self._word_count:
            return 0.0
        return self.total_occurrences(word) / self._word_count

    def p_category_given_word(self, category: str, word: str) -> float:
        """P(C=category | W=word); 0 for unseen words or pairs."""
        per_category = self._word_occurrences.get(word)
        if not per_category or category not in per_category:
            return 0.0
        return per_category[category] / sum(per_category.values())

    def p_word_given_category(self, word: str, category: str) -> float:
        """Smoothed P(W=word | C=category) as used by the classifier."""
        numerator = self.p_category_given_word(category, word) * self.p_word(word)
        denominator = self.p_category(category) + self.smoothing * self._word_count
        return (numerator + self.smoothing) / denominator

    # -- introspection -----------------------------------------------------

    @property
    def is_trained(self) -> bool:
        """Whether at least one training example has been seen."""
        return self._training_count > 0

    @property
    def categories(self) -> list[str]:
        """Known categories, sorted."""
        return sorted(self._category_occurrences)

    @property
    def training_count(self) -> int:
        return self._training_count

    @property
    def word_count(self) -> int:
        """Number of distinct words seen during training."""
        return self._word_count

    def category_count(self, category: str) -> int:
        return self._category_occurrences.get(category, 0)

    def word_category_count(self, word: str, category: str) -> int:
        return self._word_occurrences.get(word, {}).get(category, 0)

    def total_occurrences(self, word: str) -> int:
        """Number of training examples, across categories, containing ``word``."""
        return sum(self._word_occurrences.get(word, {}).values())

    def stats(self) -> ClassifierStats:
        with self._lock:
            return ClassifierStats(
                training_count=self._training_count,
                word_count=self._word_count,
                category_counts=dict(self._category_occurrences),
            )
