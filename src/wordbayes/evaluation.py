"""Evaluation of the classifier: metrics and stratified cross-validation."""

from __future__ import annotations

import logging
import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Optional

from .config import ClassifierConfig
from .corpus import LabeledExample

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

@dataclass
class ClassificationMetrics:
    """Scores comparing predicted categories against true ones.

    Attributes:
        accuracy: Fraction of correct predictions.
        per_class: ``{category: {"precision", "recall", "f1"}}``.
        macro_precision: Unweighted mean precision over categories.
        macro_recall: Unweighted mean recall over categories.
        macro_f1: Unweighted mean F1 over categories.
        weighted_f1: F1 averaged with true-label support as weights.
        confusion_matrix: ``{true: {predicted: count}}``.
        support: Number of true examples per category.
    """

    accuracy: float = 0.0
    per_class: dict[str, dict[str, float]] = field(default_factory=dict)
    macro_precision: float = 0.0
    macro_recall: float = 0.0
    macro_f1: float = 0.0
    weighted_f1: float = 0.0
    confusion_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    support: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "macro_precision": round(self.macro_precision, 4),
            "macro_recall": round(self.macro_recall, 4),
            "macro_f1": round(self.macro_f1, 4),
            "weighted_f1": round(self.weighted_f1, 4),
            "per_class": {
                cat: {name: round(value, 4) for name, value in scores.items()}
                for cat, scores in self.per_class.items()
            },
            "confusion_matrix": self.confusion_matrix,
            "support": self.support,
        }


def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def compute_metrics(y_true: list[str], y_pred: list[str]) -> ClassificationMetrics:
    """Compare predicted labels with true labels.

    Raises:
        ValueError: If the two lists differ in length.
    """
    if len(y_true) != len(y_pred):
        raise ValueError(
            f"y_true ({len(y_true)}) and y_pred ({len(y_pred)}) must have the same length"
        )

    labels = sorted(set(y_true) | set(y_pred))
    matrix = {t: {p: 0 for p in labels} for t in labels}
    for t, p in zip(y_true, y_pred):
        matrix[t][p] += 1

    support = Counter(y_true)
    per_class: dict[str, dict[str, float]] = {}
    for label in labels:
        tp = matrix[label][label]
        predicted = sum(matrix[t][label] for t in labels)
        actual = sum(matrix[label].values())
        precision = _safe_div(tp, predicted)
        recall = _safe_div(tp, actual)
        per_class[label] = {
            "precision": precision,
            "recall": recall,
            "f1": _safe_div(2 * precision * recall, precision + recall),
        }

    n_labels = len(labels)
    return ClassificationMetrics(
        accuracy=_safe_div(sum(matrix[label][label] for label in labels), len(y_true)),
        per_class=per_class,
        macro_precision=_safe_div(sum(s["precision"] for s in per_class.values()), n_labels),
        macro_recall=_safe_div(sum(s["recall"] for s in per_class.values()), n_labels),
        macro_f1=_safe_div(sum(s["f1"] for s in per_class.values()), n_labels),
        weighted_f1=_safe_div(
            sum(per_class[label]["f1"] * support.get(label, 0) for label in labels), len(y_true)
        ),
        confusion_matrix=matrix,
        support=dict(sorted(support.items())),
    )


# ---------------------------------------------------------------------------
# Cross-validation
# ---------------------------------------------------------------------------

def stratified_k_fold(
    labels: list[str],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Split indices into ``k`` folds keeping each category's share.

    Indices of every category are shuffled with ``seed`` and dealt
    round-robin across the folds.

    Returns:
        ``(train_indices, test_indices)`` per fold.

    Raises:
        ValueError: If ``k`` is below 2.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")

    rng = random.Random(seed)
    by_label: dict[str, list[int]] = defaultdict(list)
    for idx, label in enumerate(labels):
        by_label[label].append(idx)

    fold_of = [0] * len(labels)
    for label in sorted(by_label):
        indices = by_label[label]
        rng.shuffle(indices)
        for position, idx in enumerate(indices):
            fold_of[idx] = position % k

    return [
        (
            [i for i, f in enumerate(fold_of) if f != fold],
            [i for i, f in enumerate(fold_of) if f == fold],
        )
        for fold in range(k)
    ]


def cross_validate(
    examples: list[LabeledExample],
    k: int = 5,
    seed: int = 42,
    config: Optional[ClassifierConfig] = None,
) -> list[ClassificationMetrics]:
    """Train and test a fresh classifier on each stratified fold.

    Folds with an empty test set (possible when there are fewer examples
    than folds) are skipped.

    Args:
        examples: Labeled corpus.
        k: Number of folds.
        seed: Shuffle seed for fold assignment.
        config: Classifier settings; defaults to :class:`ClassifierConfig`.

    Returns:
        One :class:`ClassificationMetrics` per evaluated fold.
    """
    config = config or ClassifierConfig()
    labels = [e.category for e in examples]
    results: list[ClassificationMetrics] = []

    for fold, (train_idx, test_idx) in enumerate(stratified_k_fold(labels, k=k, seed=seed), 1):
        if not test_idx or not train_idx:
            logger.info("Fold %d/%d has no test or training examples; skipped", fold, k)
            continue

        classifier = config.build_classifier()
        classifier.train_batch(examples[i] for i in train_idx)
        predictions = [classifier.classify(examples[i].text) for i in test_idx]
        metrics = compute_metrics([labels[i] for i in test_idx], predictions)

        logger.info("Fold %d/%d: accuracy %.4f, macro F1 %.4f", fold, k, metrics.accuracy, metrics.macro_f1)
        results.append(metrics)

    return results


def mean_metrics(folds: list[ClassificationMetrics]) -> dict[str, float]:
    """Average the aggregate scores over folds."""
    keys = ("accuracy", "macro_precision", "macro_recall", "macro_f1", "weighted_f1")
    if not folds:
        return {key: 0.0 for key in keys}
    return {key: sum(getattr(m, key) for m in folds) / len(folds) for key in keys}
