"""wordbayes -- Naive Bayes text classification over word tokens."""

__version__ = "0.1.0"

from .classifier import (
    ClassifierStats,
    EmptyInputWarning,
    NaiveBayesClassifier,
    UntrainedModelError,
)
from .config import ClassifierConfig
from .corpus import LabeledExample, load_corpus, load_directory, load_jsonl
from .evaluation import (
    ClassificationMetrics,
    compute_metrics,
    cross_validate,
    mean_metrics,
    stratified_k_fold,
)
from .tokenizer import Tokenizer

__all__ = [
    # Core
    "NaiveBayesClassifier",
    "ClassifierStats",
    "Tokenizer",
    "ClassifierConfig",
    # Errors
    "UntrainedModelError",
    "EmptyInputWarning",
    # Corpus
    "LabeledExample",
    "load_corpus",
    "load_directory",
    "load_jsonl",
    # Evaluation
    "ClassificationMetrics",
    "compute_metrics",
    "cross_validate",
    "mean_metrics",
    "stratified_k_fold",
]
