"""Shared test fixtures for wordbayes tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from wordbayes.classifier import NaiveBayesClassifier


# Small sentiment corpus with clearly separated vocabularies
POSITIVE_DOCS = [
    "I love this film, the acting was wonderful",
    "A wonderful and delightful story with great music",
    "Great cast, great direction, I loved every minute",
    "Delightful, charming and funny from start to finish",
    "The best film I have seen this year, truly wonderful",
    "Charming characters and a great, uplifting ending",
]

NEGATIVE_DOCS = [
    "I hated this film, the acting was terrible",
    "A boring and dull story with awful music",
    "Terrible cast, awful direction, I hated every minute",
    "Dull, tedious and painful from start to finish",
    "The worst film I have seen this year, truly awful",
    "Boring characters and a terrible, depressing ending",
]


@pytest.fixture
def classifier() -> NaiveBayesClassifier:
    """A fresh, untrained classifier."""
    return NaiveBayesClassifier()


@pytest.fixture
def pets_classifier() -> NaiveBayesClassifier:
    """Classifier trained on the three-sentence pets example."""
    nb = NaiveBayesClassifier()
    nb.train("I love cats", "positive")
    nb.train("I love dogs", "positive")
    nb.train("I hate cats", "negative")
    return nb


@pytest.fixture
def sentiment_examples() -> list[tuple[str, str]]:
    """(text, category) pairs for the sentiment corpus."""
    return [(d, "positive") for d in POSITIVE_DOCS] + [(d, "negative") for d in NEGATIVE_DOCS]


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Sentiment corpus laid out as ``category/*.txt``."""
    root = tmp_path / "reviews"
    for category, docs in (("positive", POSITIVE_DOCS), ("negative", NEGATIVE_DOCS)):
        folder = root / category
        folder.mkdir(parents=True)
        for i, doc in enumerate(docs):
            (folder / f"{i:02d}.txt").write_text(doc, encoding="utf-8")
    return root


@pytest.fixture
def corpus_jsonl(tmp_path: Path, sentiment_examples) -> Path:
    """Sentiment corpus as a JSON Lines file."""
    file = tmp_path / "reviews.jsonl"
    lines = [json.dumps({"text": text, "label": label}) for text, label in sentiment_examples]
    file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return file
