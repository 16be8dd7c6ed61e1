"""Loading labeled training examples from disk.

Two layouts are supported:

- a directory whose immediate subdirectories are categories, each holding
  ``*.txt`` files (one example per file);
- a JSON Lines file with one ``{"text": ..., "label": ...}`` object per line.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

JSONL_SUFFIXES = frozenset({".jsonl", ".ndjson"})


@dataclass(frozen=True)
class LabeledExample:
    """A single training text with its category."""

    text: str
    category: str
    source: str = ""

    def __iter__(self):
        yield self.text
        yield self.category


def load_directory(path: str | Path, encoding: str = "utf-8") -> list[LabeledExample]:
    """Load examples from a ``category/*.txt`` directory tree.

    Subdirectories and files are visited in sorted order so the same tree
    always yields the same example order.

    Args:
        path: Root directory.
        encoding: Text encoding of the example files.

    Returns:
        List of labeled examples.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If ``path`` is not a directory or a file is not valid text.
    """
    root = Path(path)
    if not root.exists():
        raise FileNotFoundError(f"Corpus not found: {root}")
    if not root.is_dir():
        raise ValueError(f"Not a directory: {root}")

    examples: list[LabeledExample] = []
    for category_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        for file in sorted(category_dir.glob("*.txt")):
            try:
                text = file.read_text(encoding=encoding)
            except UnicodeDecodeError as exc:
                raise ValueError(f"Cannot read {file} as {encoding}: {exc}") from exc
            examples.append(LabeledExample(text=text, category=category_dir.name, source=str(file)))

    logger.info("Loaded %d examples from %s", len(examples), root)
    return examples


def load_jsonl(
    path: str | Path,
    text_key: str = "text",
    label_key: str = "label",
    encoding: str = "utf-8",
) -> list[LabeledExample]:
    """Load examples from a JSON Lines file.

    Blank lines are skipped.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not valid text, or a line is not a JSON
            object with both keys holding strings.
    """
    file = Path(path)
    if not file.exists():
        raise FileNotFoundError(f"Corpus not found: {file}")

    try:
        lines = file.read_text(encoding=encoding).split("\n")
    except UnicodeDecodeError as exc:
        raise ValueError(f"Cannot read {file} as {encoding}: {exc}") from exc

    examples: list[LabeledExample] = []
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{file}:{lineno}: invalid JSON: {exc.msg}") from exc
        if not isinstance(record, dict):
            raise ValueError(f"{file}:{lineno}: expected a JSON object")
        missing = [k for k in (text_key, label_key) if k not in record]
        if missing:
            raise ValueError(f"{file}:{lineno}: missing key(s) {', '.join(missing)}")
        for key in (text_key, label_key):
            if not isinstance(record[key], str):
                raise ValueError(f"{file}:{lineno}: '{key}' must be a string")
        examples.append(LabeledExample(
            text=record[text_key],
            category=record[label_key],
            source=f"{file}:{lineno}",
        ))

    logger.info("Loaded %d examples from %s", len(examples), file)
    return examples


def load_corpus(path: str | Path, **kwargs) -> list[LabeledExample]:
    """Load a corpus, picking the reader from the path.

    Directories use :func:`load_directory`, ``.jsonl``/``.ndjson`` files use
    :func:`load_jsonl`. Extra keyword arguments go to the chosen reader.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the path type is unsupported.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Corpus not found: {p}")
    if p.is_dir():
        return load_directory(p, **kwargs)
    if p.suffix.lower() in JSONL_SUFFIXES:
        return load_jsonl(p, **kwargs)
    raise ValueError(
        f"Unsupported corpus: {p}. Expected a directory or one of: "
        f"{', '.join(sorted(JSONL_SUFFIXES))}"
    )


def category_distribution(examples: list[LabeledExample]) -> dict[str, int]:
    """Count examples per category, sorted by category name."""
    return dict(sorted(Counter(e.category for e in examples).items()))
