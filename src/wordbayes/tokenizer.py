"""Default word tokenizer for the Naive Bayes classifier.

The classifier itself never looks at raw characters: it consumes whatever
``tokenize()`` returns. This module supplies the tokenizer used when none is
given, with a small, fixed set of options so that the same text always maps
to the same tokens (token choices directly affect model quality and
reproducibility).

Rules, applied in order:

1. Split on whitespace.
2. If ``strip_punctuation`` is set, strip leading and trailing punctuation
   from every chunk and drop chunks with no word characters left. Inner
   apostrophes and hyphens survive (``don't``, ``well-known``).
3. If ``lowercase`` is set, lowercase the token.
4. Drop tokens shorter than ``min_length`` characters.

Order and duplicates are preserved.
"""

from __future__ import annotations

import re

# Leading/trailing run of anything that is not a letter or digit
_EDGE_PUNCT_RE = re.compile(r"^[\W_]+|[\W_]+$")
_HAS_WORD_CHAR_RE = re.compile(r"[^\W_]")


class Tokenizer:
    """Split raw text into an ordered list of word tokens.

    Example::

        tokenizer = Tokenizer()
        tokenizer.tokenize("I love cats!")   # ['i', 'love', 'cats']

    Args:
        lowercase: Lowercase every token.
        strip_punctuation: Remove punctuation at token edges and drop
            punctuation-only tokens.
        min_length: Minimum token length (in characters) to keep.
    """

    def __init__(
        self,
        lowercase: bool = True,
        strip_punctuation: bool = True,
        min_length: int = 1,
    ) -> None:
        if min_length < 1:
            raise ValueError("min_length must be at least 1")
        self.lowercase = lowercase
        self.strip_punctuation = strip_punctuation
        self.min_length = min_length

    def tokenize(self, text: str) -> list[str]:
        """Tokenize ``text``.

        Args:
            text: Raw input text.

        Returns:
            List of word tokens in the order they appear.
        """
        tokens: list[str] = []
        for chunk in text.split():
            if self.strip_punctuation:
                if not _HAS_WORD_CHAR_RE.search(chunk):
                    continue
                chunk = _EDGE_PUNCT_RE.sub("", chunk)
            if self.lowercase:
                chunk = chunk.lower()
            if len(chunk) < self.min_length:
                continue
            tokens.append(chunk)
        return tokens

    def __call__(self, text: str) -> list[str]:
        return self.tokenize(text)

    def __repr__(self) -> str:
        return (
            f"Tokenizer(lowercase={self.lowercase}, "
            f"strip_punctuation={self.strip_punctuation}, "
            f"min_length={self.min_length})"
        )
