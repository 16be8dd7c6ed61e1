"""Classifier configuration.

Settings can come from keyword arguments, a dict, or a TOML file. A TOML
file may hold the keys at top level or under a ``[wordbayes]`` table::

    [wordbayes]
    smoothing = 1.0
    lowercase = true
    strip_punctuation = true
    min_length = 1
"""

from __future__ import annotations

import logging
import math
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from .classifier import DEFAULT_SMOOTHING, NaiveBayesClassifier
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

CONFIG_TABLE = "wordbayes"


@dataclass
class ClassifierConfig:
    """Settings for building a :class:`NaiveBayesClassifier`.

    Attributes:
        smoothing: Additive smoothing constant (positive).
        lowercase: Lowercase tokens.
        strip_punctuation: Strip punctuation at token edges.
        min_length: Minimum token length.
    """

    smoothing: float = DEFAULT_SMOOTHING
    lowercase: bool = True
    strip_punctuation: bool = True
    min_length: int = 1

    def validate(self) -> None:
        """Raise ``ValueError`` if any setting is out of range."""
        if isinstance(self.smoothing, bool) or not isinstance(self.smoothing, (int, float)):
            raise ValueError(f"smoothing must be a number, got {self.smoothing!r}")
        if not math.isfinite(self.smoothing) or self.smoothing <= 0:
            raise ValueError(f"smoothing must be a positive finite number, got {self.smoothing}")
        for name in ("lowercase", "strip_punctuation"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false")
        if isinstance(self.min_length, bool) or not isinstance(self.min_length, int):
            raise ValueError(f"min_length must be an integer, got {self.min_length!r}")
        if self.min_length < 1:
            raise ValueError("min_length must be at least 1")

    @classmethod
    def from_dict(cls, data: dict) -> "ClassifierConfig":
        """Build a config from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")
        config = cls(**data)
        config.validate()
        return config

    @classmethod
    def from_toml(cls, path: str | Path) -> "ClassifierConfig":
        """Load a config from a TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid TOML or holds bad settings.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid TOML in {path}: {exc}") from exc

        table = data.get(CONFIG_TABLE, data)
        if not isinstance(table, dict):
            raise ValueError(f"[{CONFIG_TABLE}] in {path} must be a table")
        logger.debug("Loaded config from %s: %s", path, table)
        return cls.from_dict(table)

    def with_overrides(self, **overrides) -> "ClassifierConfig":
        """Return a copy with the non-``None`` overrides applied."""
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_dict(data)

    def build_tokenizer(self) -> Tokenizer:
        return Tokenizer(
            lowercase=self.lowercase,
            strip_punctuation=self.strip_punctuation,
            min_length=self.min_length,
        )

    def build_classifier(self) -> NaiveBayesClassifier:
        """Create an untrained classifier with these settings."""
        self.validate()
        return NaiveBayesClassifier(tokenizer=self.build_tokenizer(), smoothing=self.smoothing)

    def to_dict(self) -> dict:
        return asdict(self)
