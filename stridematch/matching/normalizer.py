"""Phrase normalization for comparing user text against catalog model names.

Normalization lower-cases a phrase, removes brand names, articles and
punctuation, drops stray single letters and folds simple plurals, so that
"the Nike Pegasus 41" and "pegasus 41" compare equal.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from stridematch.config.settings import settings

BUNDLED_VOCABULARY_PATH = Path(__file__).parent.parent / "config" / "vocabulary.yaml"

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s+-]")
_WHITESPACE = re.compile(r"\s+")
_DIGIT = re.compile(r"[0-9]")


class VocabularyError(Exception):
    """Raised when a vocabulary file is missing or malformed."""


class Vocabulary(BaseModel):
    """Term lists that drive normalization and feature-complaint detection."""

    model_config = ConfigDict(frozen=True)

    brands: tuple[str, ...] = ()
    stop_words: tuple[str, ...] = ()
    feature_keywords: tuple[str, ...] = ()


@lru_cache(maxsize=8)
def load_vocabulary(path: Optional[Path] = None) -> Vocabulary:
    """Load a vocabulary from a YAML file.

    Args:
        path: YAML file with brands, stop_words and feature_keywords lists
            (None = bundled vocabulary)

    Raises:
        VocabularyError: If the file cannot be read or has the wrong shape
    """
    vocabulary_path = Path(path) if path else BUNDLED_VOCABULARY_PATH

    try:
        with open(vocabulary_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as e:
        raise VocabularyError(f"Cannot read vocabulary {vocabulary_path}: {e}") from e
    except yaml.YAMLError as e:
        raise VocabularyError(f"Vocabulary {vocabulary_path} is not valid YAML: {e}") from e

    try:
        vocabulary = Vocabulary.model_validate(raw)
    except ValidationError as e:
        raise VocabularyError(f"Vocabulary {vocabulary_path} is malformed: {e}") from e

    return vocabulary.model_copy(
        update={
            "brands": tuple(b.lower() for b in vocabulary.brands),
            "stop_words": tuple(w.lower() for w in vocabulary.stop_words),
            "feature_keywords": tuple(k.lower() for k in vocabulary.feature_keywords),
        }
    )


def get_vocabulary() -> Vocabulary:
    """Get the vocabulary configured in settings."""
    return load_vocabulary(settings.vocabulary_path)


def _word_pattern(terms: tuple[str, ...]) -> Optional[re.Pattern]:
    if not terms:
        return None
    # Longest first so "new balance" wins over any shorter overlapping term
    ordered = sorted(terms, key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(re.escape(t) for t in ordered) + r")\b")


@lru_cache(maxsize=16)
def _removal_patterns(vocabulary: Vocabulary) -> tuple[Optional[re.Pattern], Optional[re.Pattern]]:
    return _word_pattern(vocabulary.brands), _word_pattern(vocabulary.stop_words)


def _fold_token(token: str) -> Optional[str]:
    # Stray single letters, e.g. the "t" in "t novablast"
    if len(token) == 1 and not _DIGIT.search(token):
        return None
    # Simple plurals; "ss" and Latin "us" endings (Pegasus, Tempus) stay
    if len(token) > 3 and token.endswith("s") and not token.endswith(("ss", "us")):
        return token[:-1]
    return token


def _normalize_pass(value: str, vocabulary: Vocabulary) -> str:
    brand_pattern, stop_pattern = _removal_patterns(vocabulary)

    if brand_pattern:
        value = brand_pattern.sub("", value)
    if stop_pattern:
        value = stop_pattern.sub("", value)
    value = _DISALLOWED_CHARS.sub("", value)
    value = _WHITESPACE.sub(" ", value).strip()

    tokens = (_fold_token(token) for token in value.split(" ") if token)
    return " ".join(t for t in tokens if t)


def normalize(text: Optional[str], vocabulary: Optional[Vocabulary] = None) -> str:
    """Canonicalize a free-text phrase for comparison.

    Passes repeat until the phrase stops changing, so words exposed by an
    earlier pass ("models" -> "model", "new t balance" -> "new balance")
    are removed as well and normalize(normalize(x)) == normalize(x).

    Args:
        text: Raw phrase, e.g. "the Asics Novablast"
        vocabulary: Term lists to use (None = configured vocabulary)

    Returns:
        Normalized phrase, e.g. "novablast"; empty string for empty input
    """
    if not text:
        return ""

    vocab = vocabulary or get_vocabulary()
    value = text.lower()
    while True:
        # Every pass after the first only deletes characters, so this terminates
        normalized = _normalize_pass(value, vocab)
        if normalized == value:
            return normalized
        value = normalized
