"""Phrase normalization and fuzzy catalog matching."""

from .catalog_matcher import identify_model, score_model, shares_stem, strip_numbers
from .normalizer import (
    Vocabulary,
    VocabularyError,
    get_vocabulary,
    load_vocabulary,
    normalize,
)
from .similarity import levenshtein, similarity

__all__ = [
    "identify_model",
    "score_model",
    "shares_stem",
    "strip_numbers",
    "Vocabulary",
    "VocabularyError",
    "get_vocabulary",
    "load_vocabulary",
    "normalize",
    "levenshtein",
    "similarity",
]
