"""Fuzzy matching of a free-text phrase against catalog model names."""

import re
from functools import lru_cache
from typing import Iterable, Optional

import structlog

from stridematch.config.settings import settings
from stridematch.matching.normalizer import Vocabulary, get_vocabulary, normalize
from stridematch.matching.similarity import similarity
from stridematch.state.models import CatalogEntry, MatchResult

logger = structlog.get_logger()

_STANDALONE_NUMBER = re.compile(r"\b\d+\b")


@lru_cache(maxsize=1024)
def _normalized_model(model_name: str, vocabulary: Vocabulary) -> str:
    return normalize(model_name, vocabulary)


def strip_numbers(phrase: str) -> str:
    """Remove standalone numeric tokens, e.g. "pegasus 41" -> "pegasus"."""
    return _STANDALONE_NUMBER.sub("", phrase).strip()


def shares_stem(candidate: str, model: str) -> bool:
    """Check whether one phrase is a prefix of the other once numbers are removed."""
    candidate_stem = strip_numbers(candidate)
    model_stem = strip_numbers(model)
    if not candidate_stem or not model_stem:
        return False
    return model_stem.startswith(candidate_stem) or candidate_stem.startswith(model_stem)


def score_model(
    cleaned: str,
    model_name: str,
    prefix_boost: Optional[float] = None,
) -> float:
    """Score a normalized candidate against a normalized model name.

    Args:
        cleaned: Normalized candidate phrase
        model_name: Normalized catalog model name
        prefix_boost: Score floor for stem matches (None = configured value)

    Returns:
        Similarity in [0, 1], raised to the prefix boost for stem matches
    """
    boost = settings.prefix_boost_score if prefix_boost is None else prefix_boost
    score = similarity(cleaned, model_name)
    if shares_stem(cleaned, model_name):
        score = max(score, boost)
    return score


def identify_model(
    raw: str,
    catalog: Iterable[CatalogEntry],
    *,
    vocabulary: Optional[Vocabulary] = None,
    prefix_boost: Optional[float] = None,
) -> MatchResult:
    """Identify which catalog model a phrase most likely refers to.

    Args:
        raw: Candidate phrase extracted from the conversation
        catalog: Catalog entries to compare against, in priority order
        vocabulary: Term lists for normalization (None = configured vocabulary)
        prefix_boost: Score floor for stem matches (None = configured value)

    Returns:
        MatchResult with the best normalized model name and its confidence.
        Ties keep the first entry in catalog order.
    """
    vocab = vocabulary or get_vocabulary()
    cleaned = normalize(raw, vocab)
    if not cleaned:
        return MatchResult(model=None, confidence=0.0, reason="empty after normalization")

    entries = list(catalog)
    if not entries:
        return MatchResult(model=None, confidence=0.0, reason="no models available")

    best_match: Optional[str] = None
    best_score = 0.0
    for entry in entries:
        model_name = _normalized_model(entry.model, vocab)
        score = score_model(cleaned, model_name, prefix_boost)
        if score > best_score:
            best_score = score
            best_match = model_name

    if best_match is None:
        return MatchResult(
            model=None,
            confidence=0.0,
            reason=f'no catalog model resembles "{cleaned}"',
        )

    logger.debug("Model identified", candidate=cleaned, model=best_match, score=best_score)
    return MatchResult(
        model=best_match,
        confidence=min(best_score, 1.0),
        reason=f'matched "{cleaned}" to "{best_match}" with similarity {best_score:.2f}',
    )
