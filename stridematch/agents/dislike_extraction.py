"""Dislike extraction from conversation text.

This module finds shoe models the runner says they disliked and resolves
them against the catalog:
1. Scan the text with two pattern families (negative verbs such as
   "didn't like the X", and complaints such as "the X wasn't for me")
2. Split compound phrases ("novablast and cumulus") into candidates
3. Drop complaints about attributes (laces, fit, price) rather than shoes
4. Match each candidate to a catalog model; confident matches become
   dislikes, the rest become clarification questions
"""

import re
from functools import lru_cache
from typing import Iterable, Optional

import structlog

from stridematch.config.settings import settings
from stridematch.logging import log_dislike_resolution
from stridematch.matching.catalog_matcher import identify_model
from stridematch.matching.normalizer import Vocabulary, get_vocabulary
from stridematch.state.models import CatalogEntry, DislikeClarification, DislikeExtraction

logger = structlog.get_logger()


# ============================================================================
# Pattern rules
# ============================================================================

# Phrases introducing a disliked shoe: "I didn't like the Pegasus"
NEGATIVE_TRIGGERS = (
    "didn't like",
    "did not like",
    "don't like",
    "do not like",
    "disliked",
    "dislike",
    "hated",
    "hate",
    "not a fan of",
)

# Words that end the captured phrase: "the novablast felt odd"
BOUNDARY_WORDS = ("felt", "was", "seemed")
BOUNDARY_PUNCTUATION = ",.;!"

# Phrases following a disliked shoe: "the Pegasus wasn't for me"
COMPLAINT_ENDINGS = (
    "wasn't for me",
    "was not for me",
    "was for me",
    "didn't work for me",
    "did not work for me",
    "wasn't my thing",
    "was not my thing",
)

# Longest shoe phrase, in words, a complaint ending looks back over
COMPLAINT_MAX_WORDS = 6

# Characters a shoe phrase may contain
_PHRASE = r"([\w\s+\-/]+?)"

_SPLIT_PATTERN = re.compile(r"(?:\s*(?:\bor\b|\band\b|[,/])\s*)+")


def _phrase_alternation(phrases: tuple[str, ...]) -> str:
    ordered = sorted(phrases, key=len, reverse=True)
    # Accept both straight and curly apostrophes
    escaped = (re.escape(p).replace("'", "[’']") for p in ordered)
    return "(?:" + "|".join(escaped) + ")"


def _negative_verb_pattern() -> re.Pattern:
    boundary = (
        r"(?=\s*(?:[" + re.escape(BOUNDARY_PUNCTUATION) + r"]"
        + r"|\b(?:" + "|".join(BOUNDARY_WORDS) + r")\b|$))"
    )
    return re.compile(
        r"\b" + _phrase_alternation(NEGATIVE_TRIGGERS) + r"\s+" + _PHRASE + boundary
    )


def _complaint_pattern() -> re.Pattern:
    # A bounded word window keeps each attempt short on long unpunctuated text
    words = r"\b((?:[\w+\-/]+\s+){0," + str(COMPLAINT_MAX_WORDS - 1) + r"}?[\w+\-/]+)"
    return re.compile(
        r"(?:\bthe\s+)?" + words + r"\s+" + _phrase_alternation(COMPLAINT_ENDINGS)
    )


DISLIKE_PATTERNS = (_negative_verb_pattern(), _complaint_pattern())


@lru_cache(maxsize=8)
def _feature_pattern(keywords: tuple[str, ...]) -> Optional[re.Pattern]:
    if not keywords:
        return None
    # Prefix of a word: "lace" also covers "laces", "fit" covers "fitting"
    return re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")")


# ============================================================================
# Candidate helpers
# ============================================================================

def find_dislike_phrases(text: str) -> list[str]:
    """Find raw phrases the user expressed a dislike about.

    Args:
        text: Conversation text (any case)

    Returns:
        Captured phrases in pattern-family order, then text order
    """
    lowered = text.lower()
    phrases = []
    for pattern in DISLIKE_PATTERNS:
        for match in pattern.finditer(lowered):
            phrases.append(match.group(1))
    return phrases


def split_candidates(phrase: str) -> list[str]:
    """Split a compound phrase on "or", "and", commas and slashes.

    Example:
        "asics novablast and gel-cumulus 26" -> ["asics novablast", "gel-cumulus 26"]
    """
    parts = _SPLIT_PATTERN.split(phrase)
    return [p.strip() for p in parts if p.strip()]


def is_feature_complaint(phrase: str, vocabulary: Optional[Vocabulary] = None) -> bool:
    """Check whether a phrase is about a shoe attribute rather than a shoe.

    Args:
        phrase: Candidate phrase, e.g. "the laces"

    Returns:
        True if any word starts with a feature keyword
    """
    vocab = vocabulary or get_vocabulary()
    pattern = _feature_pattern(vocab.feature_keywords)
    if pattern is None:
        return False
    return pattern.search(phrase.lower()) is not None


# ============================================================================
# Extraction
# ============================================================================

def extract_dislikes(
    text: str,
    catalog: Iterable[CatalogEntry],
    *,
    vocabulary: Optional[Vocabulary] = None,
    threshold: Optional[float] = None,
    min_clarification_length: Optional[int] = None,
) -> DislikeExtraction:
    """Extract disliked catalog models from conversation text.

    Args:
        text: Full conversation text (current message plus history)
        catalog: Catalog entries to resolve candidates against
        vocabulary: Term lists (None = configured vocabulary)
        threshold: Minimum confidence for a confirmed dislike
            (None = configured value)
        min_clarification_length: Shorter unmatched candidates are ignored
            (None = configured value)

    Returns:
        DislikeExtraction with unique dislikes in first-seen order and the
        candidates that need a clarification question
    """
    vocab = vocabulary or get_vocabulary()
    accept_at = settings.dislike_confidence_threshold if threshold is None else threshold
    min_length = (
        settings.min_clarification_length
        if min_clarification_length is None
        else min_clarification_length
    )
    entries = list(catalog)

    dislikes: list[str] = []
    clarifications: list[DislikeClarification] = []
    pending_inputs: set[str] = set()

    for phrase in find_dislike_phrases(text or ""):
        for candidate in split_candidates(phrase):
            if is_feature_complaint(candidate, vocab):
                logger.debug("Feature complaint skipped", candidate=candidate)
                continue

            result = identify_model(candidate, entries, vocabulary=vocab)
            accepted = result.model is not None and result.confidence >= accept_at
            log_dislike_resolution(candidate, result.model, result.confidence, accepted)

            if accepted:
                if result.model not in dislikes:
                    dislikes.append(result.model)
            elif len(candidate) >= min_length and candidate not in pending_inputs:
                pending_inputs.add(candidate)
                clarifications.append(
                    DislikeClarification(
                        input=candidate,
                        suggestion=result.model,
                        confidence=result.confidence,
                    )
                )

    return DislikeExtraction(dislikes=dislikes, clarifications=clarifications)
