"""Catalog filtering driven by the conversation context."""

from typing import Iterable

import structlog

from stridematch.state.models import CatalogEntry, ConversationContext, Feel, Goal, RaceReadiness

logger = structlog.get_logger()

RACE_GOALS = {Goal.RACE_10K, Goal.HALF_MARATHON, Goal.MARATHON}
RACE_TYPES = {"racing", "tempo"}

SOFT_MIN_HEEL_HEIGHT = 25
FIRM_MAX_HEEL_HEIGHT = 35
BOUNCY_MAX_WEIGHT = 290


def is_disliked(entry: CatalogEntry, dislikes: Iterable[str]) -> bool:
    """Check whether a catalog entry matches any disliked model.

    Args:
        entry: Catalog entry
        dislikes: Normalized disliked model names, e.g. ["pegasus 41"]

    Returns:
        True if a dislike appears in the entry name or the model name
        appears in the dislike
    """
    full_name = f"{entry.brand} {entry.model}".lower()
    model_only = entry.model.lower()

    for dislike in dislikes:
        clean = dislike.lower().removesuffix("s").strip()
        if not clean:
            continue
        if clean in full_name or clean in model_only or model_only in clean:
            return True
    return False


def _passes(entry: CatalogEntry, context: ConversationContext, text: str) -> bool:
    types = {t.lower() for t in entry.types}
    keep = True

    if context.race_intent and entry.race_readiness == RaceReadiness.NO:
        keep = False

    if is_disliked(entry, context.dislikes):
        keep = False

    if ("support" in text or "overpronation" in text) and "stability" not in types:
        keep = False
    if "neutral" in text and "stability" in types:
        keep = False

    if context.preferred_feel == Feel.SOFT and entry.heel_height < SOFT_MIN_HEEL_HEIGHT:
        keep = False
    if context.preferred_feel == Feel.FIRM and entry.heel_height > FIRM_MAX_HEEL_HEIGHT:
        keep = False
    if context.preferred_feel == Feel.BOUNCY and entry.weight > BOUNCY_MAX_WEIGHT:
        keep = False

    # Race goals always keep racing and tempo shoes in play
    if context.goal in RACE_GOALS and types & RACE_TYPES:
        keep = True

    return keep


def filter_catalog(
    catalog: Iterable[CatalogEntry],
    context: ConversationContext,
    text: str = "",
) -> list[CatalogEntry]:
    """Filter catalog entries using the conversation context.

    Args:
        catalog: Entries to filter (not modified)
        context: Context built from the conversation
        text: Conversation text, used for support/neutral mentions

    Returns:
        Entries that remain candidates, in catalog order
    """
    lowered = text.lower()
    entries = list(catalog)
    kept = [entry for entry in entries if _passes(entry, context, lowered)]

    logger.debug(
        "Catalog filtered",
        original=len(entries),
        kept=len(kept),
        dislikes=context.dislikes,
    )
    return kept
