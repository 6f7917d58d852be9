"""State models exports."""

from .models import (
    Budget,
    CatalogEntry,
    ChatMessage,
    ConversationContext,
    DislikeClarification,
    DislikeExtraction,
    Feel,
    Goal,
    MatchResult,
    RaceReadiness,
    ShoeCount,
    SupportType,
)

__all__ = [
    "Budget",
    "CatalogEntry",
    "ChatMessage",
    "ConversationContext",
    "DislikeClarification",
    "DislikeExtraction",
    "Feel",
    "Goal",
    "MatchResult",
    "RaceReadiness",
    "ShoeCount",
    "SupportType",
]
