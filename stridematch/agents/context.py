"""Conversation context extraction.

Replays the whole conversation on every turn and derives the runner's goal,
preferred feel, support type, shoe count, budget, race intent and dislikes.
Each field has its own priority-ordered list of keyword rules; the first
rule that matches wins and fields do not influence each other.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import structlog

from stridematch.agents.dislike_extraction import extract_dislikes
from stridematch.catalog import get_catalog
from stridematch.logging import log_context_extraction
from stridematch.matching.normalizer import Vocabulary
from stridematch.state.models import (
    Budget,
    CatalogEntry,
    ChatMessage,
    ConversationContext,
    Feel,
    Goal,
    ShoeCount,
    SupportType,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class KeywordRule:
    """Assign `value` when any of `terms` appears in the conversation."""

    terms: tuple[str, ...]
    value: Any
    whole_word: bool = False

    def matches(self, text: str) -> bool:
        for term in self.terms:
            if self.whole_word:
                if re.search(r"\b" + re.escape(term) + r"\b", text):
                    return True
            elif term in text:
                return True
        return False


def detect(text: str, rules: Sequence[KeywordRule], default: Any = None) -> Any:
    """Return the value of the first matching rule, or `default`."""
    for rule in rules:
        if rule.matches(text):
            return rule.value
    return default


# ============================================================================
# Detector rules (priority order)
# ============================================================================

GOAL_RULES = (
    KeywordRule(("10k",), Goal.RACE_10K),
    KeywordRule(("half marathon",), Goal.HALF_MARATHON),
    KeywordRule(("marathon",), Goal.MARATHON),
    KeywordRule(("long run",), Goal.LONG_RUNS),
    KeywordRule(("training", "all round"), Goal.DAILY_TRAINING),
)

FEEL_RULES = (
    KeywordRule(("bouncy", "springy", "responsive"), Feel.BOUNCY),
    KeywordRule(("soft", "plush", "cushioned"), Feel.SOFT),
    KeywordRule(("firm", "ground feel"), Feel.FIRM),
)

SUPPORT_RULES = (
    KeywordRule(("neutral",), SupportType.NEUTRAL),
    KeywordRule(("stability", "support", "overpronation"), SupportType.STABILITY),
)

SHOE_COUNT_RULES = (
    KeywordRule(("rotation", "multiple shoes", "two shoes"), ShoeCount.ROTATION),
)

BUDGET_RULES = (
    KeywordRule(
        (
            "budget",
            "cheap",
            "don't want to spend",
            "don’t want to spend",
            "not looking to spend",
            "affordable",
            "price sensitive",
            "expensive",
        ),
        Budget.BUDGET_CONSCIOUS,
    ),
)

RACE_INTENT_RULES = (
    KeywordRule(("pb",), True, whole_word=True),
    KeywordRule(
        (
            "personal best",
            "go all out",
            "as fast as possible",
            "max performance",
            "race day",
            "aggressive",
            "carbon plate",
            "plated shoe",
        ),
        True,
    ),
)


# ============================================================================
# Context building
# ============================================================================

HistoryItem = Union[ChatMessage, Mapping[str, Any]]


def conversation_text(history: Iterable[HistoryItem], message: str) -> str:
    """Join history contents (oldest first) and the message, lower-cased."""
    contents = []
    for item in history or ():
        if isinstance(item, ChatMessage):
            contents.append(item.content)
        else:
            contents.append(str(item.get("content") or ""))
    contents.append(message or "")
    return " ".join(contents).lower()


def build_context(
    history: Iterable[HistoryItem],
    message: str,
    *,
    catalog: Optional[Iterable[CatalogEntry]] = None,
    vocabulary: Optional[Vocabulary] = None,
    threshold: Optional[float] = None,
) -> ConversationContext:
    """Build the conversation context for the current turn.

    Args:
        history: Previous messages as ChatMessage objects or {role, content} dicts
        message: Latest user message
        catalog: Catalog to resolve dislikes against (None = configured catalog)
        vocabulary: Term lists (None = configured vocabulary)
        threshold: Dislike acceptance threshold (None = configured value)

    Returns:
        ConversationContext; undetermined fields stay None/False/empty

    Raises:
        CatalogError: Only when no catalog is passed and the configured
            catalog file cannot be loaded. Extraction itself never raises.
    """
    text = conversation_text(history, message)
    entries = get_catalog() if catalog is None else catalog

    extraction = extract_dislikes(text, entries, vocabulary=vocabulary, threshold=threshold)

    context = ConversationContext(
        goal=detect(text, GOAL_RULES),
        preferred_feel=detect(text, FEEL_RULES),
        support_type=detect(text, SUPPORT_RULES),
        shoe_count=detect(text, SHOE_COUNT_RULES),
        budget=detect(text, BUDGET_RULES),
        race_intent=detect(text, RACE_INTENT_RULES, default=False),
        dislikes=extraction.dislikes,
        dislike_clarifications=extraction.clarifications,
    )

    log_context_extraction(
        fields=context.model_dump(
            include={"goal", "preferred_feel", "support_type", "shoe_count", "budget", "race_intent"},
            mode="json",
        ),
        dislikes=context.dislikes,
        clarifications=len(context.dislike_clarifications),
    )
    return context


# ============================================================================
# Follow-up questions
# ============================================================================

GOAL_QUESTION = (
    "What kind of running are you mainly using the shoes for? "
    "(e.g. daily training, long runs, racing)"
)
FEEL_QUESTION = (
    "Do you prefer something soft and cushioned, or more firm and responsive underfoot?"
)
SUPPORT_QUESTION = (
    "Do you usually run in neutral shoes, or do you benefit from added stability or support?"
)


def missing_context_check(context: ConversationContext) -> Optional[str]:
    """Pick the most important follow-up question for the user.

    Goal comes first, then feel, then support type, then any dislike that
    could not be matched confidently.

    Returns:
        A question, or None when the context is complete enough
    """
    if not context.goal:
        return GOAL_QUESTION
    if not context.preferred_feel:
        return FEEL_QUESTION
    if not context.support_type:
        return SUPPORT_QUESTION
    if context.dislike_clarifications:
        detected = ", ".join(
            f'"{c.input}"' + (f" (did you mean {c.suggestion}?)" if c.suggestion else "")
            for c in context.dislike_clarifications
        )
        return f"Just to clarify, could you confirm which shoe you disliked? I detected {detected}."
    return None
