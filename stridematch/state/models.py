"""State models for the shoe recommendation context core."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RaceReadiness(str, Enum):
    """Whether a shoe is suitable for racing."""

    YES = "yes"
    NO = "no"
    VERSATILE = "versatile"


class Goal(str, Enum):
    """Main running goal."""

    RACE_10K = "10k race"
    HALF_MARATHON = "half marathon"
    MARATHON = "marathon"
    LONG_RUNS = "long runs"
    DAILY_TRAINING = "daily training"


class Feel(str, Enum):
    """Preferred underfoot feel."""

    BOUNCY = "bouncy"
    SOFT = "soft"
    FIRM = "firm"


class SupportType(str, Enum):
    """Neutral or stability shoes."""

    NEUTRAL = "neutral"
    STABILITY = "stability"


class ShoeCount(str, Enum):
    """How many shoes the runner is shopping for."""

    ROTATION = "rotation"


class Budget(str, Enum):
    """Budget sensitivity."""

    BUDGET_CONSCIOUS = "budget-conscious"


class CatalogEntry(BaseModel):
    """A shoe in the product catalog."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    brand: str
    model: str
    types: tuple[str, ...] = ()
    heel_height: float
    forefoot_height: float
    drop: float
    weight: float
    race_readiness: RaceReadiness = RaceReadiness.NO
    plated: Optional[str] = None
    release_year: Optional[int] = None
    notes: Optional[str] = None

    @property
    def full_name(self) -> str:
        """Brand and model name without repeating the brand."""
        if self.model.lower().startswith(self.brand.lower()):
            return self.model
        return f"{self.brand} {self.model}"


class MatchResult(BaseModel):
    """Best catalog model for a candidate phrase."""

    model_config = ConfigDict(frozen=True)

    model: Optional[str] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    reason: str = ""


class DislikeClarification(BaseModel):
    """A dislike candidate that could not be matched confidently."""

    model_config = ConfigDict(frozen=True)

    input: str
    suggestion: Optional[str] = None
    confidence: float = 0.0


class DislikeExtraction(BaseModel):
    """Confirmed dislikes and pending clarifications found in a conversation."""

    dislikes: list[str] = Field(default_factory=list)
    clarifications: list[DislikeClarification] = Field(default_factory=list)


class ChatMessage(BaseModel):
    """A message in a conversation."""

    role: str  # "user" or "assistant"
    content: str


class ConversationContext(BaseModel):
    """Everything known about the runner after replaying the conversation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    goal: Optional[Goal] = None
    preferred_feel: Optional[Feel] = None
    support_type: Optional[SupportType] = None
    shoe_count: Optional[ShoeCount] = None
    budget: Optional[Budget] = None
    dislikes: list[str] = Field(default_factory=list)
    dislike_clarifications: list[DislikeClarification] = Field(default_factory=list)
    race_intent: bool = False
