"""FastAPI routes for conversation context extraction."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stridematch.agents.context import build_context, conversation_text, missing_context_check
from stridematch.catalog import get_catalog
from stridematch.logging import EventCategory, LogTimer, bind_request_fields, log_follow_up
from stridematch.matching.catalog_matcher import identify_model
from stridematch.state.models import CatalogEntry, ChatMessage, ConversationContext, MatchResult
from stridematch.tools.filters import filter_catalog

router = APIRouter(prefix="/api", tags=["context"])


class ContextRequest(BaseModel):
    """Latest user message plus the conversation so far."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    chat_history: List[ChatMessage] = Field(default_factory=list)


class ContextResponse(BaseModel):
    """Extracted context, the next follow-up question and remaining candidates."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    context: ConversationContext
    follow_up: Optional[str] = None
    candidates: List[str] = Field(default_factory=list)


class MatchRequest(BaseModel):
    """A free-text shoe phrase to resolve."""
    phrase: str


@router.post("/context", response_model=ContextResponse, response_model_by_alias=True)
async def extract_context(request: ContextRequest):
    """Build the context for the current turn and pick a follow-up question."""
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    bind_request_fields(
        history_turns=len(request.chat_history),
        message_chars=len(request.message),
    )

    catalog = get_catalog()
    with LogTimer("context_request", EventCategory.CONTEXT):
        context = build_context(request.chat_history, request.message, catalog=catalog)
        text = conversation_text(request.chat_history, request.message)
        candidates = filter_catalog(catalog, context, text)

    follow_up = missing_context_check(context)
    log_follow_up(follow_up, len(context.dislike_clarifications))

    return ContextResponse(
        context=context,
        follow_up=follow_up,
        candidates=[entry.full_name for entry in candidates],
    )


@router.post("/match", response_model=MatchResult)
async def match_phrase(request: MatchRequest):
    """Resolve a single phrase to the closest catalog model."""
    return identify_model(request.phrase, get_catalog())


@router.get("/catalog", response_model=List[CatalogEntry], response_model_by_alias=True)
async def list_catalog():
    """List every shoe in the catalog."""
    return list(get_catalog())
