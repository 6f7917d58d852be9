"""Context and dislike extraction exports."""

from stridematch.agents.context import build_context, missing_context_check
from stridematch.agents.dislike_extraction import extract_dislikes, is_feature_complaint

__all__ = [
    "build_context",
    "missing_context_check",
    "extract_dislikes",
    "is_feature_complaint",
]
