"""XAI Responses API client."""

from xai_mcp.xai.client import XAIClient
from xai_mcp.xai.errors import (
    NoMessageContentError,
    NoTextContentError,
    XAIAPIError,
    XAIError,
    XAIResponseParseError,
    XAIStreamError,
)
from xai_mcp.xai.models import XAICitation, XAIRequest, XAIResponse, XAISearchResult

__all__ = [
    "XAIClient",
    "XAIError",
    "XAIAPIError",
    "XAIResponseParseError",
    "NoMessageContentError",
    "NoTextContentError",
    "XAIStreamError",
    "XAICitation",
    "XAIRequest",
    "XAIResponse",
    "XAISearchResult",
]
