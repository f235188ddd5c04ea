"""
Wire models for the XAI Responses API.

Request models are serialized as-is; response models are lenient
(unknown output items and extra fields are tolerated).
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class XAIMessage(BaseModel):
    """Single conversation turn sent to the API."""

    role: Literal["user", "assistant"]
    content: str


class XAITool(BaseModel):
    """Server-side tool directive."""

    type: Literal["x_search"]


class XAIRequest(BaseModel):
    """Body of POST {base_url}/responses."""

    model: str
    input: List[XAIMessage]
    tools: List[XAITool]
    stream: Optional[bool] = None


class XAICitation(BaseModel):
    """Source reference attached to generated text."""

    model_config = ConfigDict(extra="allow")

    type: str = "url_citation"
    url: Optional[str] = None
    title: Optional[str] = None
    snippet: Optional[str] = None


class XAIUsage(BaseModel):
    """Token accounting reported by the API."""

    model_config = ConfigDict(extra="allow")

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class XAIResponse(BaseModel):
    """Non-streaming response body."""

    model_config = ConfigDict(extra="allow")

    id: str = ""
    object: Optional[str] = None
    status: Optional[str] = None
    model: Optional[str] = None
    output: List[Dict[str, Any]] = Field(default_factory=list)
    usage: Optional[XAIUsage] = None


class XAISearchResult(BaseModel):
    """Uniform result of a search call."""

    id: str
    text: str
    citations: List[XAICitation] = Field(default_factory=list)


def find_message(output: Any) -> Optional[Dict[str, Any]]:
    """Return the first output item of type "message" that carries content."""
    if not isinstance(output, list):
        return None
    for item in output:
        if isinstance(item, dict) and item.get("type") == "message":
            if "content" in item:
                return item
            return None
    return None


def find_text(message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the first content entry of type "output_text"."""
    content = message.get("content")
    if not isinstance(content, list):
        return None
    for entry in content:
        if isinstance(entry, dict) and entry.get("type") == "output_text":
            return entry
    return None
