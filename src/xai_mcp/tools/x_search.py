"""
x_search tool.

Searches X (Twitter) through XAI's Grok search capability and renders the
answer with a Markdown list of sources. Every failure, including invalid
arguments, is returned as an ``isError`` result instead of being raised.
"""

from typing import Any, Dict, List, Optional, Sequence

from xai_mcp.common.logging import get_logger
from xai_mcp.mcp.jsonrpc import MCPToolsCallResult
from xai_mcp.mcp.tool_registry import Tool, ToolHandler, ToolParameter, ToolParameterType
from xai_mcp.xai.client import XAIClient
from xai_mcp.xai.models import XAICitation, XAISearchResult

logger = get_logger(__name__)

TOOL_NAME = "x_search"
TOOL_DESCRIPTION = (
    "Search X (Twitter) for posts, users, and threads using XAI's Grok search capabilities"
)


def format_citations(citations: Optional[Sequence[XAICitation]]) -> str:
    """
    Format citations as a numbered Markdown list.

    Entries without a url are dropped but keep their position in the
    numbering. Returns an empty string when nothing survives.
    """
    if not citations:
        return ""

    lines: List[str] = []
    for index, citation in enumerate(citations, start=1):
        if not citation.url:
            continue
        title = citation.title or "Source"
        lines.append(f"{index}. [{title}]({citation.url})")

    if not lines:
        return ""

    return "**Sources:**\n" + "\n".join(lines)


def format_result(result: XAISearchResult) -> MCPToolsCallResult:
    """Combine answer text and sources into a tool result."""
    citation_text = format_citations(result.citations)
    full_text = f"{result.text}\n\n{citation_text}" if citation_text else result.text
    return MCPToolsCallResult.text(full_text)


class XSearchTool(ToolHandler):
    """Tool handler backed by XAIClient.search."""

    def __init__(self, client: XAIClient):
        self.client = client

    def get_tool_definition(self) -> Tool:
        return Tool(
            name=TOOL_NAME,
            description=TOOL_DESCRIPTION,
            parameters=[
                ToolParameter(
                    name="query",
                    type=ToolParameterType.STRING,
                    description="The search query to find relevant X posts and content",
                    required=True,
                )
            ],
        )

    async def execute(self, arguments: Dict[str, Any]) -> MCPToolsCallResult:
        """Run the search and format the result for MCP."""
        query = arguments.get("query") if isinstance(arguments, dict) else None

        if not query or not isinstance(query, str):
            logger.warning(event="x_search_invalid_arguments", arguments=list(arguments or {}))
            return MCPToolsCallResult.text(
                "Error executing X search: Query parameter is required and must be a string",
                is_error=True,
            )

        logger.info(event="x_search_started", query_length=len(query))

        try:
            result = await self.client.search(query)
        except Exception as e:
            logger.error(event="x_search_failed", error=str(e), error_type=type(e).__name__)
            return MCPToolsCallResult.text(
                f"Error executing X search: {str(e) or 'Unknown error'}", is_error=True
            )

        logger.info(
            event="x_search_completed",
            response_id=result.id,
            citations=len(result.citations),
        )
        return format_result(result)
