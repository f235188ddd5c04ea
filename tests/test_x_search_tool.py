"""
Tests for the x_search tool handler and citation formatting.
"""

import json

import httpx
import pytest

from xai_mcp.tools.x_search import XSearchTool, format_citations, format_result
from xai_mcp.xai.models import XAICitation, XAISearchResult

from .conftest import RecordingHandler, message_response


class TestFormatCitations:
    """Test Markdown rendering of citations."""

    def test_drops_citations_without_url(self):
        citations = [
            XAICitation(type="url_citation", title="A", url="http://a"),
            XAICitation(type="url_citation", title=None, url=""),
        ]

        text = format_citations(citations)

        assert text == "**Sources:**\n1. [A](http://a)"
        assert text.count("\n") == 1

    def test_title_defaults_to_source(self):
        citations = [XAICitation(type="url_citation", url="https://x.com/1")]

        assert format_citations(citations) == "**Sources:**\n1. [Source](https://x.com/1)"

    def test_numbering_follows_original_position(self):
        citations = [
            XAICitation(type="url_citation", title="skip"),
            XAICitation(type="url_citation", title="B", url="http://b"),
        ]

        assert format_citations(citations) == "**Sources:**\n2. [B](http://b)"

    def test_empty_list(self):
        assert format_citations([]) == ""
        assert format_citations(None) == ""

    def test_all_without_url(self):
        assert format_citations([XAICitation(type="url_citation", title="t")]) == ""


class TestFormatResult:
    def test_citations_appended_after_blank_line(self):
        result = XAISearchResult(
            id="r",
            text="Answer",
            citations=[XAICitation(type="url_citation", title="A", url="http://a")],
        )

        tool_result = format_result(result)

        assert tool_result.isError is False
        assert tool_result.content[0].type == "text"
        assert tool_result.content[0].text == "Answer\n\n**Sources:**\n1. [A](http://a)"

    def test_no_sources_block_without_citations(self):
        tool_result = format_result(XAISearchResult(id="r", text="Answer", citations=[]))

        assert tool_result.content[0].text == "Answer"
        assert "**Sources:**" not in tool_result.content[0].text


class TestXSearchTool:
    """Test the tool handler contract: never raises."""

    def test_tool_definition(self, make_client, recording_handler):
        tool = XSearchTool(make_client(recording_handler)).get_tool_definition()
        schema = tool.input_schema()

        assert tool.name == "x_search"
        assert schema["type"] == "object"
        assert schema["properties"]["query"]["type"] == "string"
        assert schema["required"] == ["query"]

    @pytest.mark.asyncio
    async def test_missing_query_makes_no_network_call(self, make_client, recording_handler):
        tool = XSearchTool(make_client(recording_handler))

        result = await tool.execute({})

        assert result.isError is True
        assert "Query parameter is required" in result.content[0].text
        assert recording_handler.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [None, 42, "", ["list"]])
    async def test_invalid_query_types(self, make_client, recording_handler, query):
        tool = XSearchTool(make_client(recording_handler))

        result = await tool.execute({"query": query})

        assert result.isError is True
        assert recording_handler.requests == []

    @pytest.mark.asyncio
    async def test_successful_search(self, make_client):
        annotations = [{"type": "url_citation", "url": "https://x.com/p/1", "title": "Post"}]
        handler = RecordingHandler(httpx.Response(200, json=message_response("News", annotations)))
        tool = XSearchTool(make_client(handler))

        result = await tool.execute({"query": "news"})

        assert result.isError is False
        assert result.content[0].text == "News\n\n**Sources:**\n1. [Post](https://x.com/p/1)"
        assert json.loads(handler.requests[0].content)["input"][0]["content"] == "news"

    @pytest.mark.asyncio
    async def test_upstream_error_becomes_tool_error(self, make_client):
        handler = RecordingHandler(httpx.Response(500, text="upstream exploded"))
        tool = XSearchTool(make_client(handler))

        result = await tool.execute({"query": "q"})

        assert result.isError is True
        assert result.content[0].text == (
            "Error executing X search: XAI API error (500): upstream exploded"
        )

    @pytest.mark.asyncio
    async def test_parse_failure_becomes_tool_error(self, make_client):
        handler = RecordingHandler(httpx.Response(200, json={"id": "r", "output": []}))
        tool = XSearchTool(make_client(handler))

        result = await tool.execute({"query": "q"})

        assert result.isError is True
        assert "No message content in XAI response" in result.content[0].text

    @pytest.mark.asyncio
    async def test_network_failure_becomes_tool_error(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        tool = XSearchTool(make_client(handler))

        result = await tool.execute({"query": "q"})

        assert result.isError is True
        assert "timed out" in result.content[0].text
