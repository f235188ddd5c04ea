"""
Shared fixtures: an XAI client wired to httpx.MockTransport and an MCP
server built on top of it.
"""

from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from xai_mcp.common.config import XAIConfig
from xai_mcp.main import build_server
from xai_mcp.mcp.server import MCPServer
from xai_mcp.xai.client import XAIClient

Handler = Callable[[httpx.Request], httpx.Response]


def message_response(
    text: str = "Grok says hi",
    annotations: Optional[List[Dict[str, Any]]] = None,
    response_id: str = "resp_123",
) -> Dict[str, Any]:
    """Build a Responses API body with one message output."""
    content: Dict[str, Any] = {"type": "output_text", "text": text}
    if annotations is not None:
        content["annotations"] = annotations
    return {
        "id": response_id,
        "object": "response",
        "status": "completed",
        "model": "grok-4-1-fast",
        "output": [
            {"type": "x_search_call", "id": "call_1"},
            {"id": "msg_1", "type": "message", "role": "assistant", "content": [content]},
        ],
    }


class RecordingHandler:
    """
    MockTransport handler that records requests.

    ``response`` is either a response served once, or a zero-argument
    factory called for every request.
    """

    def __init__(
        self, response: Optional[Union[httpx.Response, Callable[[], httpx.Response]]] = None
    ):
        self.response = response or (lambda: httpx.Response(200, json=message_response()))
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, httpx.Response):
            return self.response
        return self.response()


class TrackingStream(httpx.AsyncByteStream):
    """Async byte stream that records whether it was closed."""

    def __init__(self, chunks: List[bytes]):
        self.chunks = chunks
        self.closed = False
        self.chunks_sent = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            self.chunks_sent += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def xai_config() -> XAIConfig:
    """Test XAI configuration."""
    return XAIConfig(api_key="test-key", model="grok-test", base_url="https://api.test/v1")


@pytest.fixture
def make_client(xai_config: XAIConfig) -> Callable[[Handler], XAIClient]:
    """Factory for XAI clients backed by a mock transport."""

    def factory(handler: Handler) -> XAIClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return XAIClient(xai_config, http_client=http_client)

    return factory


@pytest.fixture
def recording_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def mcp_server(make_client, recording_handler: RecordingHandler) -> MCPServer:
    """MCP server whose upstream calls hit the recording handler."""
    return build_server(make_client(recording_handler))
