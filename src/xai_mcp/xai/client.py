"""
XAI client for the Responses API.

- Async I/O through a single long-lived httpx.AsyncClient
- Each search is a single-turn request, no conversation history
- Typed failures (XAIError and subclasses) for every failure mode
- Never log the API key
"""

from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Optional

import httpx
from pydantic import ValidationError

from xai_mcp.common.config import XAIConfig
from xai_mcp.common.logging import TimedLogger, get_logger
from xai_mcp.xai.errors import (
    NoMessageContentError,
    NoTextContentError,
    XAIAPIError,
    XAIError,
    XAIResponseParseError,
    XAIStreamError,
)
from xai_mcp.xai.models import (
    XAICitation,
    XAIMessage,
    XAIRequest,
    XAIResponse,
    XAISearchResult,
    XAITool,
    find_message,
    find_text,
)
from xai_mcp.xai.sse import iter_text_fragments

logger = get_logger(__name__)


class XAIClient:
    """Client for XAI's x_search capability."""

    def __init__(self, config: XAIConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the client.

        Args:
            config: Immutable XAI settings (API key, model, base URL)
            http_client: Optional pre-built httpx client. When omitted the
                client creates and owns one.
        """
        self.config = config
        self.model = config.model
        self.base_url = config.base_url.rstrip("/")
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(config.timeout))

        logger.info(
            event="xai_client_initialized",
            model=self.model,
            base_url=self.base_url,
        )

    @property
    def responses_url(self) -> str:
        return f"{self.base_url}/responses"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def build_request(self, query: str, stream: bool = False) -> XAIRequest:
        """Build a single-turn request with the x_search tool enabled."""
        return XAIRequest(
            model=self.model,
            input=[XAIMessage(role="user", content=query)],
            tools=[XAITool(type="x_search")],
            stream=True if stream else None,
        )

    async def search(self, query: str) -> XAISearchResult:
        """
        Perform an X search and return the full answer.

        Raises:
            XAIAPIError: Non-2xx response
            NoMessageContentError: No message item in the output
            NoTextContentError: Message item without output_text
            XAIResponseParseError: Body is not a valid Responses payload
            XAIError: Network failure
        """
        request = self.build_request(query)

        with TimedLogger(logger, "xai_search", model=self.model, streaming=False):
            try:
                response = await self._http.post(
                    self.responses_url,
                    headers=self._headers(),
                    json=request.model_dump(exclude_none=True),
                )
            except httpx.HTTPError as e:
                logger.error(event="xai_request_failed", error=str(e), error_type=type(e).__name__)
                raise XAIError(f"XAI request failed: {e}") from e

            if not response.is_success:
                logger.error(event="xai_api_error", status_code=response.status_code)
                raise XAIAPIError(response.status_code, response.text)

            try:
                data = response.json()
            except ValueError as e:
                raise XAIResponseParseError(f"Invalid JSON in XAI response: {e}") from e

            return self.parse_response(data)

    @staticmethod
    def parse_response(data: Any) -> XAISearchResult:
        """Extract text and citations from a Responses API body."""
        if not isinstance(data, dict):
            raise XAIResponseParseError("XAI response is not a JSON object")

        try:
            parsed = XAIResponse.model_validate(data)
        except ValidationError as e:
            raise XAIResponseParseError(f"Malformed XAI response: {e}") from e

        message = find_message(parsed.output)
        if message is None:
            raise NoMessageContentError()

        text_content = find_text(message)
        if text_content is None:
            raise NoTextContentError()

        try:
            citations = [
                XAICitation.model_validate(annotation)
                for annotation in text_content.get("annotations") or []
            ]
        except ValidationError as e:
            raise XAIResponseParseError(f"Malformed citation in XAI response: {e}") from e

        return XAISearchResult(
            id=parsed.id,
            text=text_content.get("text") or "",
            citations=citations,
        )

    async def search_stream(self, query: str) -> AsyncIterator[str]:
        """
        Perform a streaming X search, yielding text fragments as they arrive.

        The connection is released when the stream ends, when [DONE] is
        received, on error, or when the caller stops iterating and closes
        the generator.
        """
        request = self.build_request(query, stream=True)
        fragments = 0
        receiving = False

        logger.info(event="xai_stream_started", model=self.model)

        try:
            async with self._http.stream(
                "POST",
                self.responses_url,
                headers=self._headers(),
                json=request.model_dump(exclude_none=True),
            ) as response:
                if not response.is_success:
                    body = await response.aread()
                    logger.error(event="xai_api_error", status_code=response.status_code)
                    raise XAIAPIError(
                        response.status_code, body.decode("utf-8", errors="replace")
                    )

                receiving = True
                async with aclosing(iter_text_fragments(response.aiter_bytes())) as stream:
                    async for fragment in stream:
                        fragments += 1
                        yield fragment

        except httpx.HTTPError as e:
            logger.error(
                event="xai_stream_failed",
                error=str(e),
                error_type=type(e).__name__,
                fragments=fragments,
            )
            if receiving:
                raise XAIStreamError(f"XAI stream interrupted: {e}") from e
            raise XAIError(f"XAI request failed: {e}") from e

        logger.info(event="xai_stream_complete", fragments=fragments)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "XAIClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
