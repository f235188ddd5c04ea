"""
Server-Sent Events framing for streamed XAI responses.

The stream is a sequence of ``data: <json>`` lines separated by blank
lines and terminated by ``data: [DONE]``. Bytes are decoded incrementally,
so multi-byte characters split across network reads are handled.
"""

import codecs
import json
from typing import AsyncIterable, AsyncIterator, List, Optional

from xai_mcp.common.logging import get_logger
from xai_mcp.xai.models import find_message, find_text

logger = get_logger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class SSELineBuffer:
    """Accumulates decoded text and hands back complete lines."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> List[str]:
        """Decode a chunk and return every line completed by it."""
        self._buffer += self._decoder.decode(chunk)
        lines = self._buffer.split("\n")
        # Last element is incomplete until the next newline arrives
        self._buffer = lines.pop()
        return lines

    @property
    def pending(self) -> str:
        return self._buffer


def parse_data_line(line: str) -> Optional[str]:
    """Return the payload of a ``data:`` line, or None for any other line."""
    if not line.startswith(DATA_PREFIX):
        return None
    return line[len(DATA_PREFIX) :].strip()


def extract_text(payload: str) -> Optional[str]:
    """
    Pull the output_text fragment out of one streamed JSON chunk.

    Returns None for malformed JSON or chunks without message text.
    """
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug(event="sse_chunk_skipped", reason="invalid_json", size=len(payload))
        return None

    if not isinstance(parsed, dict) or not parsed.get("output"):
        return None

    message = find_message(parsed["output"])
    if message is None:
        return None

    entry = find_text(message)
    if entry is None:
        return None

    text = entry.get("text")
    if isinstance(text, str) and text:
        return text
    return None


async def iter_text_fragments(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """
    Turn a raw SSE byte stream into text fragments.

    Stops at the ``[DONE]`` sentinel or when the byte stream ends.
    """
    buffer = SSELineBuffer()

    async for chunk in chunks:
        for line in buffer.feed(chunk):
            data = parse_data_line(line)
            if data is None:
                continue
            if data == DONE_SENTINEL:
                return

            text = extract_text(data)
            if text:
                yield text
