"""
Tests for SSE framing of streamed XAI responses.
"""

from typing import AsyncIterator, List

import pytest

from xai_mcp.xai.sse import SSELineBuffer, extract_text, iter_text_fragments, parse_data_line

HI_FRAMES = (
    b'data: {"output":[{"type":"message","content":[{"type":"output_text","text":"Hi"}]}]}\n\n'
    b"data: [DONE]\n\n"
)


async def byte_chunks(*chunks: bytes) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


async def collect(*chunks: bytes) -> List[str]:
    return [fragment async for fragment in iter_text_fragments(byte_chunks(*chunks))]


def text_frame(text: str) -> bytes:
    return (
        'data: {"output":[{"type":"message","content":[{"type":"output_text","text":"'
        + text
        + '"}]}]}\n\n'
    ).encode("utf-8")


class TestIterTextFragments:
    """Test fragment extraction from a byte stream."""

    @pytest.mark.asyncio
    async def test_single_fragment_then_done(self):
        assert await collect(HI_FRAMES) == ["Hi"]

    @pytest.mark.asyncio
    async def test_frames_split_across_reads(self):
        split_at = [5, 17, 40, 70]
        pieces = []
        start = 0
        for end in split_at:
            pieces.append(HI_FRAMES[start:end])
            start = end
        pieces.append(HI_FRAMES[start:])

        assert await collect(*pieces) == ["Hi"]

    @pytest.mark.asyncio
    async def test_multibyte_character_split_across_reads(self):
        frame = text_frame("café")
        cut = frame.index("é".encode("utf-8")) + 1

        assert await collect(frame[:cut], frame[cut:]) == ["café"]

    @pytest.mark.asyncio
    async def test_malformed_chunk_is_skipped(self):
        fragments = await collect(
            text_frame("one"),
            b"data: {not json\n\n",
            text_frame("two"),
            b"data: [DONE]\n\n",
        )

        assert fragments == ["one", "two"]

    @pytest.mark.asyncio
    async def test_non_data_lines_ignored(self):
        fragments = await collect(
            b": keep-alive\n",
            b"event: response.output_text.delta\n",
            b"id: 7\n",
            text_frame("x"),
        )

        assert fragments == ["x"]

    @pytest.mark.asyncio
    async def test_done_stops_before_later_frames(self):
        fragments = await collect(text_frame("a"), b"data: [DONE]\n\n", text_frame("b"))

        assert fragments == ["a"]

    @pytest.mark.asyncio
    async def test_stream_end_without_done(self):
        assert await collect(text_frame("a"), text_frame("b")) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_incomplete_trailing_line_not_emitted(self):
        frame = text_frame("tail").rstrip(b"\n")

        assert await collect(text_frame("a"), frame) == ["a"]

    @pytest.mark.asyncio
    async def test_crlf_line_endings(self):
        frame = text_frame("crlf").replace(b"\n\n", b"\r\n\r\n")

        assert await collect(frame, b"data: [DONE]\r\n") == ["crlf"]

    @pytest.mark.asyncio
    async def test_empty_text_not_yielded(self):
        assert await collect(text_frame(""), text_frame("z")) == ["z"]


class TestHelpers:
    def test_line_buffer_holds_back_partial_line(self):
        buffer = SSELineBuffer()

        assert buffer.feed(b"data: a\nda") == ["data: a"]
        assert buffer.pending == "da"
        assert buffer.feed(b"ta: b\n\n") == ["data: b", ""]
        assert buffer.pending == ""

    def test_parse_data_line(self):
        assert parse_data_line("data: [DONE]") == "[DONE]"
        assert parse_data_line("data: {}  ") == "{}"
        assert parse_data_line("event: message") is None
        assert parse_data_line("data:{}") is None

    def test_extract_text_ignores_other_shapes(self):
        assert extract_text("[]") is None
        assert extract_text('{"output": []}') is None
        assert extract_text('{"output": [{"type": "x_search_call"}]}') is None
        assert extract_text('{"output": [{"type": "message", "content": []}]}') is None
        assert extract_text('{"type": "response.created"}') is None
        assert extract_text("{not json") is None
