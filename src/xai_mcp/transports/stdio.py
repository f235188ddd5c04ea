"""
Standard I/O Transport for MCP

Lets an MCP host spawn this server as a subprocess and exchange
newline-delimited JSON-RPC frames over stdin/stdout. Logging must go to
stderr; stdout carries protocol frames only.

Reference: https://modelcontextprotocol.io/specification/2024-11-05/basic/transports
"""

import asyncio
import json
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional, TextIO, Union

from xai_mcp.common.logging import get_logger
from xai_mcp.mcp.jsonrpc import PARSE_ERROR, JSONRPCHandler
from xai_mcp.mcp.server import MCPServer

logger = get_logger(__name__)


def is_notification(data: Any) -> bool:
    """A well-formed request without an id expects no reply."""
    return isinstance(data, dict) and isinstance(data.get("method"), str) and "id" not in data


class StdioTransport:
    """
    Standard I/O transport for MCP communication.

    One long-lived session: each input line is a complete request, each
    output line a complete response.
    """

    def __init__(
        self,
        server: MCPServer,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        """Initialize stdio transport."""
        self.server = server
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="stdio")
        self.running = False

    async def serve(self) -> None:
        """Read frames until EOF or stop()."""
        if self.running:
            return

        self.running = True
        logger.info(event="stdio_transport_started", message="MCP server ready on stdio")
        loop = asyncio.get_running_loop()
        # Read raw bytes; handle_frame decodes each line on its own
        reader = getattr(self.stdin, "buffer", self.stdin)

        try:
            while self.running:
                # Blocking readline runs off the event loop
                try:
                    line = await loop.run_in_executor(self.executor, reader.readline)
                except OSError as e:
                    logger.error(event="stdin_read_error", error=str(e))
                    break

                if not line:
                    logger.info(event="stdio_eof", message="Received EOF, shutting down")
                    break

                line = line.strip()
                if not line:
                    continue

                await self.handle_frame(line)
        finally:
            self.running = False
            self.executor.shutdown(wait=False, cancel_futures=True)
            logger.info(event="stdio_transport_stopped")

    def stop(self) -> None:
        """Stop after the current frame."""
        self.running = False

    async def handle_frame(self, frame: Union[str, bytes]) -> Optional[Dict[str, Any]]:
        """
        Handle one JSON-RPC frame and write the reply.

        Raw frames must be UTF-8; anything undecodable is a Parse Error.
        Returns the payload written, or None when the frame was a
        notification.
        """
        try:
            if isinstance(frame, bytes):
                frame = frame.decode("utf-8")
            data = json.loads(frame)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(event="stdio_parse_error", error=str(e))
            error_response = JSONRPCHandler.create_error_response(
                None, PARSE_ERROR, "Parse error", str(e)
            )
            payload = JSONRPCHandler.to_wire(error_response)
            await self._write_stdout(payload)
            return payload

        response = await self.server.handle(data)

        if is_notification(data):
            logger.debug(event="stdio_notification_handled", method=data["method"])
            return None

        payload = JSONRPCHandler.to_wire(response)
        await self._write_stdout(payload)
        return payload

    async def _write_stdout(self, data: Dict[str, Any]) -> None:
        """Write one compact JSON frame to stdout."""
        message = json.dumps(data, separators=(",", ":"))

        def write() -> None:
            self.stdout.write(message + "\n")
            self.stdout.flush()

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self.executor, write)
