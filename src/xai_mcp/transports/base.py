"""
Transport interface.

A transport receives frames, hands the decoded request to the MCP server,
and emits the serialized response. Stdio and HTTP differ only in their
session model.
"""

from typing import Protocol, runtime_checkable

from xai_mcp.mcp.server import MCPServer


@runtime_checkable
class Transport(Protocol):
    """Front-end that drives an MCPServer."""

    server: MCPServer

    async def serve(self) -> None:
        """Serve until the session ends."""
        ...
