"""
Main application entry point for the XAI MCP server.

Serves MCP over stdio or HTTP, or runs a one-off search from the terminal.
"""

# Standard library imports
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Third-party imports
import httpx
from dotenv import load_dotenv

# Local imports
from xai_mcp import SERVER_NAME, SERVER_VERSION
from xai_mcp.common.config import Config, ConfigurationError, load_config, validate_config
from xai_mcp.common.logging import get_logger, setup_logging
from xai_mcp.mcp.server import MCPServer
from xai_mcp.mcp.tool_registry import ToolRegistry
from xai_mcp.tools.x_search import XSearchTool, format_citations
from xai_mcp.transports.base import Transport
from xai_mcp.transports.http import HttpTransport
from xai_mcp.transports.stdio import StdioTransport
from xai_mcp.xai.client import XAIClient
from xai_mcp.xai.errors import XAIError

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME, description="XAI MCP Server - Search X (Twitter) using Grok"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {SERVER_VERSION}")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="http",
        help="Transport type (default: http)",
    )
    parser.add_argument("--host", type=str, help="Override the host for HTTP transport")
    parser.add_argument("--port", type=int, help="Override the port for HTTP transport")
    parser.add_argument("--config", type=str, help="Path to config.yaml")

    subparsers = parser.add_subparsers(dest="command")
    search_parser = subparsers.add_parser("search", help="Run a single X search and exit")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument(
        "--stream", action="store_true", help="Print fragments as they arrive"
    )

    return parser.parse_args(argv)


def build_server(client: XAIClient) -> MCPServer:
    """Create the MCP server with every tool registered."""
    registry = ToolRegistry()
    registry.register_handler(XSearchTool(client))
    return MCPServer(registry)


def build_transport(server: MCPServer, config: Config, args: argparse.Namespace) -> Transport:
    if args.transport == "stdio":
        return StdioTransport(server)
    return HttpTransport(
        server,
        host=args.host or config.http.host,
        port=args.port if args.port is not None else config.http.port,
    )


async def run_server(config: Config, args: argparse.Namespace) -> None:
    """Serve MCP until the transport session ends."""
    async with XAIClient(config.xai) as client:
        server = build_server(client)
        transport = build_transport(server, config, args)

        logger.info(
            event="application_starting",
            server=SERVER_NAME,
            version=SERVER_VERSION,
            transport=args.transport,
            model=config.xai.model,
        )
        await transport.serve()


async def run_search(
    config: Config,
    query: str,
    stream: bool,
    http_client: Optional[httpx.AsyncClient] = None,
) -> None:
    """Print a single search result to stdout."""
    async with XAIClient(config.xai, http_client=http_client) as client:
        if stream:
            async for fragment in client.search_stream(query):
                print(fragment, end="", flush=True)
            print()
            return

        result = await client.search(query)
        print(result.text)
        citation_text = format_citations(result.citations)
        if citation_text:
            print()
            print(citation_text)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    # Load environment variables from .env file
    load_dotenv()

    try:
        config = load_config(Path(args.config) if args.config else None)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    # stdout is reserved for protocol frames and search output
    setup_logging(config, stream=sys.stderr)

    try:
        validate_config(config)
    except ConfigurationError as e:
        logger.critical(event="startup_failed", reason=str(e))
        sys.exit(1)

    try:
        if args.command == "search":
            asyncio.run(run_search(config, args.query, args.stream))
        else:
            asyncio.run(run_server(config, args))
    except KeyboardInterrupt:
        logger.info(event="application_shutdown", reason="Keyboard interrupt")
    except XAIError as e:
        logger.error(event="search_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    main()
