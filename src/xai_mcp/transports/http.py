"""
HTTP transport using FastAPI.

Stateless: one JSON-RPC request per POST /mcp, one JSON-RPC response back.
Requests share nothing but the read-only server and client configuration.
"""

import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from xai_mcp import SERVER_NAME, SERVER_VERSION
from xai_mcp.common.logging import get_logger
from xai_mcp.mcp.jsonrpc import PARSE_ERROR, JSONRPCHandler
from xai_mcp.mcp.server import MCPServer

logger = get_logger(__name__)


def create_http_app(server: MCPServer) -> FastAPI:
    """Create the FastAPI app exposing the MCP endpoint."""
    app = FastAPI(title="XAI MCP Server", version=SERVER_VERSION)
    started_at = time.monotonic()

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            event="http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "uptime": round(time.monotonic() - started_at, 3),
        }

    @app.get("/")
    async def root():
        """Server metadata and endpoint directory."""
        return {
            "name": "XAI MCP Server",
            "version": SERVER_VERSION,
            "description": "Model Context Protocol server for XAI x_search tool",
            "endpoints": {
                "health": "/health",
                "mcp": "/mcp (POST)",
            },
        }

    @app.post("/mcp")
    async def handle_jsonrpc(request: Request) -> JSONResponse:
        """Main JSON-RPC endpoint for the MCP protocol."""
        try:
            body = await request.json()
        except ValueError as e:
            logger.warning(event="http_parse_error", error=str(e))
            error_response = JSONRPCHandler.create_error_response(
                None, PARSE_ERROR, "Parse error", str(e)
            )
            return JSONResponse(content=JSONRPCHandler.to_wire(error_response), status_code=500)

        if isinstance(body, dict):
            logger.debug(event="mcp_http_request", method=body.get("method"), id=body.get("id"))

        response = await server.handle(body)
        return JSONResponse(content=JSONRPCHandler.to_wire(response))

    return app


class HttpTransport:
    """Serves the MCP app with uvicorn."""

    def __init__(self, server: MCPServer, host: str = "127.0.0.1", port: int = 3000):
        self.server = server
        self.host = host
        self.port = port
        self.app = create_http_app(server)

    async def serve(self) -> None:
        """Run uvicorn until shutdown."""
        logger.info(
            event="http_transport_started",
            host=self.host,
            port=self.port,
            mcp_endpoint=f"http://{self.host}:{self.port}/mcp",
            health_endpoint=f"http://{self.host}:{self.port}/health",
        )

        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_config=None,  # Use our custom logging setup
            access_log=False,
        )
        await uvicorn.Server(config).serve()
