"""
MCP JSON-RPC dispatcher.

Routes JSON-RPC requests to method handlers and converts every failure
into a JSON-RPC error response. ``handle`` never raises, and holds no
per-call state, so concurrent calls do not interact.
"""

from typing import Any, Awaitable, Callable, Dict

from pydantic import ValidationError

from xai_mcp import SERVER_NAME, SERVER_VERSION
from xai_mcp.common.logging import TimedLogger, get_logger
from xai_mcp.mcp.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    AnyResponse,
    InvalidParamsError,
    JSONRPCHandler,
    JSONRPCRequest,
    MCPCapabilities,
    MCPError,
    MCPImplementation,
    MCPInitializeResult,
    MCPMethods,
    MCPToolsCallParams,
    MCPToolsListResult,
)
from xai_mcp.mcp.tool_registry import ToolRegistry

logger = get_logger(__name__)

# MCP Protocol version
MCP_PROTOCOL_VERSION = "2024-11-05"

MethodHandler = Callable[[Any], Awaitable[Any]]


class MCPServer:
    """
    MCP server core.

    Implements initialize, ping, tools/list and tools/call over a
    ToolRegistry. Transports feed it decoded JSON and serialize what it
    returns.
    """

    def __init__(self, tool_registry: ToolRegistry):
        """Initialize the dispatcher with its tool registry."""
        self.tool_registry = tool_registry
        self.capabilities = MCPCapabilities(tools={})
        self.server_info = MCPImplementation(name=SERVER_NAME, version=SERVER_VERSION)

        self._methods: Dict[str, MethodHandler] = {
            MCPMethods.INITIALIZE: self._handle_initialize,
            MCPMethods.INITIALIZED: self._handle_initialized,
            MCPMethods.PING: self._handle_ping,
            MCPMethods.TOOLS_LIST: self._handle_tools_list,
            MCPMethods.TOOLS_CALL: self._handle_tools_call,
        }

    async def handle(self, message: Any) -> AnyResponse:
        """
        Handle one JSON-RPC request.

        Args:
            message: A JSONRPCRequest, or the decoded JSON body of one

        Returns:
            Success or error response carrying the request id
        """
        request = self._coerce_request(message)
        if not isinstance(request, JSONRPCRequest):
            return request

        handler = self._methods.get(request.method)
        if handler is None:
            logger.warning(event="method_not_found", method=request.method, id=request.id)
            return JSONRPCHandler.create_error_response(
                request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
            )

        logger.debug(event="jsonrpc_request", method=request.method, id=request.id)

        try:
            result = await handler(request.params)
        except MCPError as e:
            logger.warning(
                event="request_rejected", method=request.method, code=e.code, error=e.message
            )
            return JSONRPCHandler.create_error_response(request.id, e.code, e.message, e.data)
        except Exception as e:
            logger.error(
                event="request_handler_error",
                method=request.method,
                error=str(e),
                error_type=type(e).__name__,
            )
            return JSONRPCHandler.create_error_response(
                request.id, INTERNAL_ERROR, str(e) or "Internal error"
            )

        return JSONRPCHandler.create_response(request.id, result)

    def _coerce_request(self, message: Any) -> JSONRPCRequest | AnyResponse:
        if isinstance(message, JSONRPCRequest):
            return message

        try:
            return JSONRPCRequest.model_validate(message)
        except ValidationError as e:
            details = [
                f"{'.'.join(str(part) for part in err['loc']) or 'request'}: {err['msg']}"
                for err in e.errors()
            ]
            logger.warning(event="invalid_request", errors=details)
            return JSONRPCHandler.create_error_response(
                JSONRPCHandler.recover_id(message), INVALID_REQUEST, "Invalid Request", details
            )

    async def _handle_initialize(self, params: Any) -> Dict[str, Any]:
        """Handle initialize. Any client protocol version is accepted."""
        if isinstance(params, dict):
            client_version = params.get("protocolVersion")
            if client_version and client_version != MCP_PROTOCOL_VERSION:
                logger.info(
                    event="protocol_version_mismatch",
                    client_version=client_version,
                    server_version=MCP_PROTOCOL_VERSION,
                )
            logger.info(event="client_initialized", client_info=params.get("clientInfo"))

        result = MCPInitializeResult(
            protocolVersion=MCP_PROTOCOL_VERSION,
            capabilities=self.capabilities,
            serverInfo=self.server_info,
        )
        return result.model_dump()

    async def _handle_initialized(self, params: Any) -> Dict[str, Any]:
        logger.info(event="client_ready")
        return {}

    async def _handle_ping(self, params: Any) -> Dict[str, Any]:
        return {}

    async def _handle_tools_list(self, params: Any) -> Dict[str, Any]:
        """Handle tools/list. The tool set is static, so no pagination."""
        result = MCPToolsListResult(tools=self.tool_registry.list_descriptors())
        return result.model_dump()

    async def _handle_tools_call(self, params: Any) -> Dict[str, Any]:
        """Handle tools/call by delegating to the registered tool handler."""
        try:
            call = MCPToolsCallParams.model_validate(params)
        except ValidationError as e:
            raise InvalidParamsError(
                "tools/call requires a string 'name' and an optional 'arguments' object",
                data=[err["msg"] for err in e.errors()],
            ) from e

        handler = self.tool_registry.get_handler(call.name)
        if handler is None:
            raise InvalidParamsError(
                f"Unknown tool: {call.name}", data={"available": self.tool_registry.names()}
            )

        with TimedLogger(logger, "tool_call", tool_name=call.name):
            result = await handler.execute(call.arguments or {})

        if result.isError:
            logger.warning(event="tool_execution_failed", tool_name=call.name)

        return result.model_dump(exclude_none=True)
