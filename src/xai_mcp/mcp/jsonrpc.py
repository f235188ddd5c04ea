"""
JSON-RPC 2.0 Protocol Implementation for MCP

This module implements the JSON-RPC 2.0 message format required by the
Model Context Protocol specification. All MCP messages must be wrapped
in JSON-RPC envelopes.

Reference: https://www.jsonrpc.org/specification
MCP Spec: https://spec.modelcontextprotocol.io/specification/2024-11-05/basic/
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

# JSON-RPC version constant
JSONRPC_VERSION = "2.0"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = Union[StrictStr, StrictInt, StrictFloat]


class MCPError(Exception):
    """Exception carrying a JSON-RPC error code."""

    code = INTERNAL_ERROR

    def __init__(self, message: str, data: Optional[Any] = None, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.data = data
        if code is not None:
            self.code = code


class InvalidParamsError(MCPError):
    """Request params are missing or malformed."""

    code = INVALID_PARAMS


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request message. A missing id marks a notification."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: Optional[RequestId] = None
    method: StrictStr
    params: Optional[Any] = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response message (success)."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: Optional[RequestId] = None
    result: Any


class JSONRPCErrorResponse(BaseModel):
    """JSON-RPC 2.0 response message (error)."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: Optional[RequestId] = None
    error: JSONRPCError


AnyResponse = Union[JSONRPCResponse, JSONRPCErrorResponse]


class MCPMethods:
    """Standard MCP method names."""

    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    PING = "ping"

    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"


class MCPImplementation(BaseModel):
    """MCP implementation info."""

    name: str
    version: str


class MCPCapabilities(BaseModel):
    """MCP server capabilities."""

    tools: Dict[str, Any] = Field(default_factory=dict)


class MCPInitializeResult(BaseModel):
    """Result for initialize response."""

    protocolVersion: str
    capabilities: MCPCapabilities
    serverInfo: MCPImplementation


class MCPToolDescriptor(BaseModel):
    """Tool entry advertised by tools/list."""

    name: str
    description: str
    inputSchema: Dict[str, Any]


class MCPToolsListResult(BaseModel):
    """Result for tools/list response."""

    tools: List[MCPToolDescriptor]


class MCPToolsCallParams(BaseModel):
    """Parameters for tools/call request."""

    name: StrictStr
    arguments: Optional[Dict[str, Any]] = None


class MCPContentTypes:
    """Standard MCP content types."""

    TEXT = "text"


class MCPContent(BaseModel):
    """One item of a tool result."""

    type: str = MCPContentTypes.TEXT
    text: Optional[str] = None
    data: Optional[Any] = None


class MCPToolsCallResult(BaseModel):
    """Result for tools/call response."""

    content: List[MCPContent] = Field(min_length=1)
    isError: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "MCPToolsCallResult":
        """Build a single text item result."""
        return cls(content=[MCPContent(text=text)], isError=is_error)


class JSONRPCHandler:
    """Handler for JSON-RPC message construction and serialization."""

    @staticmethod
    def create_request(
        id: Optional[Union[str, int, float]], method: str, params: Optional[Any] = None
    ) -> JSONRPCRequest:
        """Create a JSON-RPC request."""
        return JSONRPCRequest(id=id, method=method, params=params)

    @staticmethod
    def create_response(id: Optional[Union[str, int, float]], result: Any) -> JSONRPCResponse:
        """Create a JSON-RPC success response."""
        return JSONRPCResponse(id=id, result=result)

    @staticmethod
    def create_error_response(
        id: Optional[Union[str, int, float]], code: int, message: str, data: Optional[Any] = None
    ) -> JSONRPCErrorResponse:
        """Create a JSON-RPC error response."""
        error = JSONRPCError(code=code, message=message, data=data)
        return JSONRPCErrorResponse(id=id, error=error)

    @staticmethod
    def recover_id(data: Any) -> Optional[Union[str, int, float]]:
        """Best-effort id extraction from an envelope that failed validation."""
        if isinstance(data, dict):
            request_id = data.get("id")
            if isinstance(request_id, (str, int, float)) and not isinstance(request_id, bool):
                return request_id
        return None

    @staticmethod
    def to_wire(response: AnyResponse) -> Dict[str, Any]:
        """
        Serialize a response for the wire.

        ``id`` is always present (null when unknown); ``error.data`` is
        omitted when empty.
        """
        payload = response.model_dump()
        error = payload.get("error")
        if error is not None and error.get("data") is None:
            error.pop("data", None)
        return payload
