"""
Tool Registry for the MCP server.

Holds tool definitions and their handlers, and renders definitions into
the descriptor format advertised by tools/list.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from xai_mcp.common.logging import get_logger
from xai_mcp.mcp.jsonrpc import MCPToolDescriptor, MCPToolsCallResult

logger = get_logger(__name__)


class ToolParameterType(str, Enum):
    """Standard parameter types for MCP tools."""

    STRING = "string"


class ToolParameter(BaseModel):
    """Standard MCP tool parameter definition."""

    name: str
    type: ToolParameterType
    description: str
    required: bool = False
    default: Optional[Any] = None
    enum: Optional[List[Any]] = None


class Tool(BaseModel):
    """Standard MCP tool definition."""

    name: str
    description: str
    parameters: List[ToolParameter] = Field(default_factory=list)

    def input_schema(self) -> Dict[str, Any]:
        """Convert tool parameters to JSON Schema format."""
        properties: Dict[str, Any] = {}
        required: List[str] = []

        for param in self.parameters:
            prop_schema: Dict[str, Any] = {
                "type": param.type.value,
                "description": param.description,
            }
            if param.enum:
                prop_schema["enum"] = param.enum
            if param.default is not None:
                prop_schema["default"] = param.default

            properties[param.name] = prop_schema
            if param.required:
                required.append(param.name)

        return {"type": "object", "properties": properties, "required": required}

    def descriptor(self) -> MCPToolDescriptor:
        return MCPToolDescriptor(
            name=self.name, description=self.description, inputSchema=self.input_schema()
        )


class ToolHandler(ABC):
    """Abstract base class for tool handlers."""

    @abstractmethod
    async def execute(self, arguments: Dict[str, Any]) -> MCPToolsCallResult:
        """
        Execute the tool with given arguments.

        Implementations report failures through ``isError`` rather than raising.
        """

    @abstractmethod
    def get_tool_definition(self) -> Tool:
        """Get the tool definition for this handler."""


class ToolRegistry:
    """Registry of tool handlers, ordered by registration."""

    def __init__(self) -> None:
        self.tools: Dict[str, Tool] = {}
        self.handlers: Dict[str, ToolHandler] = {}

    def register_handler(self, handler: ToolHandler) -> None:
        """Register a tool with its handler."""
        tool = handler.get_tool_definition()
        self.tools[tool.name] = tool
        self.handlers[tool.name] = handler

        logger.info(
            event="tool_registered",
            tool_name=tool.name,
            parameters_count=len(tool.parameters),
            handler_type=type(handler).__name__,
        )

    def list_descriptors(self) -> List[MCPToolDescriptor]:
        """Descriptors for every registered tool, in registration order."""
        return [tool.descriptor() for tool in self.tools.values()]

    def get_handler(self, tool_name: str) -> Optional[ToolHandler]:
        return self.handlers.get(tool_name)

    def names(self) -> List[str]:
        return list(self.tools.keys())
