"""
MCP tools exposed by this server.
"""

from .x_search import XSearchTool

__all__ = ["XSearchTool"]
