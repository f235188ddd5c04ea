"""
Transports that drive the MCP server: stdio and HTTP.
"""

from .base import Transport
from .http import HttpTransport, create_http_app
from .stdio import StdioTransport

__all__ = ["Transport", "HttpTransport", "StdioTransport", "create_http_app"]
