"""
XAI MCP Server.

Exposes XAI's x_search capability to MCP hosts over stdio or HTTP.
"""

SERVER_NAME = "xai-mcp-server"
SERVER_VERSION = "0.1.0"
