"""
Model Context Protocol (MCP) implementation.

JSON-RPC envelope models, the tool registry and the request dispatcher
shared by every transport.
"""
