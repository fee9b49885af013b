"""MCP server implementation."""

from bim_bridge.mcp.server import BridgeServer, create_mcp_server

__all__ = ["BridgeServer", "create_mcp_server"]
