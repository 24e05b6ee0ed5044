"""MCP tools package."""

from finder.mcp_server.tools.listing import register_listing_tools

__all__ = ["register_listing_tools"]
