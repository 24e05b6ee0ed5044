"""Chatbot-facing MCP server."""
