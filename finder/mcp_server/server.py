"""MCP server entrypoint using official mcp.server.fastmcp."""

from collections.abc import Callable

from mcp.server.fastmcp import FastMCP

from finder.config import get_settings
from finder.mcp_server.tools.listing import register_listing_tools

ToolRegistrar = Callable[[FastMCP], None]
ToolRegistration = tuple[ToolRegistrar, tuple[str, ...]]

TOOL_REGISTRATIONS: tuple[ToolRegistration, ...] = (
    (register_listing_tools, ("recent_listings", "get_listing", "list_neighborhoods")),
)

VALID_MCP_TOOL_NAMES = frozenset(
    tool_name for _, tool_names in TOOL_REGISTRATIONS for tool_name in tool_names
)


def create_mcp_server(enabled_tools: list[str] | None = None) -> FastMCP:
    """Build the server, keeping only allowlisted tools when a list is configured."""

    server = FastMCP("the-finder", json_response=True)
    for register_tools, _ in TOOL_REGISTRATIONS:
        register_tools(server)

    configured = (
        get_settings().mcp_enabled_tools if enabled_tools is None else enabled_tools
    )
    allowlist = {name.strip().lower() for name in configured if name.strip()}
    if not allowlist:
        return server

    invalid_tools = sorted(allowlist - VALID_MCP_TOOL_NAMES)
    if invalid_tools:
        raise ValueError(
            f"Invalid MCP_ENABLED_TOOLS entries: {', '.join(invalid_tools)}. "
            f"Valid values are: {', '.join(sorted(VALID_MCP_TOOL_NAMES))}"
        )

    for tool_name in sorted(VALID_MCP_TOOL_NAMES - allowlist):
        server.remove_tool(tool_name)
    return server


def main() -> None:
    """Run MCP server via stdio transport."""

    create_mcp_server().run()


if __name__ == "__main__":
    main()
