from __future__ import annotations

from collections.abc import Iterator

import pytest
from mcp.server.fastmcp import FastMCP

from finder.config.settings import get_settings
from finder.mcp_server.server import create_mcp_server

ALL_TOOL_NAMES = {"get_listing", "list_neighborhoods", "recent_listings"}


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


async def _list_tool_names(mcp_server: FastMCP) -> set[str]:
    tools = await mcp_server.list_tools()
    return {tool.name for tool in tools}


@pytest.mark.anyio
@pytest.mark.parametrize("allowlist_value", [None, ""])
async def test_allowlist_off_registers_all_tools(
    monkeypatch: pytest.MonkeyPatch,
    allowlist_value: str | None,
) -> None:
    if allowlist_value is None:
        monkeypatch.delenv("MCP_ENABLED_TOOLS", raising=False)
    else:
        monkeypatch.setenv("MCP_ENABLED_TOOLS", allowlist_value)

    tool_names = await _list_tool_names(create_mcp_server())

    assert tool_names == ALL_TOOL_NAMES


@pytest.mark.anyio
async def test_allowlist_keeps_only_allowed_tools(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("MCP_ENABLED_TOOLS", "recent_listings, GET_LISTING")

    tool_names = await _list_tool_names(create_mcp_server())

    assert tool_names == {"recent_listings", "get_listing"}


def test_allowlist_rejects_unknown_tool() -> None:
    with pytest.raises(ValueError, match="search_rent"):
        create_mcp_server(enabled_tools=["search_rent"])
