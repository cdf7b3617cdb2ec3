"""
Tests for the MCP server wiring.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import mcp.types as types

from .server import create_server
from .tools import SEARCH_NOT_IMPLEMENTED

TOOLS = "docagent.interfaces.mcp.tools"


async def test_server_lists_registered_tools() -> None:
    server = create_server()

    result = await server.request_handlers[types.ListToolsRequest](
        types.ListToolsRequest(method="tools/list")
    )

    names = [tool.name for tool in result.root.tools]
    assert names == ["extract_document", "search_documents"]


async def test_server_call_returns_text_content() -> None:
    server = create_server()

    result = await server.request_handlers[types.CallToolRequest](
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="search_documents", arguments={"query": "x"}),
        )
    )

    assert result.root.isError is False
    assert result.root.content[0].text == SEARCH_NOT_IMPLEMENTED


async def test_server_call_failure_sets_is_error() -> None:
    server = create_server()
    failing = AsyncMock(side_effect=FileNotFoundError("no such file: /tmp/missing.pdf"))

    with patch(f"{TOOLS}.extract_document", failing):
        result = await server.request_handlers[types.CallToolRequest](
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(
                    name="extract_document",
                    arguments={"filepath": "/tmp/missing.pdf", "provider": "gemini"},
                ),
            )
        )

    assert result.root.isError is True
    assert "no such file: /tmp/missing.pdf" in result.root.content[0].text
