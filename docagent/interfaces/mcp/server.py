"""
MCP Server - Serves the DocAgent tools over stdio.

Usage:
    docagent mcp
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from docagent import __version__

from .tools import TOOLS, tools_call

logger = logging.getLogger(__name__)

__all__ = ["ToolCallError", "create_server", "serve"]

SERVER_NAME = "doc-agent"


class ToolCallError(Exception):
    """A tool reported a failure; the server turns it into an isError result."""


def create_server() -> Server:
    """Build a server with every registered tool."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
            for tool in TOOLS
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        result = await tools_call(name, arguments)
        texts = [part["text"] for part in result["content"]]
        if result["isError"]:
            raise ToolCallError("\n".join(texts))
        return [types.TextContent(type="text", text=text) for text in texts]

    return server


async def serve() -> None:
    """Run the server on stdin/stdout until the client disconnects."""
    server = create_server()
    async with stdio_server() as (read_stream, write_stream):
        logger.info("%s MCP server running on stdio", SERVER_NAME)
        await server.run(read_stream, write_stream, server.create_initialization_options())
