"""
MCP Interface - Model Context Protocol server for DocAgent.

Exposes document extraction as tools to MCP clients over stdio.
"""

from .server import create_server, serve
from .tools import TOOLS, tools_call, tools_list

__all__ = ["create_server", "serve", "TOOLS", "tools_call", "tools_list"]
