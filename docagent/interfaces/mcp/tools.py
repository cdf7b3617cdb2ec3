"""
MCP Tools - Tool registry exposed by the DocAgent MCP server.

Each tool call answers with a content list of text parts and an isError
flag; failures are reported in the payload, never raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from docagent.config import get_settings
from docagent.domains.extraction import AIProvider, ExtractionConfig, extract_document

logger = logging.getLogger(__name__)

__all__ = ["McpTool", "TOOLS", "SEARCH_NOT_IMPLEMENTED", "tools_list", "tools_call"]

SEARCH_NOT_IMPLEMENTED = "Search functionality not yet implemented"


@dataclass(frozen=True)
class McpTool:
    name: str
    description: str
    input_schema: dict


TOOLS: tuple[McpTool, ...] = (
    McpTool(
        name="extract_document",
        description="Extract structured data from invoice, receipt, or bank statement",
        input_schema={
            "type": "object",
            "properties": {
                "filepath": {"type": "string", "description": "Path to the document file"},
                "provider": {
                    "type": "string",
                    "enum": [p.value for p in AIProvider],
                    "default": AIProvider.GEMINI.value,
                    "description": "AI provider to use",
                },
                "model": {"type": "string", "description": "Model name override"},
            },
            "required": ["filepath"],
        },
    ),
    McpTool(
        name="search_documents",
        description="Search indexed documents using natural language",
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query in natural language"},
                "limit": {
                    "type": "number",
                    "default": 10,
                    "description": "Maximum number of results",
                },
            },
            "required": ["query"],
        },
    ),
)


def tools_list() -> dict[str, Any]:
    return {
        "tools": [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_schema,
            }
            for tool in TOOLS
        ]
    }


def _text_result(text: str, is_error: bool = False) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


async def _extract_document(arguments: dict[str, Any]) -> dict[str, Any]:
    filepath = arguments.get("filepath")
    if not isinstance(filepath, str) or not filepath:
        return _text_result("Error: filepath is required", is_error=True)

    provider = arguments.get("provider") or AIProvider.GEMINI.value
    model = arguments.get("model")

    try:
        overrides: dict[str, Any] = {"ai_provider": provider}
        if model:
            model_field = "gemini_model" if provider == AIProvider.GEMINI.value else "ollama_model"
            overrides[model_field] = model
        config = ExtractionConfig.from_settings(get_settings(), **overrides)
        document = await extract_document(filepath, config)
    except Exception as e:
        logger.warning("extract_document failed for %s: %s", filepath, e)
        return _text_result(f"Error: {e}", is_error=True)

    return _text_result(json.dumps(document.to_record(), indent=2))


async def _search_documents(arguments: dict[str, Any]) -> dict[str, Any]:
    return _text_result(SEARCH_NOT_IMPLEMENTED)


_HANDLERS = {
    "extract_document": _extract_document,
    "search_documents": _search_documents,
}


async def tools_call(name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Run a tool by name.

    Args:
        name: Registered tool name
        arguments: Tool input matching the tool's input schema

    Returns:
        {"content": [{"type": "text", "text": ...}], "isError": bool}
    """
    handler = _HANDLERS.get(name)
    if handler is None:
        return _text_result(f"Error: Unknown tool: {name}", is_error=True)
    return await handler(arguments or {})
