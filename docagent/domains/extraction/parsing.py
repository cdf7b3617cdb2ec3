"""
Response parsing - Recover a JSON object from model text output.
"""

from __future__ import annotations

import json
import re
from typing import Any

from docagent.config import ResponseParseError

__all__ = ["strip_code_fences", "parse_json_response"]

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model wraps around JSON."""
    return _CODE_FENCE.sub("", text)


def parse_json_response(text: str) -> Any:
    """
    Parse model output as JSON.

    Tries the trimmed text verbatim, then the span from the first "{" to the
    last "}".

    Raises:
        ResponseParseError: Neither attempt produced valid JSON
    """
    try:
        return json.loads(text.strip())
    except ValueError:
        pass

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except ValueError:
            pass

    raise ResponseParseError(text)
