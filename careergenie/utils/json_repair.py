# -----------------------------------------------------------------------------
# careergenie/utils/json_repair.py — Lenient parsing of model-written JSON
# -----------------------------------------------------------------------------
# Ladder: strict parse -> escape control chars inside string values ->
# salvage the outermost [...] or {...} block -> JSONRepairError.
# -----------------------------------------------------------------------------

import json
import re
from typing import Any

PARSE_ERROR = "Could not parse JSON response"

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)
_STRING_VALUE_RE = re.compile(r': "([^"]*?)"', re.DOTALL)


class JSONRepairError(ValueError):
    def __init__(self, message: str = PARSE_ERROR) -> None:
        super().__init__(message)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def escape_string_values(text: str) -> str:
    def _fix(match: re.Match) -> str:
        content = match.group(1).replace("\r", "\\r").replace("\n", "\\n").replace("\t", " ")
        return f': "{content}"'

    return _STRING_VALUE_RE.sub(_fix, text)


def extract_json_block(text: str) -> str | None:
    """Return the widest bracketed span, starting at whichever of ``[`` / ``{`` comes first."""
    spans = []
    for opener, closer in (("[", "]"), ("{", "}")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            spans.append((start, end))
    if not spans:
        return None
    start, end = min(spans)
    return text[start : end + 1]


def _try_loads(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except ValueError:
        return False, None


def parse_lenient_json(text: str) -> Any:
    cleaned = strip_code_fences(text or "")

    ok, value = _try_loads(cleaned)
    if ok:
        return value

    repaired = escape_string_values(cleaned)
    ok, value = _try_loads(repaired)
    if ok:
        return value

    block = extract_json_block(repaired)
    if block is not None:
        ok, value = _try_loads(block)
        if ok:
            return value

    raise JSONRepairError()
