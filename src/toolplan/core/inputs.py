"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Input normalization applied before an invocation reaches its tool.

Models sometimes HTML-escape argument text or stringify structured fields.
Entities are decoded everywhere; stringified JSON is parsed only for an
allow-list of field names so file contents and code snippets that merely
look like JSON are left untouched.
"""

from __future__ import annotations

import html
import json
from typing import Any, Iterable

from ..config import DEFAULT_JSON_FIELDS
from ..logging import get_logger

logger = get_logger(name=__name__)


def decode_html_entities(value: Any) -> Any:
    """Recursively unescape HTML entities in every string of `value`."""
    if isinstance(value, str):
        return html.unescape(value)
    if isinstance(value, list):
        return [decode_html_entities(v) for v in value]
    if isinstance(value, dict):
        return {k: decode_html_entities(v) for k, v in value.items()}
    return value


def _parse_container(text: str) -> list[Any] | dict[str, Any] | None:
    stripped = text.strip()
    if not stripped or stripped[0] not in "[{":
        return None
    try:
        parsed = json.loads(stripped)
    except ValueError:
        return None
    if isinstance(parsed, (list, dict)):
        return parsed
    return None


def coerce_json_fields(value: Any, json_fields: Iterable[str] = DEFAULT_JSON_FIELDS) -> Any:
    """
    Parse stringified JSON for allow-listed keys, at any depth.

    Invalid JSON keeps the original string.
    """
    fields = frozenset(json_fields)

    def _walk(node: Any) -> Any:
        if isinstance(node, list):
            return [_walk(v) for v in node]
        if not isinstance(node, dict):
            return node
        out: dict[str, Any] = {}
        for key, item in node.items():
            if key in fields and isinstance(item, str):
                parsed = _parse_container(item)
                if parsed is None:
                    if item.strip()[:1] in ("[", "{"):
                        logger.warning("json_field_parse_failed", field=key)
                    out[key] = item
                else:
                    out[key] = _walk(parsed)
            else:
                out[key] = _walk(item)
        return out

    return _walk(value)


def normalize_input(
    raw: Any,
    *,
    json_fields: Iterable[str] = DEFAULT_JSON_FIELDS,
    decode_html: bool = True,
) -> Any:
    """
    Return a normalized copy of `raw`; the original is never mutated.

    Steps: HTML entity decoding, then a whole-input JSON parse when the input
    is a string, then allow-listed field coercion.
    """
    value = decode_html_entities(raw) if decode_html else raw
    if isinstance(value, str):
        parsed = _parse_container(value)
        if parsed is None:
            return value
        value = parsed
    return coerce_json_fields(value, json_fields)
