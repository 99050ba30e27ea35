"""JSON codec helpers for diagnostics and structured log output."""

from __future__ import annotations

import json
from typing import Any

import orjson


def dumps_bytes(
    payload: Any,
    *,
    pretty: bool = False,
    sort_keys: bool = False,
    compact: bool = True,
) -> bytes:
    """Serialize payload to UTF-8 JSON bytes."""
    if compact:
        options = 0
        if pretty:
            options |= orjson.OPT_INDENT_2
        if sort_keys:
            options |= orjson.OPT_SORT_KEYS
        return bytes(orjson.dumps(payload, option=options, default=str))
    text = json.dumps(
        payload,
        ensure_ascii=True,
        indent=2 if pretty else None,
        sort_keys=bool(sort_keys),
        default=str,
    )
    return text.encode("utf-8")


def dumps_text(
    payload: Any,
    *,
    pretty: bool = False,
    sort_keys: bool = False,
    compact: bool = True,
) -> str:
    return dumps_bytes(
        payload,
        pretty=pretty,
        sort_keys=sort_keys,
        compact=compact,
    ).decode("utf-8")


__all__ = ["dumps_bytes", "dumps_text"]
