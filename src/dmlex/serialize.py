"""JSON-friendly token serialization, for golden files and tooling."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from dmlex.tokens import Position, Token


def serialize_position(pos: Position) -> list[Any]:
    return [pos.unit, pos.line, pos.column]


def serialize_token(token: Token) -> dict[str, Any]:
    """Return a plain dict: ``type`` name, ``value`` and ``span`` (or None)."""
    span = None
    if token.span is not None:
        span = [serialize_position(token.span.start), serialize_position(token.span.end)]
    return {"type": token.type.name, "value": token.value, "span": span}


def serialize_tokens(tokens: Iterable[Token]) -> list[dict[str, Any]]:
    return [serialize_token(t) for t in tokens]


def dumps(tokens: Iterable[Token], indent: int | None = None) -> str:
    return json.dumps(serialize_tokens(tokens), indent=indent)
