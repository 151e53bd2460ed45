"""normalize.py — collapse a parser's hCard tree into a NormalizedCard.

Upstream parsers disagree on how a property is encoded. The flattener
recognises the shapes listed in `model.Shape` and reduces every one of them
to plain string leaves:

  "tel": [{"type": "tel", "value": "0201"}, ...]   → "tel": "0201"
  "tel": {"table": {"type": [...], "value": [...]}} → "tel": {"tel": ..., "fax": ...}
  "email": {"href": "mailto:x", "value": "x"}       → "email": "x"
  "url": ["http://a", "http://b"]                   → "url": "http://a"

Lists keep their first element only. Every string is HTML-unescaped once.
"""
from __future__ import annotations

import html
import json
from typing import Any, Iterator

from .errors import MalformedRecordError
from .model import NormalizedCard, RawRecord, Shape, classify


def unescape(text: str) -> str:
    return html.unescape(text)


# ── Object collapsing ──────────────────────────────────────────────────────────

def _zip_type_value(types: Any, values: Any, path: tuple[str, ...]) -> dict[str, Any]:
    if isinstance(types, list):
        if not all(isinstance(t, str) for t in types):
            raise MalformedRecordError(f"type labels must be strings, got {types!r}", path)
        if isinstance(values, list):
            if len(types) != len(values):
                raise MalformedRecordError(
                    f"{len(types)} type labels for {len(values)} values", path
                )
            return dict(zip(types, values))
        if len(types) != 1:
            raise MalformedRecordError(f"{len(types)} type labels for a single value", path)
        return {types[0]: values}
    if not isinstance(types, str):
        raise MalformedRecordError(f"type label must be a string, got {types!r}", path)
    return {types: values}


def _collapse_type_value(obj: RawRecord, path: tuple[str, ...]) -> dict[str, Any]:
    bag = _zip_type_value(obj["type"], obj["value"], path)
    rest = {k: v for k, v in obj.items() if k not in ("type", "value")}
    return {**bag, **rest}


def _collapse_href_value(obj: RawRecord, implied: str) -> dict[str, Any]:
    rest = {k: v for k, v in obj.items() if k not in ("href", "value")}
    return {implied: obj["value"], **rest}


def _collapse_open_struct(obj: RawRecord, implied: str | None, path: tuple[str, ...]) -> dict[str, Any]:
    table = obj["table"]
    has_type = "type" in table and table["type"] not in (None, "", [])
    has_value = "value" in table and table["value"] not in (None, "", [])
    if has_type and has_value:
        bag = _zip_type_value(table["type"], table["value"], path + ("table",))
    elif has_value and implied:
        bag = {implied: table["value"]}
    else:
        return obj

    out: dict[str, Any] = {}
    for key, value in obj.items():
        if key == "table":
            out.update(bag)
        elif key not in bag:
            out[key] = value
    return out


def _collapse(obj: RawRecord, implied: str | None, path: tuple[str, ...]) -> RawRecord:
    shape = classify(obj)
    if shape is Shape.TYPE_VALUE:
        return _collapse_type_value(obj, path)
    if shape is Shape.HREF_VALUE and implied:
        return _collapse_href_value(obj, implied)
    if shape is Shape.OPEN_STRUCT:
        return _collapse_open_struct(obj, implied, path)
    return obj


# ── Recursive walk ─────────────────────────────────────────────────────────────

def _flatten_object(obj: RawRecord, implied: str | None, path: tuple[str, ...]) -> NormalizedCard | str:
    collapsed = _collapse(obj, implied, path)

    out: NormalizedCard = {}
    for key, value in collapsed.items():
        flat = _flatten_value(value, key, path + (key,))
        if flat is not None:
            out[key] = flat

    # {"email": {"href": .., "value": x}} should read as "email": x
    if collapsed is not obj and list(out) == [implied] and isinstance(out[implied], str):
        return out[implied]
    return out


def _scalar(value: Any) -> str:
    if isinstance(value, str):
        return unescape(value)
    return json.dumps(value)


_VALUE_HANDLERS = {
    Shape.SCALAR: lambda value, key, path: _scalar(value),
    Shape.NULL: lambda value, key, path: None,
    Shape.LIST: lambda value, key, path: _flatten_value(value[0], key, path) if value else None,
    Shape.TYPE_VALUE: lambda value, key, path: _flatten_object(value, key, path),
    Shape.HREF_VALUE: lambda value, key, path: _flatten_object(value, key, path),
    Shape.OPEN_STRUCT: lambda value, key, path: _flatten_object(value, key, path),
    Shape.OBJECT: lambda value, key, path: _flatten_object(value, key, path),
}


def _flatten_value(value: Any, key: str, path: tuple[str, ...]) -> NormalizedCard | str | None:
    try:
        shape = classify(value)
    except TypeError as exc:
        raise MalformedRecordError(str(exc), path) from exc
    return _VALUE_HANDLERS[shape](value, key, path)


def flatten(card: RawRecord, implied_type: str | None = None) -> NormalizedCard:
    """Return a new NormalizedCard; `card` itself is left untouched.

    Raises MalformedRecordError (carrying the property path and the whole
    card) when any property cannot be collapsed.
    """
    if not isinstance(card, dict):
        raise MalformedRecordError(f"hCard is not an object: {card!r}", card=card)
    try:
        flat = _flatten_object(card, implied_type, ())
    except MalformedRecordError as exc:
        exc.card = card
        raise
    except (TypeError, ValueError, KeyError, AttributeError) as exc:
        raise MalformedRecordError(str(exc), card=card) from exc
    if not isinstance(flat, dict):
        # a top-level pair keyed by its own implied type
        return {implied_type or "value": flat}
    return flat


def iter_leaves(card: NormalizedCard) -> Iterator[tuple[str, str]]:
    """Yield (property, value) for every string leaf, depth first, in the
    same order the flattener produced them."""
    for key, value in card.items():
        if isinstance(value, dict):
            yield from iter_leaves(value)
        elif isinstance(value, str):
            yield key, value
