"""mapping.py — route NormalizedCard leaves to caller-declared destinations.

A mapping spec is keyed by hCard property name; each value is either a
destination key or a nested group of further property → destination pairs:

    {
        "given_name": "first",
        "tel": {"tel": "phone", "work": "phone", "cell": "phone"},
        "street_address": "street",
    }

Property names compare case-insensitively with '-' equal to '_', so a
parser's "street-address" finds the "street_address" entry.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Protocol

from .errors import InvalidMappingError
from .model import MappingSpec, NormalizedCard, Write
from .normalize import iter_leaves

logger = logging.getLogger(__name__)


class Sink(Protocol):
    def __contains__(self, key: object) -> bool: ...
    def write(self, key: str, value: str) -> None: ...


class FormSink:
    """A fixed set of named fields, like the controls of an HTML form."""

    def __init__(self, fields: Iterable[str]):
        self._values: dict[str, str] = {f: "" for f in fields}

    @classmethod
    def for_mapping(cls, mapping: MappingSpec) -> "FormSink":
        return cls(destinations(mapping))

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def write(self, key: str, value: str) -> None:
        if key in self._values:
            self._values[key] = value

    def reset(self) -> None:
        for k in self._values:
            self._values[k] = ""

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)


# ── Spec handling ──────────────────────────────────────────────────────────────

def normalize_key(name: str) -> str:
    return name.lower().replace("-", "_")


def freeze_mapping(spec: Mapping[str, Any] | None) -> MappingSpec:
    """Validate `spec` and return a read-only copy of it."""
    if spec is None:
        raise InvalidMappingError("You must specify a mappings table")
    if not isinstance(spec, Mapping):
        raise InvalidMappingError(f"mappings must be a table, got {type(spec).__name__}")
    frozen: dict[str, Any] = {}
    for key, dest in spec.items():
        if isinstance(dest, Mapping):
            frozen[key] = freeze_mapping(dest)
        elif isinstance(dest, str) and dest:
            frozen[key] = dest
        else:
            raise InvalidMappingError(f"mapping for {key!r} must be a field name or a group, got {dest!r}")
    return MappingProxyType(frozen)


def destinations(spec: MappingSpec) -> list[str]:
    out: list[str] = []
    for dest in spec.values():
        for d in (destinations(dest) if isinstance(dest, Mapping) else [dest]):
            if d not in out:
                out.append(d)
    return out


# ── Resolution ─────────────────────────────────────────────────────────────────

def _group_destination(group: MappingSpec, sink: Sink) -> str | None:
    for d in destinations(group):
        if d in sink:
            return d
    return None


def find_destination(prop: str, spec: MappingSpec, sink: Sink) -> str | None:
    """First destination for `prop`, searching `spec` depth first in
    insertion order. Groups are searched before their own key is compared."""
    match = normalize_key(prop)
    for key, dest in spec.items():
        if isinstance(dest, Mapping):
            found = find_destination(prop, dest, sink)
            if found is not None:
                return found
            if normalize_key(key) == match:
                found = _group_destination(dest, sink)
                if found is not None:
                    return found
            continue
        if normalize_key(key) == match and dest in sink:
            return dest
    return None


def apply_mapping(card: NormalizedCard, mapping: MappingSpec, sink: Sink) -> list[Write]:
    """Write every mappable leaf of `card` to `sink`; returns the writes made.

    Leaves without a mapping entry and destinations the sink does not have
    are skipped, never raised.
    """
    writes: list[Write] = []
    for prop, value in iter_leaves(card):
        dest = find_destination(prop, mapping, sink)
        if dest is None:
            logger.debug("No destination for %s=%r", prop, value)
            continue
        sink.write(dest, value)
        writes.append(Write(prop=prop, destination=dest, value=value))
    return writes
