from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

RawRecord = dict[str, Any]
NormalizedCard = dict[str, Any]          # str leaves, nested dicts for n / adr / groups
MappingSpec = Mapping[str, Union[str, "MappingSpec"]]


class Shape(Enum):
    """The recurring value shapes emitted by the known upstream parsers."""
    SCALAR = "scalar"            # str / number / bool
    NULL = "null"
    LIST = "list"
    TYPE_VALUE = "type_value"    # {"type": ..., "value": ...}
    HREF_VALUE = "href_value"    # {"href": ..., "value": ...}
    OPEN_STRUCT = "open_struct"  # {"table": {"type": [...], "value": [...]}}
    OBJECT = "object"


def _present(v: Any) -> bool:
    return v is not None and v != "" and v != []


def classify(value: Any) -> Shape:
    if value is None:
        return Shape.NULL
    if isinstance(value, (str, int, float, bool)):
        return Shape.SCALAR
    if isinstance(value, list):
        return Shape.LIST
    if isinstance(value, dict):
        if _present(value.get("type")) and _present(value.get("value")):
            return Shape.TYPE_VALUE
        if _present(value.get("href")) and _present(value.get("value")):
            return Shape.HREF_VALUE
        if isinstance(value.get("table"), dict):
            return Shape.OPEN_STRUCT
        return Shape.OBJECT
    raise TypeError(f"unsupported value type {type(value).__name__}")


# ── Envelope results ───────────────────────────────────────────────────────────

@dataclass
class SingleCard:
    card: RawRecord


@dataclass
class MultiCard:
    candidates: list[RawRecord]   # CandidateSet: distinct, first-seen order


# ── Mapping run results ────────────────────────────────────────────────────────

@dataclass
class Write:
    prop: str
    destination: str
    value: str


@dataclass
class MappingRun:
    card: NormalizedCard | None = None
    writes: list[Write] = field(default_factory=list)
    parser: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def values(self) -> dict[str, str]:
        """Destination -> final value (last write wins)."""
        return {w.destination: w.value for w in self.writes}


@dataclass
class Proposal:
    """More than one distinct card was found; the caller must pick one
    and hand it back through `pipeline.resume`."""
    candidates: list[RawRecord]
    parser: str | None = None

    def labels(self) -> list[str]:
        from .formatters import describe_card
        return [describe_card(c) for c in self.candidates]

    def __len__(self) -> int:
        return len(self.candidates)
