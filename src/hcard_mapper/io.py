from __future__ import annotations

import json
import logging
import re
import sys
import tomllib
from pathlib import Path
from typing import Any

from .errors import InvalidMappingError, MalformedRecordError
from .mapping import freeze_mapping
from .model import MappingSpec

logger = logging.getLogger(__name__)

# ── Pre-parse sanitisation ─────────────────────────────────────────────────────
#
# Some proxies (Prototype-era Rails apps among them) guard JSON against
# script inclusion by wrapping it in a comment:
#
#   /*-secure-
#   {"fn": "..."}
#   */
#
# The wrapper is removed before decoding.

_SECURE_JSON = re.compile(r"^\s*/\*-secure-([\s\S]*)\*/\s*$")


def _unfilter_json(text: str, source_label: str) -> str:
    m = _SECURE_JSON.match(text)
    if m:
        logger.debug("%s: removed secure-JSON wrapper", source_label)
        return m.group(1)
    return text


# ── Public API ─────────────────────────────────────────────────────────────────

def parse_json_document(text: str, source_label: str = "response") -> Any:
    """Decode one parser response; bad JSON is a MalformedRecordError."""
    data = _unfilter_json(text, source_label)
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise MalformedRecordError(f"{source_label}: not valid JSON ({exc.msg})") from exc


def read_json_document(path: Path | str) -> Any:
    """Read a parser response from a file, or stdin when `path` is '-'."""
    if str(path) == "-":
        return parse_json_document(sys.stdin.read(), "stdin")
    p = Path(path)
    return parse_json_document(p.read_text(encoding="utf-8", errors="replace"), p.name)


def read_mapping_file(path: Path) -> MappingSpec:
    """Load a mapping spec from .json or .toml.

    A TOML file may hold the spec at top level or under a [mappings] table.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".toml":
            data = tomllib.loads(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise InvalidMappingError(f"{path.name}: {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("mappings"), dict):
        data = data["mappings"]
    return freeze_mapping(data)
