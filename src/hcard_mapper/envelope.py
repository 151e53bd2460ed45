from __future__ import annotations

import logging
from typing import Any

from .dedupe import dedup
from .errors import MalformedRecordError
from .model import MultiCard, RawRecord, SingleCard

logger = logging.getLogger(__name__)

# Wrapper keys some parsers put around their result.
SINGLE_ENVELOPE = "hcard"   # Optimus: {"from": .., "title": .., "hcard": {...}}
LIST_ENVELOPE = "vcard"     # ufXtract: {"vcard": [{...}, ...]}


def guess_parser(response: Any) -> str:
    """Best guess at which parser produced `response`; for diagnostics only."""
    if isinstance(response, dict):
        if SINGLE_ENVELOPE in response:
            return "optimus"
        if LIST_ENVELOPE in response:
            return "ufxtract"
        if isinstance(response.get("properties"), list) or any(
            isinstance(v, dict) and "table" in v for v in response.values()
        ):
            return "mofo"
        return "hkit"
    if isinstance(response, list):
        return "list"
    return "unknown"


def _cards_only(items: list[Any]) -> list[RawRecord]:
    cards = [c for c in items if isinstance(c, dict)]
    if len(cards) != len(items):
        logger.warning("Ignoring %d non-object entries in card list", len(items) - len(cards))
    return cards


def unwrap(response: Any) -> SingleCard | MultiCard:
    """Strip parser envelopes and decide between one card and a candidate set."""
    value = response
    from_list_envelope = False
    if isinstance(value, dict) and SINGLE_ENVELOPE in value:
        value = value[SINGLE_ENVELOPE]
    if isinstance(value, dict) and LIST_ENVELOPE in value:
        value = value[LIST_ENVELOPE]
        from_list_envelope = True

    if isinstance(value, list):
        candidates = dedup(_cards_only(value))
        if from_list_envelope and len(candidates) == 1:
            return SingleCard(candidates[0])
        return MultiCard(candidates)
    if isinstance(value, dict):
        return SingleCard(value)
    raise MalformedRecordError(f"hCard is not an object: {value!r}", card=response)


def candidates(response: Any) -> list[RawRecord]:
    """Every distinct card in `response`, whatever the envelope."""
    result = unwrap(response)
    if isinstance(result, SingleCard):
        return [result.card]
    return result.candidates
