"""pipeline.py — one mapping run, from parser response to sink writes.

    response ─ unwrap ─┬─ one card  ─ infer_name ─ flatten ─ apply_mapping → MappingRun
                       └─ several   ─ dedup ───────────────────────────────→ Proposal
                                                     resume(proposal, i) ──┘

Nothing here holds state between runs; the working card, mapping and sink
are passed in each time.
"""
from __future__ import annotations

import copy
import logging
from typing import Any

from .envelope import guess_parser, unwrap
from .errors import CardNotFoundError, MalformedRecordError
from .formatters import infer_name
from .mapping import Sink, apply_mapping
from .model import MappingRun, MappingSpec, MultiCard, Proposal, RawRecord
from .normalize import flatten

logger = logging.getLogger(__name__)


def map_card(card: RawRecord, mapping: MappingSpec, sink: Sink, parser: str | None = None) -> MappingRun:
    """Infer the name, flatten and write a single card.

    A malformed card aborts the run before anything is written; the error is
    logged and returned on the MappingRun instead of raised.
    """
    working = copy.deepcopy(card)
    try:
        infer_name(working)
        flat = flatten(working)
    except MalformedRecordError as exc:
        logger.error("Error during hCard mapping at %s: %s; card=%r", exc.property_path, exc, exc.card)
        return MappingRun(parser=parser, error=str(exc))

    writes = apply_mapping(flat, mapping, sink)
    logger.debug("Mapped %d value(s) from %s card", len(writes), parser or "unknown")
    return MappingRun(card=flat, writes=writes, parser=parser)


def process(response: Any, mapping: MappingSpec, sink: Sink, locator: str | None = None) -> MappingRun | Proposal:
    """Run the pipeline on a parser response.

    Returns a MappingRun, or a Proposal when several distinct cards were
    found. Raises CardNotFoundError when the response holds no card at all.
    """
    parser = guess_parser(response)
    logger.debug("Response looks like %s output", parser)
    try:
        result = unwrap(response)
    except MalformedRecordError as exc:
        logger.error("Error during hCard mapping: %s; response=%r", exc, response)
        return MappingRun(parser=parser, error=str(exc))

    if isinstance(result, MultiCard):
        if not result.candidates:
            raise CardNotFoundError(locator)
        if len(result.candidates) > 1:
            return Proposal(candidates=result.candidates, parser=parser)
        return map_card(result.candidates[0], mapping, sink, parser)
    return map_card(result.card, mapping, sink, parser)


def resume(proposal: Proposal, index: int, mapping: MappingSpec, sink: Sink) -> MappingRun:
    """Second phase: map the candidate the caller picked."""
    if not 0 <= index < len(proposal.candidates):
        raise IndexError(f"candidate {index} out of range (0..{len(proposal.candidates) - 1})")
    return map_card(proposal.candidates[index], mapping, sink, proposal.parser)
