from __future__ import annotations

import logging
from typing import Any

from .model import RawRecord
from .normalize import unescape

logger = logging.getLogger(__name__)

MISSING_FN = "The hCard is invalid (missing FN property)"


def _first_text(value: Any) -> str | None:
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, str) else None


def _org_text(value: Any) -> str | None:
    # ufXtract nests the name: {"organization-name": "ACME"}
    if isinstance(value, dict):
        value = value.get("organization-name", value.get("organization_name"))
    return _first_text(value)


def _is_org_name(fn: str, card: RawRecord) -> bool:
    org = _org_text(card.get("org"))
    return org is not None and unescape(fn) == unescape(org)


# ── Implied "n" optimisation ───────────────────────────────────────────────────

def _is_initial(token: str) -> bool:
    return len(token) == 2 and token.endswith(".")


def infer_name(card: RawRecord) -> RawRecord:
    """Fill `n` from a two-word `fn` when the card carries no structured name.

    See http://microformats.org/wiki/hcard#Implied_.22n.22_Optimization.
    Only "Given Family", "Family, Given" and "Given F." are understood; any
    other token count leaves `n` unset. Mutates and returns `card`.
    """
    if card.get("n") is not None:
        return card
    fn = _first_text(card.get("fn"))
    if not fn or _is_org_name(fn, card):
        return card

    tokens = fn.split(" ")
    if len(tokens) != 2:
        logger.debug("fn %r has %d tokens; not guessing n", fn, len(tokens))
        return card

    first, second = tokens
    given, family = first, second
    if _is_initial(second):
        # "Max M.": the abbreviation is always the family name
        given = first[:-1] if first.endswith(",") else first
    elif first.endswith(","):
        given, family = second, first[:-1]

    card["n"] = {"given_name": given, "family_name": family}
    return card


# ── Candidate labels ───────────────────────────────────────────────────────────

def _name_part(n: Any, *keys: str) -> str | None:
    if not isinstance(n, dict):
        return None
    for k in keys:
        text = _first_text(n.get(k))
        if text:
            return text
    return None


def describe_card(card: RawRecord) -> str:
    """One-line label for a candidate card, e.g. 'Max Mustermann (ACME)'."""
    fn = _first_text(card.get("fn"))
    org_text = _org_text(card.get("org"))

    if fn and (not org_text or _is_org_name(fn, card)):
        return unescape(fn)
    if fn:
        return unescape(f"{fn} ({org_text})")

    n = card.get("n")
    family = _name_part(n, "family_name", "family-name")
    given = _name_part(n, "given_name", "given-name")
    if family and given:
        label = f"{family}, {given}" + (f" ({org_text})" if org_text else "")
        return unescape(label)
    return MISSING_FN
