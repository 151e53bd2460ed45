from __future__ import annotations

import json
from typing import Any

from .model import RawRecord


def canonical(card: Any) -> str:
    return json.dumps(card, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def dedup(cards: list[RawRecord]) -> list[RawRecord]:
    seen: list[str] = []
    out: list[RawRecord] = []
    for card in cards:
        key = canonical(card)
        if key in seen:
            continue
        seen.append(key)
        out.append(card)
    return out


def _has_value(card: RawRecord, locator: str) -> bool:
    for value in card.values():
        if value == locator:
            return True
        if isinstance(value, list) and locator in value:
            return True
    return False


def pick_representative(cards: list[RawRecord], locator: str) -> RawRecord | None:
    """Collapse a lookup result to one authoritative card.

    Prefers the card whose uid (or any field) is the page that was looked up,
    the last such card when several are; otherwise the first card wins.
    """
    if not cards:
        return None
    if len(cards) == 1:
        return cards[0]
    chosen = cards[0]
    for card in cards:
        if card.get("uid") == locator or _has_value(card, locator):
            chosen = card
    return chosen
