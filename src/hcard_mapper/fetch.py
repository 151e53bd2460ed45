from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from .config import Settings
from .envelope import candidates
from .errors import CardNotFoundError, UpstreamError
from .io import parse_json_document
from .model import RawRecord

logger = logging.getLogger(__name__)

_HTTP_URI = re.compile(r"^(http|https)://(\w+:?\w*@)?(\S+)(:[0-9]+)?(/|/([\w#!:.?+=&%@!\-/]))?")


def is_http_uri(locator: str) -> bool:
    return bool(_HTTP_URI.match(locator.strip()))


def _client(settings: Settings) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(settings.timeout),
        headers={"User-Agent": settings.user_agent, "Accept": "application/json, */*"},
        follow_redirects=True,
    )


def fetch_document(locator: str, settings: Settings, client: httpx.Client | None = None) -> Any:
    """Ask the upstream parser for the hCards on `locator`; returns the
    decoded JSON exactly as the parser produced it."""
    url = settings.parser_url.format(url=quote(locator.strip(), safe=""))
    own = client is None
    client = client or _client(settings)
    try:
        resp = client.get(url)
    except httpx.HTTPError as exc:
        raise UpstreamError(f"Error while reading {locator}: {exc}") from exc
    finally:
        if own:
            client.close()

    if resp.status_code == 404:
        raise CardNotFoundError(locator)
    if resp.status_code >= 400:
        raise UpstreamError(f"Parser answered {resp.status_code} for {locator}")
    logger.debug("Fetched %d bytes from %s", len(resp.content), url)
    return parse_json_document(resp.text, locator)


def fetch_cards(locator: str, settings: Settings, client: httpx.Client | None = None) -> list[RawRecord]:
    """Every distinct card the parser found on `locator` (possibly none)."""
    return [c for c in candidates(fetch_document(locator, settings, client)) if c]
