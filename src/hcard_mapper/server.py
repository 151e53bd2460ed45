"""server.py — hCard lookup proxy.

Browsers cannot fetch other sites' pages directly, so a form page asks this
proxy instead:

    GET /?hcard_url=http://example.org/about    (alias: ?uri=)

The proxy has the upstream parser read the page, collapses the result to a
single representative card and answers

    200  application/x-javascript   {"fn": ..., "email": ..., ...}
    404  text/plain                 404 Not Found
    400  text/plain                 missing or non-http(s) locator
    502  text/plain                 upstream parser failed

Uses only http.server from the stdlib for serving.
"""
from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Callable
from urllib.parse import parse_qs, urlparse

from .config import Settings
from .dedupe import pick_representative
from .errors import CardNotFoundError, MalformedRecordError, UpstreamError
from .fetch import fetch_cards, is_http_uri
from .model import RawRecord

logger = logging.getLogger(__name__)

Lookup = Callable[[str], list[RawRecord]]

JSON_TYPE = "application/x-javascript; charset=utf-8"
TEXT_TYPE = "text/plain; charset=utf-8"


# ── Response building ──────────────────────────────────────────────────────────

def representative_payload(card: RawRecord) -> RawRecord:
    """Trim a card for the client: only the first url and email survive."""
    out = dict(card)
    for key in ("url", "email"):
        if isinstance(out.get(key), list):
            out[key] = out[key][0] if out[key] else None
    return out


def lookup_response(locator: str, lookup: Lookup) -> tuple[int, str, bytes]:
    """(status, content type, body) for one lookup request."""
    locator = (locator or "").strip()
    if not locator or not is_http_uri(locator):
        return 400, TEXT_TYPE, b"400 Bad Request"

    try:
        cards = lookup(locator)
    except CardNotFoundError:
        cards = []
    except (UpstreamError, MalformedRecordError) as exc:
        logger.warning("Lookup of %s failed: %s", locator, exc)
        return 502, TEXT_TYPE, b"502 Bad Gateway"

    card = pick_representative(cards, locator)
    if card is None:
        return 404, TEXT_TYPE, b"404 Not Found"
    body = json.dumps(representative_payload(card)).encode("utf-8")
    return 200, JSON_TYPE, body


# ── Request handler ────────────────────────────────────────────────────────────

class HCardProxyHandler(BaseHTTPRequestHandler):
    server: "ProxyServer"

    def log_message(self, fmt, *args):
        logger.info("%s " + fmt, self.address_string(), *args)

    def _send(self, status: int, content_type: str, body: bytes):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Access-Control-Allow-Origin", "*")
        self.end_headers()
        self.wfile.write(body)

    def do_OPTIONS(self):
        self.send_response(200)
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, OPTIONS")
        self.end_headers()

    def do_GET(self):
        params = parse_qs(urlparse(self.path).query)
        locator = (params.get("hcard_url") or params.get("uri") or [""])[0]
        self._send(*lookup_response(locator, self.server.lookup))


class ProxyServer(HTTPServer):
    allow_reuse_address = True

    def __init__(self, address: tuple[str, int], lookup: Lookup):
        super().__init__(address, HCardProxyHandler)
        self.lookup = lookup


def make_server(settings: Settings, lookup: Lookup | None = None) -> ProxyServer:
    if lookup is None:
        def lookup(locator: str) -> list[RawRecord]:
            return fetch_cards(locator, settings)
    return ProxyServer((settings.host, settings.port), lookup)


# ── Entry point ────────────────────────────────────────────────────────────────

def main(settings: Settings | None = None) -> None:
    settings = settings or Settings()
    server = make_server(settings)
    host, port = server.server_address[:2]

    print(f"\n  hCard proxy   : http://{host}:{port}/?hcard_url=<page>")
    print(f"  parser        : {settings.parser_url}")
    print("  Press Ctrl-C to stop\n")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\n  Bye.\n")
    finally:
        server.server_close()
