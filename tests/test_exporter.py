from __future__ import annotations

from pathlib import Path

import vobject

from hcard_mapper.exporter import VCARD_MAPPINGS, VCardSink, export_vcard
from hcard_mapper.mapping import freeze_mapping
from hcard_mapper.pipeline import process


def _mapped(payload) -> VCardSink:
    sink = VCardSink()
    run = process(payload, freeze_mapping(VCARD_MAPPINGS), sink)
    assert run.ok
    return sink


# ── Sink ───────────────────────────────────────────────────────────────────────

def test_sink_accepts_only_vcard_fields():
    sink = VCardSink()
    sink.write("n.given", "Max")
    sink.write("website", "http://x")
    assert "adr.locality" in sink
    assert "website" not in sink
    assert sink.values == {"n.given": "Max"}


def test_every_mapping_destination_is_accepted():
    sink = VCardSink()
    for dest in VCARD_MAPPINGS.values():
        for d in (dest.values() if isinstance(dest, dict) else [dest]):
            assert d in sink


# ── Serialization ──────────────────────────────────────────────────────────────

def test_ufxtract_card_as_vcard(payloads):
    text = _mapped(payloads["ufxtract"]).serialize()
    assert "VERSION:4.0" in text
    assert "FN:Mustermann Max" in text
    assert "N:Mustermann;Max;;;" in text
    assert "mail@examle.org" in text
    assert "ORG:Organisation" in text
    assert "Street;City;State;12345;Country" in text


def test_hkit_card_keeps_first_phone(payloads):
    text = _mapped(payloads["hkit"]).serialize()
    assert "TEL:0201 3839911" in text
    assert "3839916" not in text


def test_name_only_card_gets_fn_from_parts():
    sink = VCardSink()
    sink.write("n.given", "Max")
    sink.write("n.family", "Mustermann")
    text = sink.serialize()
    assert "FN:Max Mustermann" in text
    assert "ADR" not in text


def test_serialized_vcard_parses_back():
    sink = VCardSink()
    sink.write("fn", "Max Mustermann")
    sink.write("email", "max@example.org")
    vc = vobject.readOne(sink.serialize())
    assert vc.fn.value == "Max Mustermann"
    assert vc.email.value == "max@example.org"


def test_export_vcard(tmp_path: Path, payloads):
    out = export_vcard(_mapped(payloads["optimus"]), tmp_path / "cards" / "me.vcf")
    assert out.exists()
    text = out.read_text(encoding="utf-8")
    assert "BEGIN:VCARD" in text
    assert "URL:http://example.org" in text
