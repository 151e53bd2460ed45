from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from hcard_mapper.errors import InvalidMappingError, MalformedRecordError
from hcard_mapper.io import parse_json_document, read_json_document, read_mapping_file


# ── Parser responses ───────────────────────────────────────────────────────────

def test_plain_json():
    assert parse_json_document('{"fn": "Max"}') == {"fn": "Max"}


def test_secure_wrapper_is_removed():
    text = '/*-secure-\n{"fn": "Max", "note": "a */ b"}\n*/'
    assert parse_json_document(text) == {"fn": "Max", "note": "a */ b"}


def test_bad_json_is_malformed():
    with pytest.raises(MalformedRecordError) as info:
        parse_json_document("<html>oops</html>", "page.html")
    assert "page.html" in str(info.value)


def test_read_json_document_from_file(tmp_path: Path):
    p = tmp_path / "response.json"
    p.write_text(json.dumps({"vcard": [{"fn": "Max"}]}), encoding="utf-8")
    assert read_json_document(p) == {"vcard": [{"fn": "Max"}]}


def test_read_json_document_from_stdin(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('[{"fn": "A"}]'))
    assert read_json_document("-") == [{"fn": "A"}]


# ── Mapping files ──────────────────────────────────────────────────────────────

def test_json_mapping_file(tmp_path: Path):
    p = tmp_path / "mappings.json"
    p.write_text(json.dumps({"email": "email", "tel": {"tel": "phone"}}), encoding="utf-8")
    spec = read_mapping_file(p)
    assert spec["email"] == "email"
    assert spec["tel"]["tel"] == "phone"


def test_toml_mapping_file_with_table(tmp_path: Path):
    p = tmp_path / "mappings.toml"
    p.write_text(
        'title = "form"\n\n[mappings]\nemail = "email"\n\n[mappings.tel]\nwork = "phone"\n',
        encoding="utf-8",
    )
    spec = read_mapping_file(p)
    assert list(spec) == ["email", "tel"]
    assert spec["tel"]["work"] == "phone"


def test_toml_mapping_file_at_top_level(tmp_path: Path):
    p = tmp_path / "mappings.toml"
    p.write_text('given_name = "first"\nfamily_name = "last"\n', encoding="utf-8")
    assert dict(read_mapping_file(p)) == {"given_name": "first", "family_name": "last"}


def test_unreadable_mapping_file(tmp_path: Path):
    p = tmp_path / "mappings.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidMappingError):
        read_mapping_file(p)


def test_mapping_file_with_bad_destination(tmp_path: Path):
    p = tmp_path / "mappings.json"
    p.write_text('{"email": 42}', encoding="utf-8")
    with pytest.raises(InvalidMappingError):
        read_mapping_file(p)
