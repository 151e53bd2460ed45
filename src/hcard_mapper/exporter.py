from __future__ import annotations

from pathlib import Path

import vobject

# Destinations a VCardSink accepts. Structured properties use "prop.part".
NAME_PARTS = {"n.family": "family", "n.given": "given", "n.additional": "additional",
              "n.prefix": "prefix", "n.suffix": "suffix"}
ADR_PARTS = {"adr.box": "box", "adr.extended": "extended", "adr.street": "street",
             "adr.locality": "city", "adr.region": "region", "adr.code": "code",
             "adr.country": "country"}
SIMPLE = ("fn", "email", "tel", "org", "title", "role", "url", "note", "uid")

VCARD_MAPPINGS = {
    "fn": "fn",
    "given_name": "n.given",
    "family_name": "n.family",
    "additional_name": "n.additional",
    "honorific_prefix": "n.prefix",
    "honorific_suffix": "n.suffix",
    "org": {"org": "org", "organization_name": "org"},
    "title": "title",
    "role": "role",
    "email": "email",
    "tel": {"tel": "tel", "work": "tel", "cell": "tel", "home": "tel", "voice": "tel"},
    "url": "url",
    "post_office_box": "adr.box",
    "extended_address": "adr.extended",
    "street_address": "adr.street",
    "locality": "adr.locality",
    "region": "adr.region",
    "postal_code": "adr.code",
    "country_name": "adr.country",
    "note": "note",
    "uid": "uid",
}


class VCardSink:
    """Collects mapped values and renders them as a single vCard."""

    def __init__(self):
        self.values: dict[str, str] = {}

    def __contains__(self, key: object) -> bool:
        return key in SIMPLE or key in NAME_PARTS or key in ADR_PARTS

    def write(self, key: str, value: str) -> None:
        if key in self:
            self.values[key] = value

    def to_vcard(self, target_version: str = "4.0") -> vobject.base.Component:
        vals = self.values
        v = vobject.vCard()
        v.add('version')
        v.version.value = target_version

        name = {part: vals.get(key, "") for key, part in NAME_PARTS.items()}
        fn = vals.get("fn") or " ".join(p for p in (name["given"], name["family"]) if p) or "Unnamed"
        v.add('fn'); v.fn.value = fn
        v.add('n'); v.n.value = vobject.vcard.Name(**name)

        if any(k in vals for k in ADR_PARTS):
            adr = {part: vals.get(key, "") for key, part in ADR_PARTS.items()}
            it = v.add('adr'); it.value = vobject.vcard.Address(**adr)
        if vals.get("email"):
            it = v.add('email'); it.value = vals["email"]; it.type_param = 'INTERNET'
        if vals.get("org"):
            it = v.add('org'); it.value = [vals["org"]]
        for prop in ("tel", "title", "role", "url", "note", "uid"):
            if vals.get(prop):
                it = v.add(prop); it.value = vals[prop]
        it = v.add('prodid'); it.value = "-//hcard-mapper//EN"
        return v

    def serialize(self, target_version: str = "4.0") -> str:
        return self.to_vcard(target_version).serialize()


def export_vcard(sink: VCardSink, path: Path, target_version: str = "4.0") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(sink.serialize(target_version), encoding="utf-8")
    return path
