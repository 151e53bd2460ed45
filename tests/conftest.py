"""Example responses from the four known hCard parsers (hKit, mofo, Optimus,
ufXtract) and the form mapping used against them."""
from __future__ import annotations

import copy

import pytest

from hcard_mapper.mapping import FormSink, freeze_mapping

HKIT = {
    "fn": "Omnia Computing, Oheim & Sädtler GbR",
    "adr": {
        "street-address": "Arenbergstraße 13a",
        "postal-code": "46238",
        "country-name": "Deutschland",
        "type": "work",
        "locality": "Bottrop",
    },
    "email": "info@omnia-computing.de",
    "org": "Omnia Computing, Oheim & Sädtler GbR",
    "tel": [
        {"type": "tel", "value": "0201 3839911"},
        {"type": "fax", "value": "0201 3839916"},
    ],
    "url": "http://www.omnia-computing.de",
}

MOFO = {
    "url": None,
    "org": "Omnia Computing, Oheim &amp; Sädtler GbR",
    "adr": {
        "postal_code": "46238",
        "type": "work",
        "street_address": "Arenbergstraße 13a",
        "locality": "Bottrop",
        "properties": ["type", "country_name", "postal_code", "street_address", "locality"],
        "country_name": "Deutschland",
    },
    "tel": {
        "table": {
            "type": ["tel", "fax"],
            "value": ["0201 3839911", "0201 3839916"],
        }
    },
    "properties": ["fn", "email", "adr", "url", "tel", "org"],
    "fn": "Omnia Computing, Oheim &amp; Sädtler GbR",
    "email": "info@omnia-computing.de",
}

OPTIMUS = {
    "from": "http://pfefferle.org/static/microformats/hcard-test.html",
    "title": "hCard Test",
    "hcard": {
        "adr": {
            "street-address": "Street",
            "region": "State",
            "locality": "City",
            "postal-code": "12345",
            "country-name": "Country",
        },
        "email": {"href": "mailto:mail@examle.org", "value": "mail@examle.org"},
        "fn": "Mustermann Max",
        "org": "Organisation",
        "tel": "111-222-333",
        "url": [
            "http://example.org",
            "http://pfefferle.org/static/microformats/aim:goim?screenname=aim",
            "http://pfefferle.org/static/microformats/ymsgr:sendIM?yim",
        ],
    },
}

UFXTRACT = {
    "vcard": [{
        "fn": "Mustermann Max",
        "n": {"given-name": ["Max"], "family-name": ["Mustermann"]},
        "adr": [{
            "street-address": ["Street"],
            "locality": "City",
            "region": "State",
            "postal-code": "12345",
            "country-name": "Country",
        }],
        "org": {"organization-name": "Organisation"},
        "email": ["mail@examle.org"],
        "tel": ["111-222-333"],
        "url": ["http://example.org", "aim:goim?screenname=aim", "ymsgr:sendIM?yim"],
    }]
}

PAYLOADS = {"hkit": HKIT, "mofo": MOFO, "optimus": OPTIMUS, "ufxtract": UFXTRACT}

FULL_MAPPING = {
    "given_name": "first",
    "family_name": "last",
    "tel": {"tel": "phone", "work": "phone", "cell": "phone"},
    "email": "email",
    "org": {"org": "company", "organization_name": "company"},
    "url": "website",
    "street_address": "street",
    "postal_code": "zip",
    "locality": "town",
}


@pytest.fixture
def payloads():
    return copy.deepcopy(PAYLOADS)


@pytest.fixture
def mapping():
    return freeze_mapping(FULL_MAPPING)


@pytest.fixture
def form(mapping):
    return FormSink.for_mapping(mapping)
