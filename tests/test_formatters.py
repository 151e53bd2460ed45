from __future__ import annotations

from hcard_mapper.formatters import MISSING_FN, describe_card, infer_name


def _n(card: dict) -> dict | None:
    return infer_name(card).get("n")


# ── Implied "n" ────────────────────────────────────────────────────────────────

def test_given_then_family():
    assert _n({"fn": "Max Mustermann"}) == {"given_name": "Max", "family_name": "Mustermann"}


def test_family_comma_given():
    assert _n({"fn": "Mustermann, Max"}) == {"given_name": "Max", "family_name": "Mustermann"}


def test_abbreviated_family_name():
    assert _n({"fn": "Max M."}) == {"given_name": "Max", "family_name": "M."}


def test_abbreviation_beats_comma_order():
    assert _n({"fn": "Max, M."}) == {"given_name": "Max", "family_name": "M."}


def test_existing_n_is_untouched():
    card = {"fn": "Max M.", "n": {"given_name": "Tom"}}
    assert _n(card) == {"given_name": "Tom"}


def test_empty_n_counts_as_present():
    assert _n({"fn": "ACME", "org": "ACME", "n": {}}) == {}


def test_fn_equal_to_org_is_not_a_person():
    assert _n({"fn": "ACME", "org": "ACME"}) is None
    assert _n({"fn": "ACME Corp", "org": "ACME Corp"}) is None


def test_fn_equal_to_org_list_is_not_a_person():
    assert _n({"fn": ["ACME Inc"], "org": ["ACME Inc"]}) is None
    assert _n({"fn": "ACME Inc", "org": ["ACME Inc"]}) is None


def test_fn_equal_to_nested_org_name_is_not_a_person():
    assert _n({"fn": "ACME Inc", "org": {"organization-name": ["ACME Inc"]}}) is None


def test_org_comparison_ignores_entity_encoding():
    assert _n({"fn": "Oheim &amp; Co", "org": "Oheim & Co"}) is None


def test_other_token_counts_are_left_alone():
    assert _n({"fn": "Max"}) is None
    assert _n({"fn": "Max Otto Mustermann"}) is None
    assert _n({"fn": "Max  Mustermann"}) is None


def test_missing_fn():
    assert _n({"org": "ACME"}) is None


def test_fn_list_uses_first_entry():
    assert _n({"fn": ["Max Mustermann", "Maxi"]}) == {"given_name": "Max", "family_name": "Mustermann"}


def test_infer_name_returns_same_card():
    card = {"fn": "Max Mustermann"}
    assert infer_name(card) is card


# ── Candidate labels ───────────────────────────────────────────────────────────

def test_describe_person_with_org():
    assert describe_card({"fn": "Max Mustermann", "org": "ACME"}) == "Max Mustermann (ACME)"


def test_describe_org_card():
    assert describe_card({"fn": "ACME &amp; Co", "org": "ACME &amp; Co"}) == "ACME & Co"


def test_describe_org_card_with_list_org():
    assert describe_card({"fn": ["ACME Inc"], "org": ["ACME Inc"]}) == "ACME Inc"


def test_describe_person_with_nested_org():
    card = {"fn": "Max Mustermann", "org": {"organization-name": "Organisation"}}
    assert describe_card(card) == "Max Mustermann (Organisation)"


def test_describe_without_org():
    assert describe_card({"fn": "Max"}) == "Max"


def test_describe_from_structured_name():
    card = {"n": {"family-name": ["Mustermann"], "given-name": ["Max"]}, "org": "ACME"}
    assert describe_card(card) == "Mustermann, Max (ACME)"


def test_describe_unusable_card():
    assert describe_card({"email": "a@b"}) == MISSING_FN
