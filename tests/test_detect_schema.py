from __future__ import annotations

import pytest

from budget_insights.ingest.detect import detect, normalize_hint, schema_from_hint
from budget_insights.ingest.schemas import (
    AMERICAN_EXPRESS,
    BANK_OF_AMERICA,
    CAPITAL_ONE,
    CHASE,
    CITI,
    SCHEMAS,
    WELLS_FARGO,
    get_schema,
)


@pytest.mark.parametrize("schema", SCHEMAS, ids=lambda s: s.key)
def test_canonical_header_detects_its_own_schema(schema):
    assert detect(list(schema.canonical_header)) is schema


@pytest.mark.parametrize(
    "header",
    [
        ["Foo", "Bar"],
        ["Fecha", "Importe", "Concepto"],
        ["Date", "Memo", "Value", "Balance", "Category", "Extra"],
        ["Date", "Amount", "A", "B", "C", "D"],
    ],
)
def test_unknown_headers_are_not_detected(header):
    assert detect(header) is None


def test_earlier_rule_wins_when_several_match():
    # Matches both the Bank of America rule and the Chase "type + description" rule.
    header = ["Posted Date", "Payee", "Type", "Description", "Amount"]
    assert detect(header) is BANK_OF_AMERICA


def test_chase_posting_date_header():
    assert detect(["Posting Date", "Description", "Type", "Amount"]) is CHASE


def test_narrow_date_amount_export_is_wells_fargo():
    assert detect(["Date", "Amount", "Memo"]) is WELLS_FARGO
    assert detect(["Wells Fargo export", "x", "y", "z", "a", "b", "c"]) is WELLS_FARGO


def test_header_matching_is_case_insensitive():
    assert detect(["POSTED DATE", "PAYEE", "AMOUNT"]) is BANK_OF_AMERICA


@pytest.mark.parametrize(
    "hint,expected",
    [
        ("Bank of America", BANK_OF_AMERICA),
        ("boa", BANK_OF_AMERICA),
        ("  CHASE ", CHASE),
        ("Wells Fargo", WELLS_FARGO),
        ("wells_fargo", WELLS_FARGO),
        ("Citi", CITI),
        ("capital_one", CAPITAL_ONE),
        ("Capital-One", CAPITAL_ONE),
        ("amex", AMERICAN_EXPRESS),
        ("American Express", AMERICAN_EXPRESS),
    ],
)
def test_hint_selects_schema_regardless_of_header(hint, expected):
    assert detect(["Foo", "Bar"], hint) is expected


def test_unknown_hint_falls_back_to_header_detection():
    assert detect(["Posting Date", "Description", "Type", "Amount"], "My Credit Union") is CHASE
    assert detect(["Foo", "Bar"], "My Credit Union") is None


def test_blank_hint_is_ignored():
    assert schema_from_hint("") is None
    assert schema_from_hint("   ") is None
    assert schema_from_hint(None) is None


def test_normalize_hint_strips_separators():
    assert normalize_hint(" Capital_One-Bank ") == "capitalonebank"


def test_get_schema_by_key():
    assert get_schema("chase") is CHASE
    assert get_schema(" Capital_One ") is CAPITAL_ONE
    with pytest.raises(KeyError):
        get_schema("nope")


def test_split_amount_schemas():
    assert CITI.has_split_amounts
    assert CAPITAL_ONE.has_split_amounts
    assert not CHASE.has_split_amounts
