# ruff: noqa: E501
from __future__ import annotations

import textwrap
from datetime import datetime
from decimal import Decimal

import pytest

from budget_insights.ingest.importer import import_statement, validate_file
from budget_insights.models import AccountInfo, Category, TransactionType


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


def test_chase_debit_row_end_to_end():
    csv_text = _dedent(
        """
        Posting Date,Description,Type,Amount
        08/15/2025,STARBUCKS #1,DEBIT,-42.10

        """
    )

    result = import_statement(csv_text)

    assert result.errors == []
    assert result.account_info == AccountInfo(bank_name="Chase", account_number=None)
    assert len(result.transactions) == 1
    t = result.transactions[0]
    assert t.date == datetime(2025, 8, 15)
    assert t.description == "STARBUCKS #1"
    assert t.amount == Decimal("42.10")
    assert t.type is TransactionType.EXPENSE
    assert t.category is Category.FOOD
    assert t.merchant_name == "STARBUCKS"
    assert t.is_recurring is False


def test_bank_of_america_signed_and_parenthesized_amounts():
    csv_text = _dedent(
        """
        Posted Date,Reference Number,Payee,Address,Amount
        08/03/2025,123,AMAZON MKTPLACE,SEATTLE WA,-23.99
        08/04/2025,124,ACME PAYROLL,,"2,500.00"
        08/05/2025,125,"JOE'S PIZZA, INC",BROOKLYN NY,"(1,200.00)"
        """
    )

    result = import_statement(csv_text)

    assert result.errors == []
    assert [(t.description, t.amount, t.type, t.category) for t in result.transactions] == [
        ("AMAZON MKTPLACE", Decimal("23.99"), TransactionType.EXPENSE, Category.SHOPPING),
        ("ACME PAYROLL", Decimal("2500.00"), TransactionType.INCOME, Category.SALARY),
        ("JOE'S PIZZA, INC", Decimal("1200.00"), TransactionType.EXPENSE, Category.FOOD),
    ]


def test_row_errors_report_source_line_numbers():
    csv_text = _dedent(
        """
        Posting Date,Description,Type,Amount

        pending,COFFEE,DEBIT,-3.00
        08/16/2025,,DEBIT,-5.00
        08/17/2025,UBER TRIP,DEBIT,-18.25
        """
    )

    result = import_statement(csv_text)

    assert result.errors == [
        "Line 3: date missing or invalid",
        "Line 4: description missing",
    ]
    assert [t.description for t in result.transactions] == ["UBER TRIP"]
    assert result.transactions[0].id.endswith("-5")


def test_zero_and_unparseable_amounts_are_dropped_silently():
    csv_text = _dedent(
        """
        Posting Date,Description,Type,Amount
        08/16/2025,FOO,DEBIT,abc
        08/16/2025,BAR,DEBIT,0.00
        08/16/2025,BAZ,CREDIT,10
        """
    )

    result = import_statement(csv_text)

    assert result.errors == []
    assert [t.description for t in result.transactions] == ["BAZ"]


def test_rows_with_a_single_field_are_skipped():
    csv_text = "Posting Date,Description,Type,Amount\nTOTAL\n08/16/2025,BAZ,CREDIT,10\n"
    result = import_statement(csv_text)
    assert result.errors == []
    assert len(result.transactions) == 1


def test_hint_selects_split_amount_schema():
    csv_text = _dedent(
        """
        Date,Description,Debit,Credit
        08/01/2025,NETFLIX.COM,15.99,
        08/02/2025,ACME PAYROLL,,2500.00
        08/03/2025,REFUND ADJUSTMENT,1.00,2.00
        """
    )

    assert import_statement(csv_text).account_info is None

    result = import_statement(csv_text, "Citi")
    assert result.account_info == AccountInfo(bank_name="Citi", account_number=None)
    assert [(t.amount, t.type, t.category) for t in result.transactions] == [
        (Decimal("15.99"), TransactionType.EXPENSE, Category.ENTERTAINMENT),
        (Decimal("2500.00"), TransactionType.INCOME, Category.SALARY),
    ]
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Line 4: both Debit")


def test_account_number_comes_from_first_data_row():
    csv_text = _dedent(
        """
        Date,Amount,Description,Merchant,Account Number
        08/01/2025,-12.00,SHELL OIL 1234,SHELL,xxxx1234
        08/02/2025,-8.00,SHELL OIL 1234,SHELL,xxxx9999
        """
    )

    result = import_statement(csv_text)

    assert result.account_info == AccountInfo(bank_name="Wells Fargo", account_number="xxxx1234")


def test_unknown_format_short_circuits():
    result = import_statement("Foo,Bar\n1,2\n")
    assert result.transactions == []
    assert result.account_info is None
    assert result.errors == ["Bank format not recognized. Please select the bank manually."]


def test_header_only_file_is_empty():
    for content in ("", "\n\n", "Posting Date,Description,Type,Amount\n"):
        result = import_statement(content)
        assert result.transactions == []
        assert result.account_info is None
        assert result.errors == ["File is empty or has no data rows"]


def test_categorization_can_be_disabled_and_account_id_is_stamped():
    csv_text = "Posting Date,Description,Type,Amount\n08/15/2025,STARBUCKS #1,DEBIT,-4.10\n"

    result = import_statement(csv_text, account_id="acct-1", categorize_rows=False)

    (t,) = result.transactions
    assert t.category is Category.OTHER
    assert t.account_id == "acct-1"


def test_transaction_ids_are_unique_across_imports():
    csv_text = "Posting Date,Description,Type,Amount\n08/15/2025,STARBUCKS #1,DEBIT,-4.10\n"
    first = import_statement(csv_text).transactions[0]
    second = import_statement(csv_text).transactions[0]
    assert first.id.startswith("imported-")
    assert first.id != second.id


def test_validate_file():
    assert validate_file("").valid is False
    assert validate_file("a,b\n").error == "File is empty or does not contain enough data"
    single = validate_file("single\nrow\n")
    assert single.valid is False
    assert single.error == "File does not have enough columns"
    ok = validate_file("a,b\n1,2")
    assert ok.valid is True
    assert ok.error is None


@pytest.mark.parametrize("sep", ["\x85", "\x0c", "\u2028"])
def test_unicode_line_breaks_inside_a_description(sep):
    csv_text = (
        "Posting Date,Description,Type,Amount\n"
        f"08/15/2025,CAFE{sep}LATTE,DEBIT,-4.10\n"
        "pending,COFFEE,DEBIT,-3.00\n"
    )

    result = import_statement(csv_text)

    assert [t.description for t in result.transactions] == [f"CAFE{sep}LATTE"]
    assert result.transactions[0].category is Category.FOOD
    assert result.errors == ["Line 3: date missing or invalid"]


def test_leading_byte_order_mark_is_ignored():
    csv_text = "\ufeffPosting Date,Description,Type,Amount\n08/15/2025,STARBUCKS #1,DEBIT,-4.10\n"

    result = import_statement(csv_text)

    assert result.errors == []
    assert result.account_info == AccountInfo(bank_name="Chase", account_number=None)
    assert len(result.transactions) == 1
    assert validate_file(csv_text).valid is True
