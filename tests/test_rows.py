from __future__ import annotations

import pytest

from budget_insights.ingest.rows import iter_data_lines, parse_line


def test_simple_fields_are_split_and_trimmed():
    assert parse_line("a,b,c") == ["a", "b", "c"]
    assert parse_line(" a , b ,c ") == ["a", "b", "c"]


def test_quoted_field_may_contain_delimiter():
    assert parse_line('01/02/2025,"ACME, INC",-5.00') == ["01/02/2025", "ACME, INC", "-5.00"]


def test_doubled_quote_is_a_literal_quote():
    assert parse_line('"He said ""hi""",2') == ['He said "hi"', "2"]


def test_empty_fields_are_kept():
    assert parse_line("a,,c,") == ["a", "", "c", ""]


def test_blank_line_yields_no_fields():
    assert parse_line("") == []
    assert parse_line("   ") == []


def test_line_terminator_is_ignored():
    assert parse_line("a,b\r\n") == ["a", "b"]


def test_alternative_delimiter():
    assert parse_line("a;b;c", delimiter=";") == ["a", "b", "c"]


def test_iter_data_lines_skips_blank_lines_and_keeps_numbers():
    content = "header\n\n   \nrow\n"
    assert list(iter_data_lines(content)) == [(1, "header"), (4, "row")]


def test_iter_data_lines_handles_crlf():
    assert list(iter_data_lines("h\r\nr1\r\n\r\nr2")) == [(1, "h"), (2, "r1"), (4, "r2")]


@pytest.mark.parametrize("sep", ["\x85", "\x0b", "\x0c", "\x1c", "\x1e", "\u2028", "\u2029"])
def test_only_newlines_end_a_record(sep):
    content = f"h\nCAFE{sep}LATTE,1\nlast,2"
    assert list(iter_data_lines(content)) == [(1, "h"), (2, f"CAFE{sep}LATTE,1"), (3, "last,2")]


def test_bare_carriage_return_ends_a_record():
    assert list(iter_data_lines("h\rr1\rr2")) == [(1, "h"), (2, "r1"), (3, "r2")]
