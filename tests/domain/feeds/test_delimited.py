from __future__ import annotations

import pytest

from itemsync.domain.feeds import iter_delimited_rows, parse_delimited_text
from tests.helpers.feeds import to_feed_text


def test_parse_simple_rows() -> None:
    rows = parse_delimited_text("a,b,c\n1,2,3\n")

    assert rows == [["a", "b", "c"], ["1", "2", "3"]]


def test_quoted_fields_keep_delimiters_quotes_and_newlines() -> None:
    text = 'id,comment\n1,"first line\nsecond, with comma"\n2,"say ""hi"""\n'

    rows = parse_delimited_text(text)

    assert rows == [
        ["id", "comment"],
        ["1", "first line\nsecond, with comma"],
        ["2", 'say "hi"'],
    ]


@pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
def test_line_terminators_end_rows(newline: str) -> None:
    rows = parse_delimited_text(f"a,b{newline}c,d{newline}")

    assert rows == [["a", "b"], ["c", "d"]]


def test_fields_are_not_trimmed_and_blank_rows_are_dropped() -> None:
    rows = parse_delimited_text(" a , b \n , \n\n c,d")

    assert rows == [[" a ", " b "], [" c", "d"]]


def test_trailing_empty_field_is_kept() -> None:
    assert parse_delimited_text("a,\n") == [["a", ""]]


def test_round_trip_of_awkward_values() -> None:
    original = [
        ["name", "notes", "colors"],
        ["Dupont", 'He said "matte, not gloss"', "white;\r\noak"],
        ["Léa", "multi\nline\nanswer", ""],
    ]

    assert parse_delimited_text(to_feed_text(original)) == original
    assert parse_delimited_text(to_feed_text(original, newline="\r\n")) == original


def test_result_is_reiterable_and_stable() -> None:
    text = 'a,"b\nc"\n1,2\n'

    rows = parse_delimited_text(text)

    assert list(rows) == list(rows)
    assert parse_delimited_text(text) == rows


def test_lazy_iteration_matches_eager_parse() -> None:
    text = "h1,h2\nx,y\n"

    assert list(iter_delimited_rows(text)) == parse_delimited_text(text)


def test_empty_text_yields_no_rows() -> None:
    assert parse_delimited_text("") == []
    assert parse_delimited_text("\n\r\n") == []
