import pandas as pd
import pytest

from county_tools.scrapers.parse import (
    iso_date,
    parse_number,
    parse_published_date,
    parse_string,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1,234", 1234),
        (" 17 ", 17),
        ("12.5", 0),
        ("-3", 0),
        ("12.0", 12),
        ("", 0),
        (None, 0),
        ("n/a", 0),
        (float("nan"), 0),
        (7, 7),
        (7.0, 7),
        (-7, 0),
        (2.5, 0),
    ],
)
def test_parse_number(text, expected):
    out = parse_number(text)
    assert out == expected
    assert type(out) == type(expected)


def test_parse_number_default():
    assert parse_number("--", default=None) is None


def test_parse_string():
    assert parse_string("  Boone \n County ") == "Boone County"
    assert parse_string(None) == ""


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2020-04-27T18:13:20.273Z", "2020-04-27T18:13:20.273Z"),
        ("1585082918049", "2020-03-24T20:48:38.049Z"),
        (1585082918049, "2020-03-24T20:48:38.049Z"),
    ],
)
def test_parse_published_date(value, expected):
    assert parse_published_date(value) == expected


def test_parse_published_date_rejects_garbage():
    with pytest.raises(ValueError):
        parse_published_date("not a date")


def test_iso_date():
    assert iso_date(pd.Timestamp("2020-03-01 15:00")) == "2020-03-01"


def test_parse_number_rejects_invalid_counts():
    assert parse_number("-3", default=None) is None
    assert parse_number("12.5", default=None) is None
