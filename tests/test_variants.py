import datetime

import pandas as pd
import pytest

from county_tools.scrapers import EARLIEST, NoVariantError, Variant, VariantTable


def _routine(name):
    def routine(scraper, raw=None):
        return name

    routine.__name__ = name
    return routine


@pytest.fixture
def table():
    # deliberately out of order
    return VariantTable(
        [
            Variant("2020-03-30", _routine("fetch2"), _routine("R2")),
            Variant("0", _routine("fetch0"), _routine("R0")),
            Variant("2020-02-22", _routine("fetch1"), _routine("R1")),
        ]
    )


@pytest.mark.parametrize(
    "reference_date,expected",
    [
        ("2020-03-01", "R1"),
        ("2020-04-01", "R2"),
        ("2020-01-01", "R0"),
        ("2020-02-22", "R1"),
        ("2020-02-21", "R0"),
        ("2020-03-30", "R2"),
        ("2020-03-29", "R1"),
    ],
)
def test_select_latest_start_not_after_reference(table, reference_date, expected):
    assert table.select(reference_date).normalize(None) == expected


def test_select_accepts_dates_and_timestamps(table):
    assert table.select(datetime.date(2020, 3, 1)).key == "2020-02-22"
    assert table.select(pd.Timestamp("2020-04-01 23:00")).key == "2020-03-30"


def test_select_defaults_to_today(table):
    assert table.select().key == "2020-03-30"


def test_zero_key_is_earliest(table):
    assert table.keys == [EARLIEST, "2020-02-22", "2020-03-30"]
    assert len(table) == 3


def test_no_variant_applies():
    table = VariantTable([Variant("2020-02-22", _routine("f"), _routine("n"))])
    with pytest.raises(NoVariantError):
        table.select("2020-01-01")


def test_duplicate_start_dates_rejected():
    with pytest.raises(ValueError):
        VariantTable(
            [
                Variant("2020-02-22", _routine("f"), _routine("a")),
                Variant("2020-02-22", _routine("f"), _routine("b")),
            ]
        )


def test_only_one_earliest():
    with pytest.raises(ValueError):
        VariantTable(
            [
                Variant("0", _routine("f"), _routine("a")),
                Variant(EARLIEST, _routine("f"), _routine("b")),
            ]
        )
