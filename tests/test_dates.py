from datetime import date

import pytest

from dailyluck.core.dates import month_day_key, parse_date, parse_month_day

TODAY = date(2024, 6, 1)


@pytest.mark.parametrize("text, expected", [
    ("2024-03-15", date(2024, 3, 15)),
    ("2024/3/5", date(2024, 3, 5)),
    ("2024.03.15", date(2024, 3, 15)),
    ("2024 03 15", date(2024, 3, 15)),
    ("03-15", date(2024, 3, 15)),
    ("12/25", date(2024, 12, 25)),
    ("24-02-29", date(2024, 2, 29)),
    ("44-01-01", date(2044, 1, 1)),
    ("45-01-01", date(1945, 1, 1)),
])
def test_parse_date_accepts(text, expected):
    assert parse_date(text, TODAY) == expected


@pytest.mark.parametrize("text", [
    "", "   ", None, "abc", "2024-02-30", "2023-02-29", "13-01", "0-10",
    "2024-03-15-01", "15", "2024-3x-15",
])
def test_parse_date_rejects(text):
    assert parse_date(text, TODAY) is None


def test_parse_month_day():
    assert parse_month_day("04-01") == (4, 1)
    assert parse_month_day("2-29") == (2, 29)


@pytest.mark.parametrize("text", ["", "4/1", "13-01", "02-30", "2024-04-01"])
def test_parse_month_day_rejects(text):
    with pytest.raises(ValueError):
        parse_month_day(text)


def test_month_day_key():
    assert month_day_key(date(2024, 1, 5)) == "01-05"
