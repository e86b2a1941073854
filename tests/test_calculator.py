from datetime import date, timedelta

import pytest

from dailyluck.core.calculator import (
    _round_half_up,
    day_of_year,
    find_next_date,
    luck,
    raw_luck,
)

SECRET = "userSecretA"
CODE = "1234-ABCD-5678-EF90"
DAY = date(2024, 3, 15)


def test_day_of_year_counts_leap_day():
    assert day_of_year(date(2024, 1, 1)) == 1
    assert day_of_year(DAY) == 75
    assert day_of_year(date(2024, 12, 31)) == 366
    assert day_of_year(date(2023, 12, 31)) == 365


@pytest.mark.parametrize("secret, code, day, raw, score", [
    (SECRET, CODE, DAY, 138, 14),
    ("", "", date(2024, 1, 1), 683, 70),
    ("k", "AAAA-BBBB-CCCC-DDDD", date(2023, 12, 31), 81, 8),
])
def test_known_scores(secret, code, day, raw, score):
    assert raw_luck(secret, code, day) == raw
    assert luck(secret, code, day) == score


def test_score_changes_with_the_day():
    assert luck(SECRET, CODE, date(2024, 3, 16)) == 69


def test_ten_consecutive_days():
    scores = [luck(SECRET, CODE, DAY + timedelta(days=i)) for i in range(10)]
    assert scores == [14, 69, 78, 49, 59, 44, 34, 82, 72, 32]


def test_same_inputs_same_score():
    assert all(luck(SECRET, CODE, DAY) == 14 for _ in range(5))


def test_scores_stay_in_range():
    for i in range(500):
        day = date(2024, 1, 1) + timedelta(days=i % 366)
        assert 0 <= luck("secret", f"user-{i}", day) <= 100


def test_jackpot_band_share():
    hits = sum(1 for i in range(2000) if luck("secret", f"user-{i}", DAY) == 100)
    assert hits == 62


def test_find_next_date():
    assert find_next_date(SECRET, CODE, 14, DAY) == (date(2024, 4, 14), 30)


def test_find_next_date_skips_the_start_day():
    found = find_next_date(SECRET, CODE, 69, date(2024, 3, 15))
    assert found == (date(2024, 3, 16), 1)


def test_find_next_date_gives_up():
    assert find_next_date(SECRET, CODE, 14, DAY, max_days=5) is None


@pytest.mark.parametrize("code, raw, score", [
    ("user-20", 747, 76),
    ("user-22", 661, 68),
    ("user-24", 614, 63),
    ("user-26", 528, 54),
    ("user-28", 264, 27),
    ("user-36", 265, 27),
])
def test_known_scores_with_large_hashes(code, raw, score):
    assert raw_luck("secret", code, DAY) == raw
    assert luck("secret", code, DAY) == score


def test_round_half_up_keeps_large_integers():
    odd = float(2 ** 52 + 1)
    assert _round_half_up(odd) == 2 ** 52 + 1
    assert _round_half_up(8344178397826017.0) == 8344178397826017
    assert _round_half_up(2.5) == 3
    assert _round_half_up(2.4999) == 2
    assert _round_half_up(0.0) == 0
