import random
from datetime import date

import pytest

from dailyluck.jrrp.logic.evaluator import evaluate
from dailyluck.jrrp.logic.formatter import DisplayConfig, DisplayMode, ScoreFormatter
from dailyluck.jrrp.logic.generator import ExpressionGenerator

DAY = date(2024, 3, 15)


class CountingGenerator(ExpressionGenerator):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0

    def generate(self, target, base):
        self.calls += 1
        return super().generate(target, base)


class BrokenGenerator(ExpressionGenerator):
    def generate(self, target, base):
        raise RuntimeError("boom")


@pytest.fixture()
def formatter(clock):
    rng = random.Random(99)
    return ScoreFormatter(generator=CountingGenerator(rng=rng), rng=rng, ttl=3600, clock=clock)


def test_plain_mode(formatter):
    assert formatter.format(57, DAY, DisplayConfig()) == "57"
    assert formatter.generator.calls == 0


def test_binary_mode(formatter):
    cfg = DisplayConfig(mode=DisplayMode.BINARY)
    assert formatter.format(57, DAY, cfg) == "111001"
    assert formatter.format(0, DAY, cfg) == "0"


@pytest.mark.parametrize("base", [1, 6, 9])
def test_expression_mode(formatter, base):
    cfg = DisplayConfig(mode="expression", base_number=base)
    for score in (0, 1, 14, 57, 97, 100):
        shown = formatter.format(score, DAY, cfg)
        assert shown != str(score) or score == base
        assert evaluate(shown) == score


def test_restricted_date(formatter):
    cfg = DisplayConfig(mode="binary", restricted_date="04-01")
    assert formatter.format(57, DAY, cfg) == "57"
    assert formatter.format(57, date(2024, 4, 1), cfg) == "111001"
    assert formatter.format(57, date(2031, 4, 1), cfg) == "111001"


def test_candidates_are_cached(formatter, clock):
    first = formatter.candidates(57, 6)
    assert formatter.candidates(57, 6) == first
    assert formatter.generator.calls == 1
    clock.advance(3600)
    formatter.candidates(57, 6)
    assert formatter.generator.calls == 2


def test_one_cache_per_base(formatter):
    formatter.candidates(57, 6)
    formatter.candidates(57, 3)
    assert formatter.cache(6) is not formatter.cache(3)
    assert set(formatter.report()) == {"3", "6"}


def test_broken_generator_degrades_to_plain(clock, caplog):
    formatter = ScoreFormatter(generator=BrokenGenerator(), clock=clock)
    cfg = DisplayConfig(mode="expression")
    assert formatter.format(57, DAY, cfg) == "57"
    assert "Error formatting score 57" in caplog.text


def test_invalid_base_at_format_time_degrades_to_plain(formatter):
    cfg = DisplayConfig(mode="expression")
    object.__setattr__(cfg, "base_number", 0)
    assert formatter.format(57, DAY, cfg) == "57"


def test_warmup_fills_every_score(formatter):
    assert formatter.warmup(6) == 101
    assert formatter.warmup(6) == 0
    assert formatter.report()["6"]["fresh"] == 101


def test_purge_expired(formatter, clock):
    formatter.warmup(6)
    clock.advance(3600)
    assert formatter.purge_expired() == 101
    assert formatter.report()["6"]["entries"] == 0


@pytest.mark.parametrize("kwargs", [
    {"mode": "fancy"},
    {"restricted_date": "13-40"},
    {"restricted_date": "April 1st"},
    {"base_number": 0},
    {"base_number": 10},
])
def test_display_config_validation(kwargs):
    with pytest.raises(ValueError):
        DisplayConfig(**kwargs)


def test_display_config_from_mapping():
    cfg = DisplayConfig.from_mapping({
        "JRRP_DISPLAY_MODE": " Binary ",
        "JRRP_RESTRICTED_DATE": "",
        "JRRP_BASE_NUMBER": "7",
    })
    assert cfg == DisplayConfig(mode=DisplayMode.BINARY, restricted_date=None, base_number=7)
    assert DisplayConfig.from_mapping({}) == DisplayConfig()


def test_active_on():
    assert DisplayConfig().active_on(DAY)
    cfg = DisplayConfig(restricted_date="03-15")
    assert cfg.active_on(DAY)
    assert not cfg.active_on(date(2024, 3, 16))


def test_binary_mode_does_not_create_expression_caches(formatter):
    for base in (3, 6):
        assert formatter.format(57, DAY, DisplayConfig(mode="binary", base_number=base)) == "111001"
    assert formatter.report() == {}
    assert formatter.generator.calls == 0
