import random

import pytest

from dailyluck.jrrp.logic.evaluator import evaluate
from dailyluck.jrrp.logic.generator import ExpressionGenerator


@pytest.mark.parametrize("base", range(1, 10))
def test_every_candidate_evaluates_to_target(base):
    gen = ExpressionGenerator(rng=random.Random(base))
    for target in range(0, 101):
        candidates = gen.generate(target, base)
        assert candidates
        assert len(set(candidates)) == len(candidates)
        for expr in candidates:
            assert evaluate(expr) == target, (base, target, expr)


@pytest.mark.parametrize("name", ["decimal", "factor", "sqrt_factor", "binary", "mixed"])
def test_core_strategies_never_give_up(generator, name):
    for base in (1, 2, 6, 9):
        for target in range(0, 101):
            assert generator.run_strategy(name, target, base) is not None, (name, base, target)


def test_decimal_shapes(generator):
    table = generator.table(6)
    assert generator.decimal(57, table) == "((6 * ((6 - (6 / 6)) << (6 / 6))) - (6 >> (6 / 6)))"
    assert generator.decimal(14, table) == "(((6 - (6 / 6)) << (6 / 6)) + (6 - ((6 / 6) << (6 / 6))))"
    assert generator.decimal(40, table) == "((6 - ((6 / 6) << (6 / 6))) * ((6 - (6 / 6)) << (6 / 6)))"


def test_decimal_memoizes_into_the_table(generator):
    table = generator.table(6)
    expr = generator.decimal(57, table)
    assert table.lookup(57) == expr
    assert generator.decimal(57, table) == expr


def test_decimal_is_deterministic():
    a = ExpressionGenerator(rng=random.Random(1))
    b = ExpressionGenerator(rng=random.Random(2))
    assert a.decimal(83, a.table(4)) == b.decimal(83, b.table(4))


def test_operator_mix_can_be_exhausted(generator):
    assert generator.run_strategy("operator_mix", 97, 1) is None
    assert generator.run_strategy("operator_mix", 97, 6) is not None


def test_generate_still_has_candidates_when_operator_mix_fails(generator):
    candidates = generator.generate(97, 1)
    assert len(candidates) >= 1
    assert all(evaluate(c) == 97 for c in candidates)


def test_falls_back_to_decimal_string(generator):
    generator.strategies = {"nothing": lambda target, table: None}
    assert generator.generate(57, 6) == ["57"]


def test_mismatching_expression_is_dropped(generator):
    generator.strategies = {"wrong": lambda target, table: "(6 + 6)"}
    assert generator.run_strategy("wrong", 5, 6) is None
    assert generator.generate(5, 6) == ["5"]


def test_tables_are_reused_per_base(generator):
    assert generator.table(6) is generator.table(6)
    assert generator.table(6) is not generator.table(7)


@pytest.mark.parametrize("target, base", [(-1, 6), (101, 6), (True, 6), (5, 0), (5, 10)])
def test_generate_rejects_out_of_range(generator, target, base):
    with pytest.raises(ValueError):
        generator.generate(target, base)
