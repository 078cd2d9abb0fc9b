import random

import pytest

from soloterm_dice.dice import evaluate
from soloterm_dice.errors import ExplosionOverflowError
from soloterm_dice.parser import parse_notation


def _evaluate(token, rng, **kwargs):
    return evaluate(parse_notation(token), token, rng=rng, **kwargs)


def test_plain_roll_sums_sorted_dice(scripted):
    result = _evaluate("3d6+2", scripted([5, 1, 3]))

    assert result.rolls == (1, 3, 5)
    assert result.dropped == ()
    assert result.total == 11
    assert result.err is None


@pytest.mark.parametrize(
    ("token", "faces", "rolls", "dropped", "total"),
    [
        ("4d6kh3", [3, 6, 2, 4], (3, 4, 6), (2,), 13),
        ("4d6k3", [3, 6, 2, 4], (3, 4, 6), (2,), 13),
        ("2d20kl1", [15, 4], (4,), (15,), 4),
        ("4d6d1", [5, 1, 3, 3], (3, 3, 5), (1,), 11),
        ("4d6dh1", [5, 1, 3, 3], (1, 3, 3), (5,), 7),
        ("4d6kh3-1", [3, 6, 2, 4], (3, 4, 6), (2,), 12),
        ("3d6d3+2", [2, 2, 6], (), (2, 2, 6), 2),
    ],
)
def test_keep_drop(scripted, token, faces, rolls, dropped, total):
    result = _evaluate(token, scripted(faces))

    assert result.rolls == rolls
    assert result.dropped == dropped
    assert result.total == total


def test_versus_counts_successes(scripted):
    result = _evaluate("6d10v8", scripted([8, 2, 10, 7, 9, 1]))

    assert result.rolls == (1, 2, 7, 8, 9, 10)
    assert result.dropped == ()
    assert result.total == 3


def test_versus_adds_constant(scripted):
    result = _evaluate("3d6v5+1", scripted([5, 6, 1]))

    assert result.total == 3


def test_exploding_chains_onto_the_same_die(scripted):
    # 9 hits -> +8 hits -> +3 misses: one die worth 20. Then 2 and 5 miss.
    result = _evaluate("3d10ev8", scripted([9, 8, 3, 2, 5]))

    assert result.rolls == (2, 5, 20)
    assert result.dropped == ()
    assert result.total == 1


def test_reroll_adds_independent_dice(scripted):
    # 9 hits and adds a die, 3 misses, the added 10 hits and adds 1.
    result = _evaluate("2d10rv8", scripted([9, 3, 10, 1]))

    assert result.rolls == (1, 3, 9, 10)
    assert result.total == 2


def test_fate_dice(scripted):
    result = _evaluate("4dF+2", scripted([1, -1, 0, 1]))

    assert result.rolls == (-1, 0, 1, 1)
    assert result.total == 3


@pytest.mark.parametrize("token", ["1d6ev1", "1d6rv1", "3d10rv0", "2d20ev1+3"])
def test_pathological_chains_overflow(token):
    with pytest.raises(ExplosionOverflowError, match=r"^\[EXPLOSION_OVERFLOW\]"):
        _evaluate(token, random.Random(1))


def test_overflow_respects_cap_override(scripted):
    with pytest.raises(ExplosionOverflowError):
        _evaluate("2d6rv6", scripted([6, 6, 6, 1]), max_rolled=3)


def test_initial_count_above_cap_overflows():
    with pytest.raises(ExplosionOverflowError):
        _evaluate("200d6ev7", random.Random(1))


def test_exploding_budget_is_shared_between_dice(scripted):
    # First die explodes twice, using the whole budget before die two.
    with pytest.raises(ExplosionOverflowError):
        _evaluate("2d6ev6", scripted([6, 6, 1, 4]), max_rolled=3)


def test_chains_terminate_under_cap():
    rng = random.Random(42)
    for _ in range(200):
        exploding = _evaluate("10d6ev6", rng)
        reroll = _evaluate("10d6rv6", rng)

        assert len(exploding.rolls) == 10
        assert 10 <= len(reroll.rolls) <= 100
        assert reroll.total == sum(1 for r in reroll.rolls if r >= 6)
