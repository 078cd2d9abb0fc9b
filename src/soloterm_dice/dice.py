from __future__ import annotations

import random
import secrets

from .config import settings
from .errors import DiceError, ExplosionOverflowError
from .logger import get_logger
from .models import FATE_FACES, DiceSpec, KeepDrop, RollResult, RollResultGroup, Success
from .parser import canonical_notation, parse_notation
from .tokenizer import tokenize


logger = get_logger(__name__)


def _new_rng() -> random.Random:
    return secrets.SystemRandom()


def _roll_die(spec: DiceSpec, rng: random.Random) -> int:
    if spec.is_fate:
        return rng.choice(FATE_FACES)
    return rng.randint(1, spec.sides)


def _overflow(notation: str, max_rolled: int) -> ExplosionOverflowError:
    return ExplosionOverflowError(
        f"'{notation}' would roll more than {max_rolled} dice. Raise the threshold or roll fewer dice."
    )


def _apply_keep_drop(values: list[int], keep_drop: KeepDrop | None) -> tuple[list[int], list[int]]:
    """Split ascending values into (kept, dropped)."""
    if keep_drop is None:
        return values, []

    z = keep_drop.amount
    n = len(values)
    if keep_drop.mode == "keep_highest":
        return values[n - z:], values[:n - z]
    if keep_drop.mode == "keep_lowest":
        return values[:z], values[z:]
    if keep_drop.mode == "drop_highest":
        return values[:n - z], values[n - z:]
    # drop_lowest
    return values[z:], values[:z]


def _roll_exploding(
    spec: DiceSpec, success: Success, notation: str, rng: random.Random, max_rolled: int
) -> tuple[list[int], int]:
    """Each hit adds another roll onto the same die, chaining while the new roll also hits."""
    values: list[int] = []
    successes = 0
    rolled = 0

    for _ in range(spec.count):
        if rolled >= max_rolled:
            raise _overflow(notation, max_rolled)
        last = _roll_die(spec, rng)
        rolled += 1
        value = last
        if last >= success.threshold:
            successes += 1

        while last >= success.threshold:
            if rolled >= max_rolled:
                raise _overflow(notation, max_rolled)
            last = _roll_die(spec, rng)
            rolled += 1
            value += last

        values.append(value)

    return values, successes


def _roll_reroll(
    spec: DiceSpec, success: Success, notation: str, rng: random.Random, max_rolled: int
) -> tuple[list[int], int]:
    """Each hit adds one independent die to the pool; added dice can hit too."""
    values: list[int] = []
    pending = spec.count

    while pending:
        if len(values) >= max_rolled:
            raise _overflow(notation, max_rolled)
        value = _roll_die(spec, rng)
        values.append(value)
        pending -= 1
        if value >= success.threshold:
            pending += 1

    return values, sum(1 for v in values if v >= success.threshold)


def evaluate(
    spec: DiceSpec,
    notation: str,
    rng: random.Random | None = None,
    max_rolled: int | None = None,
) -> RollResult:
    """Roll a parsed spec.

    rng is any random.Random-compatible source; it defaults to a fresh
    secrets.SystemRandom. Raises ExplosionOverflowError when an exploding or
    reroll expression needs more than max_rolled dice.
    """
    if rng is None:
        rng = _new_rng()
    if max_rolled is None:
        max_rolled = settings.max_rolled_dice

    constant = spec.constant or 0
    success = spec.success

    if success is None:
        values = sorted(_roll_die(spec, rng) for _ in range(spec.count))
        kept, dropped = _apply_keep_drop(values, spec.keep_drop)
        return RollResult(
            notation=notation,
            rolls=tuple(kept),
            dropped=tuple(dropped),
            total=sum(kept) + constant,
        )

    if success.mode == "versus":
        values = [_roll_die(spec, rng) for _ in range(spec.count)]
        successes = sum(1 for v in values if v >= success.threshold)
    else:
        if spec.count > max_rolled:
            raise _overflow(notation, max_rolled)
        roller = _roll_exploding if success.mode == "exploding" else _roll_reroll
        values, successes = roller(spec, success, notation, rng, max_rolled)

    return RollResult(
        notation=notation,
        rolls=tuple(sorted(values)),
        total=successes + constant,
    )


def roll_result(token: str, rng: random.Random | None = None) -> RollResult:
    """Parse and roll one token. Failures come back as a result with err set."""
    notation = canonical_notation(token)
    try:
        spec = parse_notation(notation)
        return evaluate(spec, notation, rng=rng)
    except DiceError as e:
        logger.debug("Roll failed for %r: %s", notation, e)
        return RollResult.failed(notation, e)


def roll(text: str, rng: random.Random | None = None) -> list[RollResultGroup]:
    """Roll every expression in a multi-line request.

    Each non-empty line becomes one group. A line may start with "Label: ",
    and may hold several comma-separated expressions:

        "Attack: 1d20+5, 1d6"  -> one group labelled "Attack", two results
    """
    if rng is None:
        rng = _new_rng()

    groups = [
        RollResultGroup(label=label, results=tuple(roll_result(token, rng) for token in tokens))
        for label, tokens in tokenize(text)
    ]

    logger.debug("Rolled %d group(s)", len(groups))
    return groups
