from __future__ import annotations

import re

from .config import settings
from .errors import DiceRangeError, DiceSyntaxError
from .models import FATE, DiceSpec, KeepDrop, KeepDropMode, Modifier, Sides, Success, SuccessMode


_HEAD_RE = re.compile(r"^(?P<count>\d*)d(?P<sides>\d+|f)", re.ASCII)

# Longest keyword first so "kh" is not read as "k" followed by junk.
_MODIFIER_RE = re.compile(r"(?P<key>kh|kl|k|dh|dl|d|ev|rv|v)(?P<value>\d+)", re.ASCII)
_CONSTANT_RE = re.compile(r"(?P<constant>[+-]\d+)", re.ASCII)

_KEEP_DROP_KEYS: dict[str, KeepDropMode] = {
    "k": "keep_highest",
    "kh": "keep_highest",
    "kl": "keep_lowest",
    "d": "drop_lowest",
    "dl": "drop_lowest",
    "dh": "drop_highest",
}

_SUCCESS_KEYS: dict[str, SuccessMode] = {
    "v": "versus",
    "ev": "exploding",
    "rv": "reroll",
}


def canonical_notation(token: str) -> str:
    return token.strip().lower()


def _syntax_error(token: str, detail: str) -> DiceSyntaxError:
    return DiceSyntaxError(f"{detail} in '{token}'. Example: '2d6+3', '4d6kh3' or '6d10v8'.")


def _parse_modifiers(token: str, text: str) -> tuple[Modifier | None, str]:
    """Consume keep/drop and success modifiers; return the modifier and the unparsed tail."""
    keep_drop: KeepDrop | None = None
    success: Success | None = None
    pos = 0

    while True:
        m = _MODIFIER_RE.match(text, pos)
        if not m:
            break

        key, value = m.group("key"), int(m.group("value"))
        if key in _KEEP_DROP_KEYS:
            if keep_drop is not None:
                raise _syntax_error(token, "More than one keep/drop modifier")
            keep_drop = KeepDrop(mode=_KEEP_DROP_KEYS[key], amount=value)
        else:
            if success is not None:
                raise _syntax_error(token, "More than one success modifier")
            success = Success(mode=_SUCCESS_KEYS[key], threshold=value)
        pos = m.end()

    if keep_drop is not None and success is not None:
        raise _syntax_error(token, "Keep/drop and success counting cannot be combined")

    return keep_drop or success, text[pos:]


def _validate(token: str, spec: DiceSpec, max_dice: int) -> None:
    if spec.count < 1:
        raise DiceRangeError(f"Dice count must be at least 1 in '{token}'.")
    if spec.count > max_dice:
        raise DiceRangeError(f"Too many dice in '{token}': {spec.count} (max {max_dice}).")
    if isinstance(spec.sides, int) and spec.sides < 2:
        raise DiceRangeError(f"A die needs at least 2 sides in '{token}'.")

    keep_drop = spec.keep_drop
    if keep_drop is not None:
        if keep_drop.amount < 1:
            raise DiceRangeError(f"Keep/drop amount must be at least 1 in '{token}'.")
        if keep_drop.amount > spec.count:
            raise DiceRangeError(
                f"Cannot keep or drop {keep_drop.amount} of {spec.count} dice in '{token}'."
            )


def parse_notation(token: str, max_dice: int | None = None) -> DiceSpec:
    """Parse one dice expression such as "4d6kh3", "6d10ev8" or "4dF+1".

    Raises DiceSyntaxError when the token does not match the grammar and
    DiceRangeError when a number in it is out of bounds.
    """
    if max_dice is None:
        max_dice = settings.max_dice

    text = canonical_notation(token)
    if not text:
        raise DiceSyntaxError("Empty dice expression. Example: '2d6+3'.")

    head = _HEAD_RE.match(text)
    if not head:
        raise _syntax_error(text, "Expected 'NdX' or 'NdF'")

    count_str = head.group("count")
    count = int(count_str) if count_str else 1
    sides_str = head.group("sides")
    sides: Sides = FATE if sides_str == "f" else int(sides_str)

    modifier, tail = _parse_modifiers(text, text[head.end():])

    constant: int | None = None
    if tail:
        m = _CONSTANT_RE.fullmatch(tail)
        if not m:
            raise _syntax_error(text, f"Unexpected '{tail}'")
        constant = int(m.group("constant"))

    spec = DiceSpec(count=count, sides=sides, modifier=modifier, constant=constant)
    _validate(text, spec, max_dice)
    return spec
