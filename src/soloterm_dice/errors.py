from __future__ import annotations


class DiceError(ValueError):
    """User-facing notation errors. Messages start with a stable [CODE] prefix."""

    code = "DICE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(f"[{self.code}] {message}")


class DiceSyntaxError(DiceError):
    """The token does not match the notation grammar."""

    code = "SYNTAX_ERROR"


class DiceRangeError(DiceError):
    """Count, sides or keep/drop amount out of bounds."""

    code = "RANGE_ERROR"


class ExplosionOverflowError(DiceError):
    """An exploding or reroll chain rolled more dice than allowed."""

    code = "EXPLOSION_OVERFLOW"
