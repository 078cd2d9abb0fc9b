from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, TypeAlias

from .errors import DiceError


KeepDropMode: TypeAlias = Literal["keep_highest", "keep_lowest", "drop_highest", "drop_lowest"]
SuccessMode: TypeAlias = Literal["versus", "exploding", "reroll"]

FATE_FACES: tuple[int, ...] = (-1, 0, 1)


class Fate(Enum):
    """Sides marker for Fate/Fudge dice (faces -1, 0, +1)."""

    FATE = "F"


FATE = Fate.FATE

Sides: TypeAlias = int | Fate


@dataclass(frozen=True)
class KeepDrop:
    mode: KeepDropMode
    amount: int


@dataclass(frozen=True)
class Success:
    mode: SuccessMode
    threshold: int


Modifier: TypeAlias = KeepDrop | Success


@dataclass(frozen=True)
class DiceSpec:
    count: int
    sides: Sides
    modifier: Modifier | None = None
    constant: int | None = None

    @property
    def is_fate(self) -> bool:
        return isinstance(self.sides, Fate)

    @property
    def keep_drop(self) -> KeepDrop | None:
        return self.modifier if isinstance(self.modifier, KeepDrop) else None

    @property
    def success(self) -> Success | None:
        return self.modifier if isinstance(self.modifier, Success) else None


@dataclass(frozen=True)
class RollResult:
    notation: str
    rolls: tuple[int, ...] = ()
    dropped: tuple[int, ...] = ()
    total: int = 0
    err: DiceError | None = None

    @property
    def ok(self) -> bool:
        return self.err is None

    @property
    def die_count(self) -> int:
        return len(self.rolls) + len(self.dropped)

    @classmethod
    def failed(cls, notation: str, err: DiceError) -> RollResult:
        return cls(notation=notation, err=err)


@dataclass(frozen=True)
class RollResultGroup:
    label: str | None
    results: tuple[RollResult, ...]
