"""Plain-text rendering of roll results.

Callers that add colour markup use merge_dice() directly and style the
dropped dice themselves; format_result() is the uncoloured equivalent:

    "4d6kh3" -> "13 {(2) 3 4 6}"
    "1d20"   -> "17"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .models import RollResult, RollResultGroup


@dataclass(frozen=True)
class DisplayDie:
    value: int
    dropped: bool = False


def merge_dice(result: RollResult) -> list[DisplayDie]:
    """Merge the ascending kept and dropped values into one ascending list.

    Ties take the kept value first.
    """
    rolls, dropped = result.rolls, result.dropped
    merged: list[DisplayDie] = []
    ri = di = 0

    while ri < len(rolls) and di < len(dropped):
        if rolls[ri] <= dropped[di]:
            merged.append(DisplayDie(rolls[ri]))
            ri += 1
        else:
            merged.append(DisplayDie(dropped[di], dropped=True))
            di += 1

    merged.extend(DisplayDie(v) for v in rolls[ri:])
    merged.extend(DisplayDie(v, dropped=True) for v in dropped[di:])
    return merged


def format_die(die: DisplayDie) -> str:
    return f"({die.value})" if die.dropped else str(die.value)


def format_result(result: RollResult) -> str:
    if not result.ok:
        return str(result.err)

    if result.die_count <= 1:
        return str(result.total)

    dice = " ".join(format_die(d) for d in merge_dice(result))
    return f"{result.total} {{{dice}}}"


def format_group(group: RollResultGroup) -> str:
    parts = [
        f"{r.notation} -> {format_result(r)}" if r.ok else format_result(r)
        for r in group.results
    ]
    line = ", ".join(parts)
    return f"{group.label}: {line}" if group.label else line


def format_groups(groups: Iterable[RollResultGroup]) -> str:
    """Render groups one per line, as inserted into a session log."""
    return "\n".join(format_group(g) for g in groups)
