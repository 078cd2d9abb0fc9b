from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from mcp.server.fastmcp import FastMCP

from .dice import roll
from .formatting import format_groups, format_result
from .logger import get_logger
from .models import RollResult, RollResultGroup


logger = get_logger(__name__)

mcp = FastMCP("soloterm-dice")


HELP_TEXT = """Input Format

One roll per line. Labels are optional. Multiple dice expressions on one
line are separated by commas.

  2d6
  2d6, 1d8
  Attack: 1d20+5
  Attack: 1d20+5, 1d6
  Attack (Hard): 1d8, 1d10

Basic Notation

  NdX      Roll N dice with X sides
  NdX+C    Add constant C to the total
  NdX-C    Subtract constant C

Keep and Drop

  NdXkZ    Keep Z highest (also: khZ)
  NdXklZ   Keep Z lowest
  NdXdZ    Drop Z lowest (also: dlZ)
  NdXdhZ   Drop Z highest

  4d6kh3   Roll 4d6, keep 3 highest
  2d20kh1  Advantage (keep highest)
  2d20kl1  Disadvantage (keep lowest)

  (n) = dropped die in results

Success Counting (Versus)

  NdXvT    Count dice rolling T or higher
  NdXevT   Exploding: a match rerolls and adds to that die's total
  NdXrvT   Reroll: a match adds an extra die to the roll

  6d10v8   Roll 6d10, count successes >= 8

Fudge / Fate Dice

  NdF      Roll N Fate/Fudge dice (-1, 0, +1)
  4dF      Standard Fate roll
  4dF+2    Fate roll with +2 bonus"""


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def result_to_dict(result: RollResult) -> dict[str, Any]:
    if result.err is not None:
        return {"notation": result.notation, "error": str(result.err)}

    return {
        "notation": result.notation,
        "rolls": list(result.rolls),
        "dropped": list(result.dropped),
        "total": result.total,
        "display": format_result(result),
    }


def group_to_dict(group: RollResultGroup) -> dict[str, Any]:
    return {
        "label": group.label,
        "results": [result_to_dict(r) for r in group.results],
    }


def roll_from_text(text: str) -> dict[str, Any]:
    """Roll a multi-line request. Raises ValueError only for an empty request."""
    if not text or not text.strip():
        raise ValueError("Empty input. Example: '2d6+3' or 'Attack: 1d20+5, 1d6'.")

    groups = roll(text)
    return {
        "timestamp": _now_utc_iso(),
        "input": text,
        "groups": [group_to_dict(g) for g in groups],
        "text": format_groups(groups),
    }


@mcp.tool()
def roll_dice(text: str):
    """Roll dice for a solo RPG session.

    Input: one or more lines of dice notation, e.g. "Attack: 1d20+5, 1d6".
    Output: per-line groups with totals, kept and dropped dice, plus the
    rendered text. Bad expressions are reported per result, not raised.
    """
    payload = roll_from_text(text)
    logger.info("Rolled %r", text)
    return payload


@mcp.tool()
def dice_help() -> str:
    """Describe the supported dice notation."""
    return HELP_TEXT


def run() -> None:
    # Default transport is stdio.
    mcp.run()


if __name__ == "__main__":
    run()
