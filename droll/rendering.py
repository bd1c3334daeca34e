"""Plain-text rendering of roll results, e.g. ``3d6+2: [3, 4, 1] + 2 = 10``."""

from __future__ import annotations

from droll.engine import InvalidRoll, RollOutcome


def format_outcome(outcome: RollOutcome) -> str:
    rolls = ", ".join(str(r) for r in outcome.rolls)
    return (
        f"{outcome.code}: [{rolls}] {outcome.sign.value} {outcome.modifier} = {outcome.total}"
    )


def format_invalid(result: InvalidRoll) -> str:
    return f"bad die code: {result.code}"


def render(result: RollOutcome | InvalidRoll) -> str:
    """Render either result variant as a single line."""
    if isinstance(result, InvalidRoll):
        return format_invalid(result)
    return format_outcome(result)
