"""Roll engine: draws die faces and resolves them according to the die mode."""

from __future__ import annotations

import logging
import random

from pydantic import BaseModel

from droll.config import settings
from droll.notation import (
    DieSpecification,
    MalformedNotation,
    Mode,
    NotationError,
    Sign,
    parse,
)

logger = logging.getLogger(__name__)


class RollOutcome(BaseModel):
    """Every die physically rolled, in the order drawn, and the final total."""

    code: str
    rolls: list[int]
    sign: Sign
    modifier: int
    total: int


class InvalidRoll(BaseModel):
    """Returned instead of a RollOutcome when a die code cannot be rolled."""

    code: str
    reason: str
    kind: str


def sample_face(zero_based: bool, face_count: int) -> int:
    """Draw one face uniformly from 0..face_count or 1..face_count."""
    return random.randint(0 if zero_based else 1, face_count)


def roll_one(face_count: int, mode: Mode, threshold: int, zero_based: bool) -> list[int]:
    """Roll a single die, following explosions when mode is Mode.explode.

    An exploding die keeps adding draws while the latest one meets the
    threshold, up to settings.explode_cap extra draws.
    """
    rolls = [sample_face(zero_based, face_count)]
    if mode != Mode.explode:
        return rolls

    cap = settings.explode_cap
    for _ in range(cap):
        if rolls[-1] < threshold:
            break
        rolls.append(sample_face(zero_based, face_count))
    else:
        if rolls[-1] >= threshold:
            logger.warning(
                "Explosion cap of %d reached on d%d (threshold %d)", cap, face_count, threshold
            )
    return rolls


def explode_on_total(spec: DieSpecification, rolls: list[int]) -> list[int]:
    """Append exploding dice while the running total keeps up with the threshold.

    The first round needs sum(rolls) >= threshold * dice_count. Every die
    appended raises the bar by another threshold. Returns a new list.
    """
    rolls = list(rolls)
    appended = 0
    for _ in range(settings.explode_all_cap):
        if sum(rolls) < spec.threshold * (spec.dice_count + appended):
            return rolls
        extra = roll_one(spec.face_count, Mode.explode, spec.threshold, spec.zero_based)
        rolls.extend(extra)
        appended += len(extra)
    logger.warning(
        "Explosion cap of %d rounds reached for %s", settings.explode_all_cap, spec.code
    )
    return rolls


def keep_highest(rolls: list[int], count: int) -> int:
    """Sum the `count` largest values (all of them if there are fewer)."""
    return sum(sorted(rolls, reverse=True)[:count])


def keep_lowest(rolls: list[int], count: int) -> int:
    """Sum the `count` smallest values (all of them if there are fewer)."""
    return sum(sorted(rolls)[:count])


def count_at_least(rolls: list[int], threshold: int) -> int:
    return sum(1 for r in rolls if r >= threshold)


def count_at_most(rolls: list[int], threshold: int) -> int:
    return sum(1 for r in rolls if r <= threshold)


def resolve_total(spec: DieSpecification, rolls: list[int]) -> int:
    """Apply the spec's mode transform and signed modifier to already-drawn rolls."""
    if spec.mode == Mode.keep_highest:
        total = keep_highest(rolls, spec.threshold)
    elif spec.mode == Mode.keep_lowest:
        total = keep_lowest(rolls, spec.threshold)
    elif spec.mode == Mode.count_min:
        total = count_at_least(rolls, spec.threshold)
    elif spec.mode == Mode.count_max:
        total = count_at_most(rolls, spec.threshold)
    else:
        total = sum(rolls)
    return total + spec.signed_modifier


def _invalid(exc: NotationError) -> InvalidRoll:
    logger.info("Rejected die code %r: %s", exc.code, exc.reason)
    return InvalidRoll(code=exc.code, reason=exc.reason, kind=exc.kind)


def roll(spec: DieSpecification) -> RollOutcome | InvalidRoll:
    """Roll a parsed die code.

    Args:
        spec: The parsed specification.

    Returns:
        A RollOutcome, or an InvalidRoll (without drawing any dice) when the
        specification fails validation.
    """
    problem = spec.problem()
    if problem is not None:
        return _invalid(problem)

    rolls: list[int] = []
    for _ in range(spec.dice_count):
        rolls.extend(roll_one(spec.face_count, spec.mode, spec.threshold, spec.zero_based))
    if spec.mode == Mode.explode_all:
        rolls = explode_on_total(spec, rolls)

    total = resolve_total(spec, rolls)
    logger.debug("Rolled %s: %s -> %d", spec.code, rolls, total)
    return RollOutcome(
        code=spec.code, rolls=rolls, sign=spec.sign, modifier=spec.modifier, total=total
    )


def roll_code(code: str) -> RollOutcome | InvalidRoll:
    """Parse and roll a die code. Bad codes yield an InvalidRoll rather than raising."""
    try:
        spec = parse(code)
    except MalformedNotation as exc:
        return _invalid(exc)
    return roll(spec)
