"""Die code parser.

A die code reads ``[count]<mode>[0]<faces>[.<threshold>][<sign><modifier>]``,
for example ``3d6``, ``d20+5``, ``4k6.3``, ``3x4.3+7`` or ``3d03``.

Mode letters (case sensitive):
  d  sum the dice
  x  explode: roll again while a die meets the threshold
  e  explode all: roll again while the total meets threshold x dice
  k  keep the highest <threshold> dice
  K  keep the lowest <threshold> dice
  n  count dice at or above the threshold
  N  count dice at or below the threshold

A face literal with a leading ``0`` makes the die zero-based (``d03`` rolls
0..3). The code is lexed in stages: modifier clause, then mode letter, then
face and threshold.
"""

from __future__ import annotations

import enum
import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from droll.engine import InvalidRoll, RollOutcome

_SIGN_RE = re.compile(r"([+-])")
_LETTER_RE = re.compile(r"[A-Za-z]")
_COUNT_RE = re.compile(r"[0-9]*")
_LEADING_DIGITS_RE = re.compile(r"[0-9]+")
# Optional single leading zero, then a non-zero digit: d05 and d10 fit, d0 and d00 do not.
_FACE_SHAPE_RE = re.compile(r"0?[1-9][0-9]*")

# Two-digit dice counts, as in 99d6.
_MAX_DICE = 99


class Mode(str, enum.Enum):
    """Roll-resolution strategy, keyed by its notation letter."""

    sum = "d"
    explode = "x"
    explode_all = "e"
    keep_highest = "k"
    keep_lowest = "K"
    count_min = "n"
    count_max = "N"


KEEP_MODES = frozenset({Mode.keep_highest, Mode.keep_lowest})


class Sign(str, enum.Enum):
    plus = "+"
    minus = "-"


class NotationError(ValueError):
    """Base class for die codes that cannot be rolled."""

    kind = "invalid"

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"{reason}: {code!r}")
        self.code = code
        self.reason = reason


class MalformedNotation(NotationError):
    """Raised when a die code does not fit the grammar."""

    kind = "malformed"


class DegenerateSpecification(NotationError):
    """Raised when a die code parses but describes a pointless roll (d1, 3d6.1, 0d6)."""

    kind = "degenerate"


class DieSpecification(BaseModel):
    """A parsed die code. Build with :func:`parse`; roll as often as needed."""

    model_config = ConfigDict(frozen=True)

    code: str
    dice_count: int = 1
    mode: Mode = Mode.sum
    face_count: int = 0
    zero_based: bool = False
    threshold: int = 0
    sign: Sign = Sign.plus
    modifier: int = 0
    well_formed: bool = True

    @property
    def signed_modifier(self) -> int:
        return -self.modifier if self.sign == Sign.minus else self.modifier

    def check(self) -> None:
        """Raise a NotationError subclass if this specification cannot be rolled.

        Raises:
            MalformedNotation: The code did not fit the grammar shape.
            DegenerateSpecification: The fields are out of range.
        """
        if not self.well_formed:
            raise MalformedNotation(self.code, "Expected a die size after the mode letter")
        if self.face_count < 1:
            raise DegenerateSpecification(self.code, "Die needs at least one face")
        if self.threshold < 1:
            raise DegenerateSpecification(self.code, "Threshold must be at least 1")
        if self.dice_count < 1:
            raise DegenerateSpecification(self.code, "Must roll at least one die")
        if self.dice_count > _MAX_DICE:
            raise DegenerateSpecification(self.code, f"Too many dice (max {_MAX_DICE})")
        if not self.zero_based:
            if self.face_count < 2:
                raise DegenerateSpecification(self.code, "Die needs at least two faces")
            if self.mode not in KEEP_MODES and self.threshold < 2:
                raise DegenerateSpecification(self.code, "Threshold must be at least 2")

    def problem(self) -> NotationError | None:
        """Return the validation error, or None when the specification is rollable."""
        try:
            self.check()
        except NotationError as exc:
            return exc
        return None

    def valid(self) -> bool:
        return self.problem() is None

    def roll(self) -> RollOutcome | InvalidRoll:
        from droll.engine import roll

        return roll(self)


def default_threshold(mode: Mode, face_count: int) -> int:
    """Return the threshold a die code gets when it names none.

    Keep modes keep one die and ``N`` counts dice showing 1 or less; the
    rest work off the die's maximum face.
    """
    if mode in (Mode.keep_highest, Mode.keep_lowest, Mode.count_max):
        return 1
    return face_count


def split_modifier(code: str) -> tuple[str, str | None, str]:
    """Split off the trailing ``+N``/``-N`` clause at the first sign character."""
    parts = _SIGN_RE.split(code, maxsplit=1)
    if len(parts) == 1:
        return code, None, ""
    head, sign, rest = parts
    return head, sign, rest


def split_mode(code: str, head: str) -> tuple[str, str, str]:
    """Split the head clause around its mode letter into (count, letter, tail).

    Raises:
        MalformedNotation: If there is no letter or the count is not a number.
    """
    m = _LETTER_RE.search(head)
    if not m:
        raise MalformedNotation(code, "Missing die mode letter")
    count = head[: m.start()]
    if not _COUNT_RE.fullmatch(count):
        raise MalformedNotation(code, "Dice count must be a number")
    return count, m.group(), head[m.end() :]


def split_faces(tail: str) -> tuple[str, str | None]:
    """Split the die size from an explicit ``.threshold``. A bare ``.`` names none."""
    faces, _, threshold = tail.partition(".")
    return faces, (threshold or None)


def _leading_int(literal: str) -> int:
    # Anything after the leading digits is ignored.
    m = _LEADING_DIGITS_RE.match(literal)
    return int(m.group()) if m else 0


def parse(code: str) -> DieSpecification:
    """Parse a die code into a DieSpecification.

    Codes that decompose into fields always parse, even when they cannot be
    rolled (``d``, ``1d``, ``0d6``); check :meth:`DieSpecification.valid`.

    Args:
        code: Die code, e.g. "3x4.3+7".

    Returns:
        The parsed specification.

    Raises:
        MalformedNotation: If the code has no recognizable mode letter or a
            non-numeric dice count.
    """
    head, sign, modifier = split_modifier(code)
    count, letter, tail = split_mode(code, head)
    try:
        mode = Mode(letter)
    except ValueError:
        raise MalformedNotation(code, f"Unknown die mode {letter!r}") from None
    faces, threshold = split_faces(tail)

    face_count = _leading_int(faces)
    return DieSpecification(
        code=code,
        dice_count=int(count) if count else 1,
        mode=mode,
        face_count=face_count,
        zero_based=faces.startswith("0"),
        threshold=(
            default_threshold(mode, face_count) if threshold is None else _leading_int(threshold)
        ),
        sign=Sign(sign) if sign else Sign.plus,
        modifier=_leading_int(modifier),
        well_formed=_FACE_SHAPE_RE.match(faces) is not None,
    )
