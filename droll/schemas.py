"""Pydantic response models for the HTTP routes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from droll.notation import Mode, Sign


class SpecificationResponse(BaseModel):
    code: str
    dice_count: int
    mode: Mode
    face_count: int
    zero_based: bool
    threshold: int
    sign: Sign
    modifier: int
    valid: bool
    reason: str | None = Field(
        default=None,
        description="Why the code cannot be rolled; null when it is valid.",
    )


class RollResponse(BaseModel):
    code: str
    rolls: list[int] = Field(description="Every die rolled, exploded dice included, in order.")
    sign: Sign
    modifier: int
    total: int
    text: str = Field(description="The roll rendered as a single line.")
