"""Die code routes: inspect a code, roll it as JSON, or roll it as a text line."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from droll.engine import InvalidRoll, roll_code
from droll.notation import parse
from droll.rendering import format_invalid, render
from droll.schemas import RollResponse, SpecificationResponse

router = APIRouter()


@router.get("/parse/{code}", response_model=SpecificationResponse)
async def parse_code(code: str) -> SpecificationResponse:
    spec = parse(code)
    problem = spec.problem()
    return SpecificationResponse(
        code=spec.code,
        dice_count=spec.dice_count,
        mode=spec.mode,
        face_count=spec.face_count,
        zero_based=spec.zero_based,
        threshold=spec.threshold,
        sign=spec.sign,
        modifier=spec.modifier,
        valid=problem is None,
        reason=problem.reason if problem else None,
    )


@router.get("/roll/{code}", response_model=RollResponse)
async def roll(code: str) -> RollResponse:
    result = roll_code(code)
    if isinstance(result, InvalidRoll):
        raise HTTPException(status_code=422, detail=format_invalid(result))
    return RollResponse(
        code=result.code,
        rolls=result.rolls,
        sign=result.sign,
        modifier=result.modifier,
        total=result.total,
        text=render(result),
    )


@router.get("/roll/{code}/text", response_class=PlainTextResponse)
async def roll_text(code: str) -> PlainTextResponse:
    result = roll_code(code)
    status_code = 422 if isinstance(result, InvalidRoll) else 200
    return PlainTextResponse(render(result), status_code=status_code)
