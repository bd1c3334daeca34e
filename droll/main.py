from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request

from droll.notation import NotationError
from droll.routers import rolls

app = FastAPI(title="Droll")

app.include_router(rolls.router)


@app.exception_handler(NotationError)
async def notation_error_handler(request: Request, exc: NotationError) -> JSONResponse:
    return JSONResponse({"detail": f"bad die code: {exc.code}"}, status_code=422)
