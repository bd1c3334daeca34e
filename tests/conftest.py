"""Shared test fixtures for the droll test suite.

Parser, engine and rendering tests need no fixtures. Dice are made
deterministic per test by patching ``droll.engine.random.randint``.

async_client  (function scope)
    An AsyncClient wired to the FastAPI app over ASGITransport.

caps  (function scope)
    The live settings object, restored after the test so a test can lower
    the explosion caps without leaking into the next one.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from droll.config import settings
from droll.main import app


@pytest.fixture
def caps(monkeypatch):
    monkeypatch.setattr(settings, "explode_cap", settings.explode_cap)
    monkeypatch.setattr(settings, "explode_all_cap", settings.explode_all_cap)
    return settings


@pytest_asyncio.fixture
async def async_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
