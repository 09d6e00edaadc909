"""Fixtures: settings without .env and an app wired to a stubbed upstream."""
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
import pytest

from recipe_api.config import RecipeApiSettings
from recipe_api.main import create_app


@pytest.fixture
def settings() -> RecipeApiSettings:
    return RecipeApiSettings(GEMINI_API_KEY="test-key", _env_file=None)


@pytest.fixture
def api_client(settings: RecipeApiSettings) -> Callable[..., Any]:
    """Factory: api_client(handler) yields an httpx client bound to the running app."""

    @asynccontextmanager
    async def _make(handler: Callable[[httpx.Request], Any]):
        app = create_app(settings, upstream_transport=httpx.MockTransport(handler))
        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
                yield client

    return _make
