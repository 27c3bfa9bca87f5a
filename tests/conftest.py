"""Shared pytest fixtures."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from futuresqr.app import App
from futuresqr.config import Config
from futuresqr.core.core import Core
from futuresqr.web.server import create_fastapi_app


@pytest.fixture
def config():
    """In-memory configuration with cheap password hashing."""
    return Config(_env_file=None, database_url="memory://", password_hash_rounds=4)


@pytest_asyncio.fixture
async def core(config):
    """Started core with the default admin user."""
    core = Core(config)
    async with core.lifespan():
        yield core


@pytest.fixture
def client(config):
    """Test client over a fresh application. Redirects are returned, not followed."""
    fastapi_app = create_fastapi_app(App(config), config)
    with TestClient(fastapi_app, follow_redirects=False) as test_client:
        yield test_client
