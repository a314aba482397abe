import base64
import json
import time
import pytest
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy import text

from jwks_service.core.config import Settings
from jwks_service.core.context import ServiceContext
from jwks_service.core.security import generate_rsa_private_key_pem
from jwks_service.main import create_app


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    # One SQLite file per test keeps kids and rows isolated
    return Settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'keys.db'}")

@pytest.fixture(scope="session")
def rsa_pem() -> bytes:
    """A single 2048-bit key reused by tests that only need valid material."""
    return generate_rsa_private_key_pem(2048)

@pytest.fixture
async def context(test_settings) -> AsyncGenerator[ServiceContext, None]:
    """A context that has not been started: no schema, gate closed."""
    ctx = ServiceContext(test_settings)
    yield ctx
    await ctx.close()

@pytest.fixture
async def store(context):
    await context.store.initialize_schema()
    return context.store

@pytest.fixture
async def started_context(context) -> ServiceContext:
    await context.start()
    return context

@pytest.fixture
async def client(started_context, test_settings) -> AsyncGenerator[AsyncClient, None]:
    fastapi_app = create_app(test_settings)
    fastapi_app.state.context = started_context

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as c:
        yield c

@pytest.fixture
def now() -> int:
    return int(time.time())

# Utility functions
async def execute_sql(context: ServiceContext, sql: str):
    """Run raw SQL against the key database, bypassing the store."""
    async with context.engine.begin() as conn:
        await conn.execute(text(sql))

def decode_segment(segment: str) -> dict:
    padded = segment + '=' * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))

def assert_jwt_structure(token: str):
    """
    Validate JWT structure without verification.
    Returns: (header, payload)
    """
    parts = token.split('.')
    assert len(parts) == 3, "Invalid JWT structure"
    return decode_segment(parts[0]), decode_segment(parts[1])
