"""
Shared fixtures: a throwaway SQLite database per test, explicit settings,
and an HTTP client bound to the ASGI app.
"""

import os

# Settings are read at import time, so the environment has to be ready first.
os.environ.setdefault("JWT_KEY", "test-signing-key-that-is-long-enough-0123456789")
os.environ.setdefault("JWT_ISSUER", "credential-service-test")
os.environ.setdefault("JWT_AUDIENCE", "credential-service-clients")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from auth.tokens import JwtSettings
from config.settings import Settings
from database.models import Base
from database.session import get_db_session


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_key="unit-test-secret-key-with-plenty-of-bytes-42",
        jwt_issuer="auth.test",
        jwt_audience="clients.test",
        jwt_expiry_minutes=30,
        bcrypt_rounds=4,
        auto_create_tables=False,
    )


@pytest.fixture
def jwt_settings(settings) -> JwtSettings:
    return JwtSettings.from_config(settings)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


def _build_app(settings, session_factory):
    from main import create_app

    app = create_app(settings)

    async def _test_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session
    return app


@pytest_asyncio.fixture
async def app(settings, session_factory):
    return _build_app(settings, session_factory)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
