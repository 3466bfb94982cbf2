"""
Tests for schema creation and engine options.
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

from database.session import engine_options, init_models


class TestEngineOptions:
    def test_sqlite_gets_no_pool_tuning(self):
        assert engine_options("sqlite+aiosqlite://") == {"echo": False}

    def test_postgres_gets_pool_tuning(self):
        options = engine_options("postgresql+asyncpg://u:p@db/auth")
        assert options["pool_size"] == 10
        assert options["pool_pre_ping"] is True


class TestInitModels:
    @pytest.mark.asyncio
    async def test_creates_users_table_with_unique_columns(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'fresh.db'}")
        try:
            await init_models(engine)
            await init_models(engine)  # second run is a no-op

            def _describe(sync_conn):
                inspector = inspect(sync_conn)
                columns = {c["name"] for c in inspector.get_columns("users")}
                uniques = {
                    tuple(u["column_names"]) for u in inspector.get_unique_constraints("users")
                }
                indexes = {
                    tuple(i["column_names"])
                    for i in inspector.get_indexes("users")
                    if i.get("unique")
                }
                return columns, uniques | indexes

            async with engine.connect() as conn:
                columns, unique_sets = await conn.run_sync(_describe)
        finally:
            await engine.dispose()

        assert {
            "user_id", "username", "email", "password_hash", "name",
            "position", "department", "created_at", "is_active",
        } <= columns
        assert ("username",) in unique_sets
        assert ("email",) in unique_sets
