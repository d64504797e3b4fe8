"""
Pytest configuration and shared fixtures.
"""

import os
import asyncio

# Settings require DATABASE_URL at import time; default to an in-memory database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from talentdesk.db.base import Base
from talentdesk.core.dependencies import get_db
from talentdesk.main import app
import talentdesk.models  # noqa: F401  (register tables on Base.metadata)


TEST_DATABASE_URL = "sqlite+aiosqlite://"


def make_engine():
    return create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)


def run_in_db(fn):
    """
    Run `await fn(session)` against a fresh in-memory database.

    Each call gets its own engine and schema, so tests never share rows.
    """

    async def _run():
        engine = make_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with session_maker() as session:
                return await fn(session)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


@pytest.fixture
def client():
    """TestClient whose get_db dependency points at a private in-memory database."""
    engine = make_engine()
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    state = {"schema_ready": False}

    async def override_get_db():
        # Created lazily so the schema lives on the TestClient's event loop
        if not state["schema_ready"]:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            state["schema_ready"] = True
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)
