"""
Test the migration runner
"""

import pytest

from app.core import migrate
from app.core.config import settings


@pytest.mark.asyncio
async def test_migration_requires_database_url(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "POSTGRES_URL", None)
    monkeypatch.setattr(settings, "POSTGRES_SERVER", "")

    assert await migrate.run_migration() == 1


@pytest.mark.asyncio
async def test_migration_success(monkeypatch: pytest.MonkeyPatch):
    calls: list[str] = []

    async def fake_init_db():
        calls.append("init_db")

    monkeypatch.setattr(migrate, "init_db", fake_init_db)

    assert await migrate.run_migration() == 0
    assert calls == ["init_db"]


@pytest.mark.asyncio
async def test_migration_failure(monkeypatch: pytest.MonkeyPatch):
    async def broken_init_db():
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(migrate, "init_db", broken_init_db)

    assert await migrate.run_migration() == 1
