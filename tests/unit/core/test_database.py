"""
Unit tests for database URL handling and the session compat helpers.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from dashboard.core.database import build_async_database_url, session_commit, session_exec


@pytest.mark.parametrize(
    "url,expected",
    [
        ("sqlite:////data/dashboard.db", "sqlite+aiosqlite:////data/dashboard.db"),
        ("postgresql://dash:pw@db:5432/dashboard", "postgresql+asyncpg://dash:pw@db:5432/dashboard"),
        ("postgresql+psycopg2://dash:pw@db/dashboard", "postgresql+asyncpg://dash:pw@db/dashboard"),
    ],
)
def test_build_async_database_url(url, expected):
    assert build_async_database_url(url) == expected


@pytest.mark.asyncio
async def test_helpers_call_sync_session():
    session = MagicMock()
    session.exec.return_value = "rows"

    assert await session_exec(session, "statement") == "rows"
    await session_commit(session)

    session.commit.assert_called_once_with()


@pytest.mark.asyncio
async def test_helpers_await_async_session():
    session = MagicMock()
    session.exec = AsyncMock(return_value="rows")
    session.commit = AsyncMock()

    assert await session_exec(session, "statement") == "rows"
    await session_commit(session)

    session.commit.assert_awaited_once()
