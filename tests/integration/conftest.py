"""Pytest configuration and fixtures for integration tests against a real SQLite file."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from checklist.core import db_client
from checklist.core.config import settings
from checklist.core.schema import init_db
from checklist.domain.create_models import UserCreate
from checklist.domain.user import User, UserRole
from checklist.services import user_service


@pytest.fixture
async def sqlite_db(tmp_path: Path, monkeypatch) -> AsyncIterator[Path]:
    """Point the client at a fresh database file with the schema applied."""
    db_path = tmp_path / "checklist.db"
    monkeypatch.setattr(settings, "sqlite_db_path", str(db_path))

    await init_db()
    yield db_path
    await db_client.close_connection()


@pytest.fixture
async def employee(sqlite_db) -> User:
    """An employee stored in SQLite."""
    return await user_service.create_user(
        user=UserCreate(name="Ana Employee", email="ana@example.com", role=UserRole.EMPLOYEE)
    )


@pytest.fixture
async def admin(sqlite_db) -> User:
    """An admin stored in SQLite."""
    return await user_service.create_user(
        user=UserCreate(name="Adrian Admin", email="adrian@example.com", role=UserRole.ADMIN)
    )
