"""Pytest configuration and fixtures for unit tests."""

from collections.abc import Awaitable, Callable, Iterator
from datetime import UTC, datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient

from checklist.domain.assignment import TaskAssignment
from checklist.domain.create_models import TaskTemplateCreate, UserCreate
from checklist.domain.template import TaskTemplate
from checklist.domain.user import User, UserRole
from checklist.interface.dependencies import get_now
from checklist.main import app
from checklist.services import assignment_service, template_service, user_service
from tests.unit.helpers import MONDAY_0920
from tests.unit.mocks import InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches checklist.core.db_client functions to use InMemoryDBClient."""
    monkeypatch.setattr("checklist.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("checklist.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("checklist.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("checklist.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("checklist.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("checklist.core.db_client.list_all_records", in_memory_db.list_all_records)
    monkeypatch.setattr("checklist.core.db_client.get_first_record", in_memory_db.get_first_record)
    monkeypatch.setattr("checklist.core.db_client.upsert_record", in_memory_db.upsert_record)

    return in_memory_db


async def _create_user(name: str, role: UserRole) -> User:
    email = f"{name.lower().replace(' ', '.')}@example.com"
    return await user_service.create_user(user=UserCreate(name=name, email=email, role=role))


@pytest.fixture
async def employee(patched_db) -> User:
    """An employee with no assignments yet."""
    return await _create_user("Ana Employee", UserRole.EMPLOYEE)


@pytest.fixture
async def other_employee(patched_db) -> User:
    """A second employee, used to check ownership rules."""
    return await _create_user("Bruno Employee", UserRole.EMPLOYEE)


@pytest.fixture
async def leader(patched_db) -> User:
    """A lider: manages templates and assignments but is not an employee."""
    return await _create_user("Lucia Leader", UserRole.LIDER)


@pytest.fixture
async def admin(patched_db) -> User:
    """An admin."""
    return await _create_user("Adrian Admin", UserRole.ADMIN)


@pytest.fixture
def make_template(patched_db, admin) -> Callable[..., Awaitable[TaskTemplate]]:
    """Factory creating templates owned by the admin fixture."""

    async def _make(**fields: Any) -> TaskTemplate:
        payload = TaskTemplateCreate(**{"title": "Check fridge temperature", "frequency": "daily", **fields})
        return await template_service.create_template(payload=payload, created_by_id=admin.id)

    return _make


@pytest.fixture
def assign(patched_db) -> Callable[[TaskTemplate, User], Awaitable[TaskAssignment]]:
    """Factory assigning a template to a user."""

    async def _assign(template: TaskTemplate, user: User) -> TaskAssignment:
        detail = await assignment_service.assign_task(
            task_template_id=template.id,
            employee_id=user.id,
            now=datetime(2026, 10, 1, tzinfo=UTC),
        )
        return TaskAssignment(**detail.model_dump())

    return _assign


@pytest.fixture
def clock() -> dict[str, datetime]:
    """Mutable request clock; tests set clock["now"] to move time."""
    return {"now": MONDAY_0920}


@pytest.fixture
def api_client(patched_db, clock) -> Iterator[TestClient]:
    """TestClient over the app with the in-memory database and a controllable clock."""
    app.dependency_overrides[get_now] = lambda: clock["now"]
    # Unexpected errors are asserted as 500 responses, not re-raised
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()
