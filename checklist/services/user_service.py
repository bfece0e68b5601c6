"""User directory: lookups used by authentication, assignment, and statistics."""

import logging

from checklist.core import db_client
from checklist.core.db_client import sanitize_param
from checklist.core.errors import InvalidInputError, NotFoundError
from checklist.core.logging import span
from checklist.domain.create_models import UserCreate
from checklist.domain.user import EmployeeSummary, User, UserRole


logger = logging.getLogger(__name__)


async def create_user(*, user: UserCreate) -> User:
    """Create a user record.

    Raises:
        InvalidInputError: If the email is already registered
    """
    with span("user_service.create_user"):
        existing = await db_client.get_first_record(
            collection="users",
            filter_query=f'email = "{sanitize_param(user.email)}"',
        )
        if existing:
            raise InvalidInputError(f"User with email {user.email} already exists")

        record = await db_client.create_record(collection="users", data=user.model_dump())
        logger.info("Created user %s with role %s", user.email, user.role)
        return User(**record)


async def get_user(*, user_id: str) -> User:
    """Fetch a user by ID.

    Raises:
        NotFoundError: If the user does not exist
    """
    try:
        record = await db_client.get_record(collection="users", record_id=user_id)
    except KeyError as e:
        raise NotFoundError(f"User not found: {user_id}") from e
    return User(**record)


async def find_user(*, user_id: str) -> User | None:
    """Fetch a user by ID, or None."""
    try:
        return await get_user(user_id=user_id)
    except NotFoundError:
        return None


async def list_users(*, role: UserRole | None = None) -> list[User]:
    """List users ordered by name, optionally restricted to one role."""
    with span("user_service.list_users"):
        filter_query = f'role = "{sanitize_param(role)}"' if role else ""
        records = await db_client.list_all_records(collection="users", filter_query=filter_query, sort="+name")
        return [User(**record) for record in records]


async def get_users_by_ids(*, user_ids: list[str]) -> dict[str, User]:
    """Resolve a set of user IDs in one pass; unknown IDs are simply absent from the result."""
    wanted = set(user_ids)
    if not wanted:
        return {}
    users = await list_users()
    return {user.id: user for user in users if user.id in wanted}


def to_summary(user: User) -> EmployeeSummary:
    """Public projection of a user."""
    return EmployeeSummary(id=user.id, name=user.name, email=user.email)
