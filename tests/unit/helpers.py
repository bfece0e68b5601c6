"""Shared constants and helpers for unit tests."""

from datetime import UTC, datetime

from checklist.domain.user import User
from checklist.interface.dependencies import issue_session_token


# Monday, 19 October 2026
MONDAY = datetime(2026, 10, 19, tzinfo=UTC).date()
MONDAY_0920 = datetime(2026, 10, 19, 9, 20, tzinfo=UTC)
MONDAY_0935 = datetime(2026, 10, 19, 9, 35, tzinfo=UTC)


def auth_headers(user: User) -> dict[str, str]:
    """Authorization header carrying a signed session for ``user``."""
    return {"Authorization": f"Bearer {issue_session_token(user.id)}"}
