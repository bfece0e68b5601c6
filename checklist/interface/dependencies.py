"""Request dependencies: session resolution and the request clock."""

import logging
from datetime import datetime

from fastapi import Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from checklist.core.config import settings
from checklist.core.day_boundary import utc_now
from checklist.domain.user import User
from checklist.services import user_service


logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"

serializer = URLSafeTimedSerializer(str(settings.secret_key), salt="checklist-session")


def issue_session_token(user_id: str) -> str:
    """Sign a session token for a user (seeding and tests)."""
    return serializer.dumps({"user_id": user_id})


def _read_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(SESSION_COOKIE)


async def get_current_user(request: Request) -> User | None:
    """Resolve the caller from a signed session token, or None when unauthenticated.

    The token is read from an ``Authorization: Bearer`` header, falling back to
    the session cookie. Tampered, expired, or dangling tokens are treated as no
    session.
    """
    token = _read_token(request)
    if not token:
        return None

    try:
        session_data = serializer.loads(token, max_age=settings.session_max_age_seconds)
    except SignatureExpired:
        logger.warning("session_expired", extra={"path": request.url.path})
        return None
    except BadSignature:
        logger.warning("session_tampered", extra={"path": request.url.path})
        return None

    user_id = session_data.get("user_id") if isinstance(session_data, dict) else None
    if not user_id:
        return None

    user = await user_service.find_user(user_id=str(user_id))
    if user is None:
        logger.warning("session_unknown_user", extra={"path": request.url.path, "user_id": user_id})
    return user


def get_now() -> datetime:
    """Wall-clock time of the request."""
    return utc_now()
