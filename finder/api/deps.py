"""Shared FastAPI dependencies for authenticated routes."""

import hmac

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from finder.config import get_settings
from finder.db.repositories import fetch_user
from finder.db.session import get_db_session
from finder.models.user import User
from finder.sessions import (
    ADMIN_KIND,
    ADMIN_SUBJECT,
    USER_KIND,
    parse_user_subject,
    resolve_session,
)

USER_SESSION_COOKIE = "session"
ADMIN_SESSION_COOKIE = "admin_session"


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_user(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolve the account behind the session cookie, else 401."""

    subject = await resolve_session(USER_KIND, request.cookies.get(USER_SESSION_COOKIE))
    user_id = parse_user_subject(subject)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)

    user = await fetch_user(session, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user


async def require_admin(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str:
    """Accept an admin token from ``Authorization: Bearer`` or the cookie."""

    token = _bearer_token(authorization) or request.cookies.get(ADMIN_SESSION_COOKIE)
    if await resolve_session(ADMIN_KIND, token) != ADMIN_SUBJECT:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return token or ""


async def require_chatbot_key(x_api_key: str | None = Header(default=None)) -> None:
    expected = get_settings().chatbot_api_key
    if not expected:
        return
    if not x_api_key or not hmac.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
