"""Account, login session, and saved filter routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from finder.api.deps import USER_SESSION_COOKIE, require_user
from finder.api.schemas import (
    Credentials,
    FilterPayload,
    TelegramChatRequest,
    UserFilterUpdate,
)
from finder.config import get_settings
from finder.db.session import get_db_session
from finder.models.user import User
from finder.services.auth_service import AuthService, serialize_user
from finder.services.user_service import UserService
from finder.sessions import USER_KIND, revoke_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        USER_SESSION_COOKIE,
        token,
        max_age=settings.user_session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


@router.post("/register", status_code=201)
async def register(
    body: Credentials,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    service = AuthService(session)
    user = await service.register(body.username, body.password)
    if user is None:
        raise HTTPException(status_code=400, detail="Username already exists")

    logger.info(f"Registered user {user.id}")
    _set_session_cookie(response, await service.start_user_session(user))
    return serialize_user(user)


@router.post("/login")
async def login(
    body: Credentials,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    service = AuthService(session)
    user = await service.authenticate(body.username, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    _set_session_cookie(response, await service.start_user_session(user))
    return serialize_user(user)


@router.post("/logout")
async def logout(request: Request, response: Response) -> dict[str, str]:
    await revoke_session(USER_KIND, request.cookies.get(USER_SESSION_COOKIE))
    response.delete_cookie(USER_SESSION_COOKIE)
    return {"status": "ok"}


@router.get("/user")
async def current_user(user: User = Depends(require_user)) -> dict[str, object]:
    return serialize_user(user)


@router.post("/user/subscribe")
async def subscribe(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    updated = await UserService(session, user).set_subscribed(True)
    if updated is None:
        raise HTTPException(status_code=404, detail="User not found")
    return updated


@router.post("/user/telegram")
async def link_telegram(
    body: TelegramChatRequest,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    updated = await UserService(session, user).link_telegram(body.chat_id)
    if updated is None:
        raise HTTPException(status_code=404, detail="User not found")
    return updated


@router.get("/user/filters")
async def list_filters(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await UserService(session, user).list_filters()


@router.post("/user/filters", status_code=201)
async def create_filter(
    body: FilterPayload,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    return await UserService(session, user).create_filter(body.to_state())


@router.put("/user/filters/{filter_id}")
async def update_filter(
    filter_id: int,
    body: UserFilterUpdate,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    updated = await UserService(session, user).update_filter(filter_id, body.changes())
    if updated is None:
        raise HTTPException(status_code=404, detail="Filter not found")
    return updated


@router.delete("/user/filters/{filter_id}")
async def delete_filter(
    filter_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, str]:
    if not await UserService(session, user).delete_filter(filter_id):
        raise HTTPException(status_code=404, detail="Filter not found")
    return {"status": "deleted"}
