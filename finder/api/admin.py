"""Admin dashboard login and statistics routes."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from finder.api.deps import ADMIN_SESSION_COOKIE, require_admin
from finder.api.schemas import AdminLoginRequest
from finder.config import get_settings
from finder.db.session import get_db_session
from finder.services.admin_service import AdminService
from finder.services.auth_service import AuthService
from finder.sessions import ADMIN_KIND, revoke_session

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login")
async def admin_login(body: AdminLoginRequest, response: Response) -> dict[str, str]:
    token = await AuthService().admin_login(body.password)
    if token is None:
        raise HTTPException(status_code=401, detail="Invalid password")

    settings = get_settings()
    response.set_cookie(
        ADMIN_SESSION_COOKIE,
        token,
        max_age=settings.admin_session_ttl_seconds,
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
    )
    return {"token": token}


@router.post("/logout")
async def admin_logout(
    response: Response, token: str = Depends(require_admin)
) -> dict[str, str]:
    await revoke_session(ADMIN_KIND, token)
    response.delete_cookie(ADMIN_SESSION_COOKIE)
    return {"status": "ok"}


@router.get("/stats", dependencies=[Depends(require_admin)])
async def admin_stats(
    days: int | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    """Usage statistics over the last ``days`` (configured default when omitted)."""

    if days is not None and not 1 <= days <= 365:
        raise HTTPException(status_code=400, detail="days must be between 1 and 365")
    return await AdminService(session).get_stats(days)
