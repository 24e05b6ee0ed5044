"""Account registration, password hashing, and login sessions."""

import asyncio
import hashlib
import hmac
import logging
import secrets

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from finder.config import get_settings
from finder.db.repositories import create_user, fetch_user_by_username
from finder.models.user import User
from finder.sessions import (
    ADMIN_KIND,
    ADMIN_SUBJECT,
    USER_KIND,
    create_session,
    user_subject,
)

logger = logging.getLogger(__name__)

_SCRYPT_N = 2**14
_SCRYPT_R = 8
_SCRYPT_P = 1


def hash_password(password: str) -> str:
    """Return ``<hash hex>.<salt hex>`` for storage."""

    salt = secrets.token_bytes(16)
    digest = hashlib.scrypt(
        password.encode(), salt=salt, n=_SCRYPT_N, r=_SCRYPT_R, p=_SCRYPT_P, dklen=64
    )
    return f"{digest.hex()}.{salt.hex()}"


def verify_password(password: str, stored: str) -> bool:
    hashed, _, salt_hex = stored.partition(".")
    if not hashed or not salt_hex:
        return False
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    digest = hashlib.scrypt(
        password.encode(), salt=salt, n=_SCRYPT_N, r=_SCRYPT_R, p=_SCRYPT_P, dklen=64
    )
    return hmac.compare_digest(digest, expected)


def serialize_user(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "username": user.username,
        "isSubscribed": user.is_subscribed,
        "telegramChatId": user.telegram_chat_id,
    }


class AuthService:
    """Registration and login for accounts and the admin dashboard."""

    def __init__(self, session: AsyncSession | None = None) -> None:
        self._session = session
        self._settings = get_settings()

    async def register(self, username: str, password: str) -> User | None:
        """Create an account; ``None`` when the username is taken."""

        if self._session is None:
            raise RuntimeError("AuthService.register requires a database session")
        if await fetch_user_by_username(self._session, username) is not None:
            return None

        # scrypt is CPU bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(hash_password, password)
        try:
            return await create_user(self._session, username, password_hash)
        except IntegrityError:
            await self._session.rollback()
            logger.info(f"Registration lost a race for username {username!r}")
            return None

    async def authenticate(self, username: str, password: str) -> User | None:
        if self._session is None:
            raise RuntimeError("AuthService.authenticate requires a database session")
        user = await fetch_user_by_username(self._session, username)
        if user is None:
            return None
        if not await asyncio.to_thread(verify_password, password, user.password):
            return None
        return user

    async def start_user_session(self, user: User) -> str:
        return await create_session(
            USER_KIND, user_subject(user.id), self._settings.user_session_ttl_seconds
        )

    async def admin_login(self, password: str) -> str | None:
        """Issue an admin session token when ``password`` matches."""

        configured = self._settings.admin_password
        if not configured:
            logger.warning("Admin login attempted but ADMIN_PASSWORD is not configured")
            return None
        if not hmac.compare_digest(password.encode(), configured.encode()):
            logger.info("Admin login rejected")
            return None
        return await create_session(
            ADMIN_KIND, ADMIN_SUBJECT, self._settings.admin_session_ttl_seconds
        )
