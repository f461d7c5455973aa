import logging
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import async_session
from .models import User, UserRole
from .utils.auth import decode_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    role: UserRole


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> CurrentUser:
    if not authorization:
        raise _unauthorized("Not authorized, no token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Not authorized, no token")

    settings = get_settings()
    try:
        user_id = decode_access_token(
            token.strip(),
            secret=settings.auth_secret,
            algorithms=[settings.auth_algorithm],
        )
    except ValueError as exc:
        raise _unauthorized("Not authorized, token failed") from exc

    # Role comes from the users table, not the token, so demotions apply immediately.
    try:
        role = await session.scalar(select(User.role).where(User.id == user_id))
    except SQLAlchemyError as exc:
        logger.exception("user lookup failed for id=%s", user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error") from exc
    finally:
        # End the autobegun read so route handlers can open their own transaction.
        await session.rollback()
    if role is None:
        raise _unauthorized("Not authorized, user not found")
    return CurrentUser(user_id=user_id, role=UserRole(role))


async def get_current_user_id(current_user: CurrentUser = Depends(get_current_user)) -> int:
    return current_user.user_id


def require_role(*roles: UserRole) -> Callable[..., Awaitable[CurrentUser]]:
    async def _check(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role {current_user.role.value} is not allowed to access this resource",
            )
        return current_user

    return _check


require_owner = require_role(UserRole.OWNER)
require_admin = require_role(UserRole.ADMIN)
