"""FastAPI dependencies for authentication and owner-scoped lookups."""

import uuid
from typing import Annotated, TypeVar

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from app.core.database import get_session
from app.core.security import decode_access_token
from app.models.user import User

ModelT = TypeVar("ModelT", bound=SQLModel)

# auto_error=False so a missing header is a 401 like any other bad token
bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext:
    """Resolved identity carried through a request."""

    __slots__ = ("user_id",)

    def __init__(self, user_id: uuid.UUID) -> None:
        self.user_id = user_id


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuthContext:
    """Resolve a bearer JWT to an AuthContext for an active user."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = uuid.UUID(payload["sub"])
    except JWTError as exc:
        raise _unauthorized("Invalid or expired token") from exc
    except (KeyError, ValueError) as exc:
        raise _unauthorized("Malformed token payload") from exc

    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise _unauthorized("Account is disabled or no longer exists")

    return AuthContext(user_id=user.id)


async def get_owned_or_404(
    model: type[ModelT],
    row_id: uuid.UUID,
    user_id: uuid.UUID,
    session: AsyncSession,
    label: str,
) -> ModelT:
    """Fetch a row by id that belongs to ``user_id``; foreign rows look missing."""
    stmt = select(model).where(
        model.id == row_id,  # type: ignore[attr-defined]
        model.user_id == user_id,  # type: ignore[attr-defined]
    )
    result = await session.execute(stmt)
    row = result.scalar_one_or_none()
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return row


# Typed shorthand for use in route signatures
Auth = Annotated[AuthContext, Depends(get_auth_context)]
Session = Annotated[AsyncSession, Depends(get_session)]
