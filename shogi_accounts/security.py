"""Request guards for the accounts API.

``protect`` authenticates the caller from a bearer session token (or the
session cookie) and records the account on ``request.state.user``.
``restrict_to`` builds a role guard that depends on ``protect``, so a role is
only ever checked for an authenticated caller.

Both guards look up their collaborators on ``request.app.state`` which the
service factory populates.
"""
from __future__ import annotations

from typing import Callable, FrozenSet, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .database import Database
from .models import Role, User
from .sessions import SessionManager

SESSION_COOKIE_NAME = "shogi_session"

_bearer = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


async def extract_token(request: Request) -> Optional[str]:
    """Return the session token presented by the caller, if any."""

    credentials: HTTPAuthorizationCredentials | None = await _bearer(request)  # type: ignore[assignment]
    if credentials is not None and credentials.scheme.lower() == "bearer":
        token = credentials.credentials.strip()
        if token:
            return token
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if cookie:
        return cookie
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def protect(request: Request) -> User:
    token = await extract_token(request)
    if token is None:
        raise _unauthorized("Not authenticated")

    user_id = get_sessions(request).resolve(token)
    if user_id is None:
        raise _unauthorized("Invalid or expired session token")

    user = get_database(request).get_user(user_id)
    if user is None:
        raise _unauthorized("Account no longer exists")

    request.state.user = user
    return user


def restrict_to(*roles: Role) -> Callable[..., User]:
    """Return a guard admitting only callers whose role is one of ``roles``."""

    if not roles:
        raise ValueError("restrict_to requires at least one role")
    allowed: FrozenSet[Role] = frozenset(Role(role) for role in roles)

    async def guard(user: User = Depends(protect)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user

    guard.allowed_roles = allowed  # type: ignore[attr-defined]
    guard.__name__ = f"restrict_to_{'_'.join(sorted(role.value for role in allowed))}"
    return guard


def current_user(request: Request) -> User:
    """Return the account attached by :func:`protect`."""

    user: User | None = getattr(request.state, "user", None)
    if user is None:
        raise _unauthorized("Not authenticated")
    return user


__all__ = [
    "SESSION_COOKIE_NAME",
    "current_user",
    "extract_token",
    "get_database",
    "get_sessions",
    "protect",
    "restrict_to",
]
