"""Handlers for the user resource."""
from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import Depends, HTTPException, Response, status

from .database import Database
from .models import User
from .schemas import (
    AdminUserUpdateRequest,
    ProfileUpdateRequest,
    SignupRequest,
    UserResponse,
    user_to_response,
)
from .security import SESSION_COOKIE_NAME, current_user, get_database, get_sessions
from .sessions import SessionManager

logger = logging.getLogger("shogi_accounts.users")


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


def _apply_update(db: Database, user_id: int, updates: Dict[str, object]) -> User:
    try:
        updated = db.update_user(user_id, **updates)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if updated is None:
        raise _not_found()
    return updated


async def find_all_users(db: Database = Depends(get_database)) -> List[UserResponse]:
    return [user_to_response(user) for user in db.list_users()]


async def find_user_by_pk(user_id: int, db: Database = Depends(get_database)) -> UserResponse:
    user = db.get_user(user_id)
    if user is None:
        raise _not_found()
    return user_to_response(user)


async def create_user(payload: SignupRequest, db: Database = Depends(get_database)) -> UserResponse:
    try:
        user = db.create_user(
            payload.pseudo,
            payload.password,
            email=payload.email,
            country=payload.country,
            biography=payload.biography,
            avatar=payload.avatar,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info("User %s signed up as %s", user.id, user.pseudo)
    return user_to_response(user)


async def update_profile(
    payload: ProfileUpdateRequest,
    user: User = Depends(current_user),
    db: Database = Depends(get_database),
) -> UserResponse:
    # The target is always the authenticated caller; ids in the body are ignored.
    updated = _apply_update(db, user.id, payload.model_dump(exclude_unset=True))
    logger.info("User %s updated their profile", user.id)
    return user_to_response(updated)


async def delete_profile(
    response: Response,
    user: User = Depends(current_user),
    db: Database = Depends(get_database),
    sessions: SessionManager = Depends(get_sessions),
) -> UserResponse:
    deleted = db.delete_user(user.id)
    if deleted is None:
        raise _not_found()
    sessions.revoke_user(user.id)
    response.delete_cookie(SESSION_COOKIE_NAME)
    logger.info("User %s deleted their profile", user.id)
    return user_to_response(deleted)


async def update_user(
    user_id: int,
    payload: AdminUserUpdateRequest,
    admin: User = Depends(current_user),
    db: Database = Depends(get_database),
) -> UserResponse:
    updated = _apply_update(db, user_id, payload.model_dump(exclude_unset=True))
    logger.info("Admin %s updated user %s", admin.id, user_id)
    return user_to_response(updated)


async def delete_user(
    user_id: int,
    admin: User = Depends(current_user),
    db: Database = Depends(get_database),
    sessions: SessionManager = Depends(get_sessions),
) -> UserResponse:
    deleted = db.delete_user(user_id)
    if deleted is None:
        raise _not_found()
    revoked = sessions.revoke_user(user_id)
    logger.info("Superadmin %s deleted user %s (%d session(s) revoked)", admin.id, user_id, revoked)
    return user_to_response(deleted)


__all__ = [
    "create_user",
    "delete_profile",
    "delete_user",
    "find_all_users",
    "find_user_by_pk",
    "update_profile",
    "update_user",
]
