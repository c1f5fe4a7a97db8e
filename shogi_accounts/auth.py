"""Login and logout handlers."""
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, Response, status

from .database import Database
from .schemas import LoginRequest, LoginResponse, MessageResponse, user_to_response
from .security import SESSION_COOKIE_NAME, extract_token, get_database, get_sessions
from .sessions import SessionManager

logger = logging.getLogger("shogi_accounts.auth")


def _issue_session_cookie(request: Request, response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=max_age,
        httponly=True,
        secure=bool(getattr(request.app.state, "secure_cookies", True)),
        samesite="lax",
    )


async def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Database = Depends(get_database),
    sessions: SessionManager = Depends(get_sessions),
) -> LoginResponse:
    pseudo = payload.login_pseudo()
    email = payload.login_email()
    user = db.authenticate_user(payload.password, pseudo=pseudo, email=email)
    if user is None:
        logger.warning("Failed login attempt for %s", pseudo or email)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    existing_token = await extract_token(request)
    if existing_token:
        sessions.destroy(existing_token)

    token = sessions.create(user.id)
    _issue_session_cookie(request, response, token, sessions.max_age)
    logger.info("User %s logged in", user.id)
    return LoginResponse(
        token=token,
        expires_in=sessions.max_age,
        user=user_to_response(user),
    )


async def logout(
    request: Request,
    response: Response,
    sessions: SessionManager = Depends(get_sessions),
) -> MessageResponse:
    token = await extract_token(request)
    if token and sessions.destroy(token):
        logger.info("Session closed on logout")
    response.delete_cookie(SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out")


__all__ = ["login", "logout"]
