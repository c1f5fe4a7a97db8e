"""Application factory for the player accounts HTTP API."""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import Settings
from .database import Database, resolve_database_path
from .routes import build_router
from .sessions import SessionManager

logger = logging.getLogger("shogi_accounts.service")


def _initialise_database(database: Database) -> Database:
    database.initialize()
    return database


def create_app(
    *,
    database: Database | None = None,
    sessions: SessionManager | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Return the accounts API with the user router mounted under the base path."""

    if settings is None:
        settings = Settings.from_env()

    if database is None:
        database = Database(resolve_database_path(settings.database_path))
    db = _initialise_database(database)

    if sessions is None:
        sessions = SessionManager(ttl=settings.session_ttl)

    if not settings.secure_cookies:
        logger.warning(
            "Session cookies are not marked as secure. Only disable secure cookies for"
            " local development."
        )

    app = FastAPI(
        title="Shogi Accounts API",
        version="1.0.0",
        description="Player signup, login and profile management.",
    )
    app.state.database = db
    app.state.sessions = sessions
    app.state.secure_cookies = settings.secure_cookies

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    app.include_router(build_router(), prefix=settings.base_path)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    return app


__all__ = ["create_app"]
