"""Player accounts service for the shogi site."""

from __future__ import annotations

from typing import Any

from .database import Database, resolve_database_path
from .models import Role, User


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the accounts API application."""

    from .service import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "Database",
    "Role",
    "User",
    "resolve_database_path",
    "create_app",
]
