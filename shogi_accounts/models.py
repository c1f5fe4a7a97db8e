"""Domain models for the player accounts service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Authorization level attached to every account."""

    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


@dataclass(frozen=True)
class User:
    """Represents a player account stored in the accounts database."""

    id: int
    pseudo: str
    email: Optional[str]
    country: Optional[str]
    biography: Optional[str]
    avatar: Optional[str]
    ratio: float
    role: Role
    created_at: datetime
    updated_at: datetime


__all__ = ["Role", "User"]
