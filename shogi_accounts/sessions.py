"""Opaque login tokens for the accounts API.

Tokens live in process memory only. Each one maps to a player id and an
expiry deadline; the deadline slides forward every time the token is used.
Expired tokens are swept whenever a new one is issued or a player's
sessions are revoked, so the table stays bounded by the number of players
active within one TTL window.
"""

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

TOKEN_BYTES = 32


@dataclass
class _Grant:
    user_id: int
    expires_at: datetime

    def expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class SessionManager:
    """Issue, resolve and revoke player login tokens."""

    def __init__(self, *, ttl: timedelta = timedelta(hours=8)) -> None:
        if ttl <= timedelta(0):
            raise ValueError("Session TTL must be positive")
        self._ttl = ttl
        self._grants: Dict[str, _Grant] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def max_age(self) -> int:
        """Cookie lifetime in seconds."""
        return int(self._ttl.total_seconds())

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._grants)

    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(TOKEN_BYTES)
        now = self._now()
        with self._lock:
            self._sweep(now)
            self._grants[token] = _Grant(user_id=user_id, expires_at=now + self._ttl)
        return token

    def resolve(self, token: str) -> Optional[int]:
        """Return the player id behind ``token`` and extend its deadline."""

        now = self._now()
        with self._lock:
            grant = self._grants.get(token)
            if grant is None:
                return None
            if grant.expired(now):
                del self._grants[token]
                return None
            grant.expires_at = now + self._ttl
            return grant.user_id

    def destroy(self, token: str) -> bool:
        with self._lock:
            return self._grants.pop(token, None) is not None

    def revoke_user(self, user_id: int) -> int:
        """Drop every token held by ``user_id`` and return how many were removed."""

        now = self._now()
        with self._lock:
            self._sweep(now)
            owned = [token for token, grant in self._grants.items() if grant.user_id == user_id]
            for token in owned:
                del self._grants[token]
        return len(owned)

    def _sweep(self, now: datetime) -> None:
        # Caller holds the lock.
        for token in [token for token, grant in self._grants.items() if grant.expired(now)]:
            del self._grants[token]

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["SessionManager"]
