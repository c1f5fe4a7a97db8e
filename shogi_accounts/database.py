"""SQLite-backed persistence for player accounts."""
from __future__ import annotations

import math
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from passlib.context import CryptContext

from .models import Role, User


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the accounts database."""

    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "accounts.sqlite3").resolve(strict=False)


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def _hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def _verify_password(password: str, hashed: str) -> bool:
    try:
        return _pwd_context.verify(password, hashed)
    except ValueError:
        return False


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def _normalize_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _normalize_pseudo(pseudo: str) -> str:
    cleaned = pseudo.strip()
    if not cleaned:
        raise ValueError("Pseudo must not be empty")
    return cleaned


_UPDATABLE_COLUMNS = ("pseudo", "email", "country", "biography", "avatar", "ratio", "role")


def _integrity_error(exc: sqlite3.IntegrityError) -> ValueError:
    if "UNIQUE" in str(exc):
        return ValueError("A user with that pseudo or email already exists")
    return ValueError(f"Invalid account data: {exc}")


class Database:
    """Simple wrapper around SQLite for persisting player accounts."""

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the required tables if they do not already exist."""

        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    pseudo TEXT NOT NULL UNIQUE COLLATE NOCASE,
                    email TEXT UNIQUE,
                    password_hash TEXT NOT NULL,
                    country TEXT,
                    biography TEXT,
                    avatar TEXT,
                    ratio REAL NOT NULL DEFAULT 0,
                    role TEXT NOT NULL DEFAULT 'user',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
                """
            )

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------
    def create_user(
        self,
        pseudo: str,
        password: str,
        *,
        email: Optional[str] = None,
        country: Optional[str] = None,
        biography: Optional[str] = None,
        avatar: Optional[str] = None,
        role: Role = Role.USER,
    ) -> User:
        """Create a new account and return it."""

        if not password:
            raise ValueError("Password must not be empty")

        normalized_pseudo = _normalize_pseudo(pseudo)
        created_at = _serialize_datetime(_current_timestamp())

        with self._connect() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO users (
                        pseudo,
                        email,
                        password_hash,
                        country,
                        biography,
                        avatar,
                        role,
                        created_at,
                        updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        normalized_pseudo,
                        _normalize_email(email),
                        _hash_password(password),
                        _normalize_optional(country),
                        _normalize_optional(biography),
                        _normalize_optional(avatar),
                        Role(role).value,
                        created_at,
                        created_at,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise _integrity_error(exc) from exc

            user_id = cursor.lastrowid

        user = self.get_user(user_id)
        if user is None:
            raise RuntimeError("Failed to load user after creation")
        return user

    def list_users(self) -> List[User]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY id").fetchall()
        return [self._row_to_user(row) for row in rows]

    def get_user(self, user_id: int) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def get_user_by_pseudo(self, pseudo: str) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE pseudo = ?",
                (pseudo.strip(),),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def authenticate_user(
        self,
        password: str,
        *,
        pseudo: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """Return the account identified by ``pseudo`` or ``email`` if ``password`` matches.

        Only the column that was supplied is consulted, so a pseudo that happens
        to look like someone else's email never shadows that account.
        """

        if pseudo is not None and pseudo.strip():
            query, value = "SELECT * FROM users WHERE pseudo = ?", pseudo.strip()
        else:
            normalized = _normalize_email(email)
            if normalized is None:
                return None
            query, value = "SELECT * FROM users WHERE email = ?", normalized
        with self._connect() as conn:
            row = conn.execute(query, (value,)).fetchone()
        if row is None:
            return None
        if not _verify_password(password, row["password_hash"]):
            return None
        return self._row_to_user(row)

    def update_user(self, user_id: int, **fields: object) -> Optional[User]:
        """Apply ``fields`` to an account. Returns ``None`` when it does not exist."""

        updates: List[str] = []
        values: List[object] = []
        for column in _UPDATABLE_COLUMNS:
            if column not in fields:
                continue
            value = fields[column]
            if column == "pseudo":
                if value is None:
                    continue
                value = _normalize_pseudo(str(value))
            elif column == "email":
                value = _normalize_email(value)  # type: ignore[arg-type]
            elif column == "ratio":
                if value is None:
                    continue
                value = float(value)  # type: ignore[arg-type]
                if not math.isfinite(value):
                    raise ValueError("Ratio must be a finite number")
            elif column == "role":
                if value is None:
                    continue
                value = Role(value).value
            else:
                value = _normalize_optional(value)  # type: ignore[arg-type]
            updates.append(f"{column} = ?")
            values.append(value)

        password = fields.get("password")
        if password is not None:
            if not password:
                raise ValueError("Password must not be empty")
            updates.append("password_hash = ?")
            values.append(_hash_password(str(password)))

        if not updates:
            return self.get_user(user_id)

        updates.append("updated_at = ?")
        values.append(_serialize_datetime(_current_timestamp()))
        values.append(user_id)
        query = f"UPDATE users SET {', '.join(updates)} WHERE id = ?"

        with self._connect() as conn:
            try:
                cursor = conn.execute(query, values)
            except sqlite3.IntegrityError as exc:
                raise _integrity_error(exc) from exc
            if cursor.rowcount == 0:
                return None

        return self.get_user(user_id)

    def delete_user(self, user_id: int) -> Optional[User]:
        """Remove an account, returning the deleted record if it existed."""

        existing = self.get_user(user_id)
        if existing is None:
            return None
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            if cursor.rowcount == 0:
                return None
        return existing

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            pseudo=str(row["pseudo"]),
            email=row["email"],
            country=row["country"],
            biography=row["biography"],
            avatar=row["avatar"],
            ratio=float(row["ratio"]),
            role=Role(row["role"]),
            created_at=_parse_datetime(str(row["created_at"])),
            updated_at=_parse_datetime(str(row["updated_at"])),
        )


__all__ = ["Database", "resolve_database_path"]
