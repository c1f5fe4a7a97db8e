"""Configuration for the accounts service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

from .models import Role

DEFAULT_BASE_PATH = "/api/users"
DEFAULT_SESSION_TTL_MINUTES = 8 * 60


def _env_flag(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _normalize_base_path(value: str) -> str:
    cleaned = "/" + value.strip().strip("/")
    return cleaned if cleaned != "/" else ""


@dataclass(frozen=True)
class Settings:
    """Runtime settings, usually read from ``ACCOUNTS_*`` environment variables."""

    database_path: Optional[str] = None
    base_path: str = DEFAULT_BASE_PATH
    session_ttl: timedelta = timedelta(minutes=DEFAULT_SESSION_TTL_MINUTES)
    secure_cookies: bool = True

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        raw_ttl = env.get("ACCOUNTS_SESSION_TTL_MINUTES")
        if raw_ttl:
            try:
                minutes = int(raw_ttl)
            except ValueError as exc:
                raise ValueError("ACCOUNTS_SESSION_TTL_MINUTES must be an integer") from exc
            if minutes <= 0:
                raise ValueError("ACCOUNTS_SESSION_TTL_MINUTES must be positive")
        else:
            minutes = DEFAULT_SESSION_TTL_MINUTES

        return Settings(
            database_path=env.get("ACCOUNTS_DB_PATH") or None,
            base_path=_normalize_base_path(env.get("ACCOUNTS_BASE_PATH", DEFAULT_BASE_PATH)),
            session_ttl=timedelta(minutes=minutes),
            secure_cookies=_env_flag(env.get("ACCOUNTS_SESSION_SECURE"), True),
        )


@dataclass(frozen=True)
class SeedAccount:
    """An account to create when seeding a fresh database."""

    pseudo: str
    password: str
    email: Optional[str] = None
    country: Optional[str] = None
    role: Role = Role.USER

    @staticmethod
    def from_dict(data: Dict[str, object]) -> "SeedAccount":
        """Create a :class:`SeedAccount` from raw dictionary data."""
        required_fields = {"pseudo", "password"}
        missing = required_fields - data.keys()
        if missing:
            raise ValueError(f"Missing required account fields: {', '.join(sorted(missing))}")

        raw_role = str(data.get("role", Role.USER.value)).strip().lower()
        try:
            role = Role(raw_role)
        except ValueError as exc:
            raise ValueError(f"Unknown role '{raw_role}' for account {data['pseudo']}") from exc

        return SeedAccount(
            pseudo=str(data["pseudo"]),
            password=str(data["password"]),
            email=str(data["email"]) if data.get("email") is not None else None,
            country=str(data["country"]) if data.get("country") is not None else None,
            role=role,
        )


def load_seed_accounts(config_path: Path) -> List[SeedAccount]:
    """Load seed accounts from a YAML file."""
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    accounts_raw = raw.get("accounts")
    if not accounts_raw:
        raise ValueError("Seed file must define at least one account under the 'accounts' key")

    return [SeedAccount.from_dict(item) for item in accounts_raw]


def resolve_seed_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the seed accounts file."""
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    return (Path(__file__).resolve().parent.parent / "config" / "accounts.yaml").resolve(strict=False)


__all__ = ["SeedAccount", "Settings", "load_seed_accounts", "resolve_seed_path"]
