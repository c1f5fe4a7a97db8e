from __future__ import annotations

from pathlib import Path

from main import _parse_args, _seed
from shogi_accounts.database import Database
from shogi_accounts.models import Role


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "0.0.0.0", "--port", "8080"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 8080


def test_seed_subcommand_accepts_file() -> None:
    args = _parse_args(["seed", "--file", "accounts.yaml"])
    assert args.command == "seed"
    assert args.seed_file == "accounts.yaml"


def test_seed_creates_missing_accounts_only(tmp_path: Path) -> None:
    database = Database(tmp_path / "accounts.sqlite3")
    database.initialize()
    database.create_user("root", "already-here")

    seed_file = tmp_path / "accounts.yaml"
    seed_file.write_text(
        "accounts:\n"
        "  - pseudo: root\n"
        "    password: change-me\n"
        "    role: superadmin\n"
        "  - pseudo: moderator\n"
        "    password: change-me-too\n"
        "    role: admin\n",
        encoding="utf-8",
    )

    assert _seed(database, seed_file) == 1

    root = database.get_user_by_pseudo("root")
    moderator = database.get_user_by_pseudo("moderator")
    assert root is not None and root.role is Role.USER
    assert moderator is not None and moderator.role is Role.ADMIN


def test_seed_skips_conflicting_accounts_and_continues(tmp_path: Path) -> None:
    database = Database(tmp_path / "accounts.sqlite3")
    database.initialize()
    database.create_user("habu", "already-here", email="taken@example.com")

    seed_file = tmp_path / "accounts.yaml"
    seed_file.write_text(
        "accounts:\n"
        "  - pseudo: first\n"
        "    password: change-me\n"
        "  - pseudo: clash\n"
        "    password: change-me\n"
        "    email: taken@example.com\n"
        "  - pseudo: last\n"
        "    password: change-me\n"
        "    role: admin\n",
        encoding="utf-8",
    )

    assert _seed(database, seed_file) == 2

    assert database.get_user_by_pseudo("first") is not None
    assert database.get_user_by_pseudo("clash") is None
    last = database.get_user_by_pseudo("last")
    assert last is not None and last.role is Role.ADMIN
