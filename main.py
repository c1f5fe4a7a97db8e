"""Command-line interface for the shogi accounts service."""

from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from shogi_accounts.config import Settings, load_seed_accounts, resolve_seed_path
from shogi_accounts.database import Database, resolve_database_path

logger = logging.getLogger("shogi_accounts.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Shogi accounts service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Initialise the accounts database")
    subparsers.add_parser("list-users", help="Print every registered account")

    seed_parser = subparsers.add_parser("seed", help="Create accounts listed in a YAML seed file")
    seed_parser.add_argument(
        "--file",
        dest="seed_file",
        default=None,
        help="Path to the seed file (defaults to ACCOUNTS_SEED_FILE or config/accounts.yaml)",
    )

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP accounts service")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address for the API")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port for the API (default: 8000)")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "init-db", "list-users", "seed"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _initialise_database(settings: Settings) -> Database:
    db_path = resolve_database_path(settings.database_path)
    database = Database(db_path)
    database.initialize()
    logger.info("Database initialised at %s", db_path)
    return database


def _serve(*, database: Database, settings: Settings, host: str, port: int) -> None:
    from shogi_accounts.service import create_app
    import uvicorn

    logger.info("Starting accounts API on http://%s:%s%s", host, port, settings.base_path or "/")
    app = create_app(database=database, settings=settings)
    uvicorn.run(app, host=host, port=port, log_level="info")


def _list_users(database: Database) -> None:
    users = database.list_users()
    if not users:
        print("No users are currently registered.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':>4}  {'Pseudo':<24}  {'Role':<10}  {'Email':<32}  Created")
    print("-" * 92)
    for user in users:
        created = user.created_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        email = user.email or "<no email>"
        print(f"{user.id:>4}  {user.pseudo:<24}  {user.role.value:<10}  {email:<32}  {created}")


def _seed(database: Database, seed_file: Path) -> int:
    accounts = load_seed_accounts(seed_file)
    created = 0
    for account in accounts:
        if database.get_user_by_pseudo(account.pseudo) is not None:
            logger.info("Account %s already exists; skipping", account.pseudo)
            continue
        try:
            user = database.create_user(
                account.pseudo,
                account.password,
                email=account.email,
                country=account.country,
                role=account.role,
            )
        except ValueError as exc:
            logger.warning("Could not seed account %s: %s", account.pseudo, exc)
            continue
        logger.info("Seeded account #%s %s (%s)", user.id, user.pseudo, user.role.value)
        created += 1
    return created


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)
    settings = Settings.from_env()
    database = _initialise_database(settings)

    if args.command == "serve":
        _serve(database=database, settings=settings, host=args.host, port=args.port)
    elif args.command == "list-users":
        _list_users(database)
    elif args.command == "seed":
        seed_file = resolve_seed_path(args.seed_file or os.getenv("ACCOUNTS_SEED_FILE"))
        try:
            created = _seed(database, seed_file)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Failed to seed accounts: {exc}") from exc
        print(f"Seeded {created} account(s) from {seed_file}.")
    elif args.command == "init-db":
        print("Database initialisation complete.")


if __name__ == "__main__":
    main()
