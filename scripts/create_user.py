import argparse
import getpass
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shogi_accounts.database import Database, resolve_database_path
from shogi_accounts.models import Role


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a shogi accounts user")
    parser.add_argument("pseudo", help="Unique pseudo used to log in")
    parser.add_argument("--email", default=None, help="Optional email address")
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.USER.value,
        help="Role granted to the account (default: user)",
    )
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to ACCOUNTS_DB_PATH or data/accounts.sqlite3)",
    )
    return parser.parse_args()


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if len(password) < 8:
            print("Password must be at least 8 characters long.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def main() -> int:
    args = parse_args()
    password = prompt_for_password()

    db_env = args.db_path or os.getenv("ACCOUNTS_DB_PATH")
    database = Database(resolve_database_path(db_env))
    database.initialize()

    try:
        user = database.create_user(args.pseudo, password, email=args.email, role=Role(args.role))
    except ValueError as exc:  # duplicates, etc.
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Created {user.role.value} #{user.id}: {user.pseudo} <{user.email or 'no email set'}>")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
