from __future__ import annotations

from pathlib import Path

import pytest

from shogi_accounts.database import Database
from shogi_accounts.models import Role


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db_path = tmp_path / "accounts.sqlite3"
    db = Database(db_path)
    db.initialize()
    return db


def test_create_user_assigns_id_and_defaults(database: Database) -> None:
    user = database.create_user("Juju", "efjzb565VHG", email=" JLisita@Hotmail.fr ", country="France")

    assert user.id > 0
    assert user.pseudo == "Juju"
    assert user.email == "jlisita@hotmail.fr"
    assert user.country == "France"
    assert user.ratio == 0.0
    assert user.role is Role.USER
    assert user.created_at == user.updated_at


def test_duplicate_pseudo_is_rejected_case_insensitively(database: Database) -> None:
    database.create_user("Juju", "efjzb565VHG")
    with pytest.raises(ValueError):
        database.create_user("juju", "another-password")


def test_duplicate_email_is_rejected(database: Database) -> None:
    database.create_user("Juju", "efjzb565VHG", email="juju@example.com")
    with pytest.raises(ValueError):
        database.create_user("Other", "another-password", email="JUJU@example.com")


def test_create_user_requires_password(database: Database) -> None:
    with pytest.raises(ValueError):
        database.create_user("Juju", "")


def test_authenticate_by_pseudo_or_email(database: Database) -> None:
    user = database.create_user("Juju", "efjzb565VHG", email="juju@example.com")

    by_pseudo = database.authenticate_user("efjzb565VHG", pseudo="Juju")
    by_email = database.authenticate_user("efjzb565VHG", email="Juju@Example.com")

    assert by_pseudo is not None and by_pseudo.id == user.id
    assert by_email is not None and by_email.id == user.id
    assert database.authenticate_user("wrong", pseudo="Juju") is None
    assert database.authenticate_user("efjzb565VHG", pseudo="nobody") is None
    assert database.authenticate_user("efjzb565VHG", pseudo="   ") is None
    assert database.authenticate_user("efjzb565VHG") is None


def test_authenticate_only_consults_the_supplied_column(database: Database) -> None:
    decoy = database.create_user("bob@example.com", "decoy-pass")
    bob = database.create_user("bob", "bob-pass", email="bob@example.com")

    by_email = database.authenticate_user("bob-pass", email="bob@example.com")
    by_pseudo = database.authenticate_user("decoy-pass", pseudo="bob@example.com")

    assert by_email is not None and by_email.id == bob.id
    assert by_pseudo is not None and by_pseudo.id == decoy.id
    assert database.authenticate_user("bob-pass", email="bob") is None


def test_update_user_rejects_non_finite_ratio(database: Database) -> None:
    user = database.create_user("Juju", "efjzb565VHG")

    with pytest.raises(ValueError):
        database.update_user(user.id, ratio=float("nan"))
    with pytest.raises(ValueError):
        database.update_user(user.id, ratio=float("inf"))

    assert database.get_user(user.id).ratio == 0.0


def test_update_user_changes_fields_and_password(database: Database) -> None:
    user = database.create_user("Juju", "efjzb565VHG")

    updated = database.update_user(
        user.id,
        biography="je suis dev web",
        ratio=12.7,
        role=Role.ADMIN,
        password="new-password",
    )

    assert updated is not None
    assert updated.biography == "je suis dev web"
    assert updated.ratio == pytest.approx(12.7)
    assert updated.role is Role.ADMIN
    assert updated.updated_at >= user.updated_at
    assert database.authenticate_user("new-password", pseudo="Juju") is not None
    assert database.authenticate_user("efjzb565VHG", pseudo="Juju") is None


def test_update_missing_user_returns_none(database: Database) -> None:
    assert database.update_user(404, country="Japan") is None


def test_update_user_rejects_taken_pseudo(database: Database) -> None:
    database.create_user("Juju", "efjzb565VHG")
    other = database.create_user("Habu", "yoshiharu-7")
    with pytest.raises(ValueError):
        database.update_user(other.id, pseudo="JUJU")


def test_delete_user_returns_removed_record(database: Database) -> None:
    user = database.create_user("Juju", "efjzb565VHG")

    deleted = database.delete_user(user.id)

    assert deleted is not None
    assert deleted.id == user.id
    assert database.get_user(user.id) is None
    assert database.delete_user(user.id) is None


def test_list_users_is_ordered_by_id(database: Database) -> None:
    first = database.create_user("Juju", "efjzb565VHG")
    second = database.create_user("Habu", "yoshiharu-7")

    assert [user.id for user in database.list_users()] == [first.id, second.id]
