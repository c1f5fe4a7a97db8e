"""Tests for the password hashing helpers used by the accounts database."""

from __future__ import annotations

import unittest

from shogi_accounts import database


class PasswordHashingTests(unittest.TestCase):
    def test_hash_is_salted_and_verifiable(self) -> None:
        first = database._hash_password("supersecurepassword")
        second = database._hash_password("supersecurepassword")

        self.assertTrue(first.startswith("$pbkdf2-sha256$"))
        self.assertNotEqual(first, second)
        self.assertTrue(database._verify_password("supersecurepassword", first))
        self.assertFalse(database._verify_password("incorrect", first))

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(database._verify_password("supersecurepassword", "not-a-hash"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
