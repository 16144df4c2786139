"""Tests for kalat.services.credentials against the in-memory database."""

import unittest
from unittest.mock import patch

from pydantic import SecretStr

from kalat.core.config import BootstrapAccount, settings
from kalat.core.database import SessionLocal
from kalat.core.errors import AccountExists, BadCredentials, NoSuchAccount
from kalat.models import Account
from kalat.services.bootstrap import prepare_database
from kalat.services.credentials import CredentialStore
from tests.support import reset_database

BOOTSTRAP = [
    BootstrapAccount(username="admin", password=SecretStr("admin"), role="admin"),
    BootstrapAccount(username="viewer", password=SecretStr("viewer"), role="user"),
]


class CredentialStoreTestCase(unittest.TestCase):

    def setUp(self) -> None:
        reset_database()
        self.db = SessionLocal()
        self.addCleanup(self.db.close)
        self.store = CredentialStore(self.db, bcrypt_rounds=4)


class TestVerify(CredentialStoreTestCase):
    """verify returns the account or raises NoSuchAccount / BadCredentials."""

    def setUp(self) -> None:
        super().setUp()
        self.store.ensure_bootstrap_accounts(BOOTSTRAP)

    def test_valid_credentials(self) -> None:
        acct = self.store.verify("admin", "admin")
        self.assertEqual(acct.username, "admin")
        self.assertEqual(acct.role, "admin")

    def test_unknown_username(self) -> None:
        with self.assertRaises(NoSuchAccount):
            self.store.verify("nobody", "admin")

    def test_username_is_case_sensitive(self) -> None:
        with self.assertRaises(NoSuchAccount):
            self.store.verify("Admin", "admin")

    def test_wrong_password(self) -> None:
        with self.assertRaises(BadCredentials) as ctx:
            self.store.verify("admin", "viewer")
        self.assertEqual(ctx.exception.status_code, 401)

    def test_password_is_stored_hashed(self) -> None:
        acct = self.db.query(Account).filter(Account.username == "admin").one()
        self.assertNotEqual(acct.password_hash, "admin")
        self.assertTrue(acct.password_hash.startswith("$2"))


class TestEnsureBootstrapAccounts(CredentialStoreTestCase):
    """ensure_bootstrap_accounts is idempotent and tolerates insert races."""

    def test_creates_then_noop(self) -> None:
        self.assertEqual(self.store.ensure_bootstrap_accounts(BOOTSTRAP), 2)
        hashes = {a.username: a.password_hash for a in self.db.query(Account).all()}
        self.assertEqual(self.store.ensure_bootstrap_accounts(BOOTSTRAP), 0)
        self.assertEqual(self.db.query(Account).count(), 2)
        after = {a.username: a.password_hash for a in self.db.query(Account).all()}
        self.assertEqual(hashes, after)

    def test_existing_password_is_not_rehashed(self) -> None:
        self.store.ensure_bootstrap_accounts(BOOTSTRAP)
        changed = [
            BootstrapAccount(username="admin", password=SecretStr("other"), role="admin")
        ]
        self.store.ensure_bootstrap_accounts(changed)
        self.assertEqual(self.store.verify("admin", "admin").username, "admin")

    def test_lost_insert_race_is_benign(self) -> None:
        self.store.ensure_bootstrap_accounts(BOOTSTRAP)
        # Simulate another process inserting between our lookup and our insert.
        with patch.object(CredentialStore, "get", return_value=None):
            created = self.store.ensure_bootstrap_accounts(BOOTSTRAP)
        self.assertEqual(created, 0)
        self.assertEqual(self.db.query(Account).count(), 2)
        self.assertEqual(self.store.verify("viewer", "viewer").role, "user")

    def test_prepare_database_twice(self) -> None:
        prepare_database(settings)
        prepare_database(settings)
        self.assertEqual(self.db.query(Account).count(), len(settings.BOOTSTRAP_ACCOUNTS))


class TestCreate(CredentialStoreTestCase):

    def test_create_and_verify(self) -> None:
        self.store.create("curator", "passphrase", "admin")
        self.assertEqual(self.store.verify("curator", "passphrase").role, "admin")

    def test_duplicate_username(self) -> None:
        self.store.create("curator", "passphrase")
        with self.assertRaises(AccountExists):
            self.store.create("curator", "another")


if __name__ == "__main__":
    unittest.main()
