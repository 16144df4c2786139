"""Credential store: account lookup, password verification, bootstrap accounts."""

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kalat.core.config import BootstrapAccount
from kalat.core.errors import AccountExists, BadCredentials, NoSuchAccount
from kalat.core.security import hash_password, verify_password
from kalat.models import Account

logger = logging.getLogger(__name__)


class CredentialStore:
    """Owns the accounts table. Accounts are never updated or deleted."""

    def __init__(self, db: Session, bcrypt_rounds: int | None = None) -> None:
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def get(self, username: str) -> Account | None:
        return self.db.query(Account).filter(Account.username == username).first()

    def verify(self, username: str, password: str) -> Account:
        """
        Return the account if username exists and password matches its hash.
        Raises NoSuchAccount or BadCredentials (both map to 401).
        """
        account = self.get(username)
        if account is None:
            raise NoSuchAccount(username)
        if not verify_password(password, account.password_hash):
            raise BadCredentials(username)
        return account

    def _insert(self, username: str, password: str, role: str) -> Account | None:
        """Insert one account; return None if a concurrent insert won the race."""
        account = Account(
            username=username,
            password_hash=hash_password(password, self.bcrypt_rounds),
            role=role,
        )
        self.db.add(account)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        self.db.refresh(account)
        return account

    def create(self, username: str, password: str, role: str = "user") -> Account:
        """Create an account for provisioning. Raises AccountExists if taken."""
        if self.get(username) is not None:
            raise AccountExists(username)
        account = self._insert(username, password, role)
        if account is None:
            raise AccountExists(username)
        return account

    def ensure_bootstrap_accounts(self, accounts: Iterable[BootstrapAccount]) -> int:
        """
        Make sure each bootstrap account exists; hash passwords on first creation only.

        Safe to run from several processes at once: a uniqueness violation means
        another process created the row first and is not an error.
        Returns the number of accounts this call created.
        """
        created = 0
        for entry in accounts:
            if self.get(entry.username) is not None:
                continue
            account = self._insert(
                entry.username, entry.password.get_secret_value(), entry.role
            )
            if account is None:
                logger.info(
                    "Bootstrap account %r was created concurrently; skipping.",
                    entry.username,
                )
                continue
            logger.info("Created bootstrap account %r (role=%s)", entry.username, entry.role)
            created += 1
        return created
