"""Startup preparation: optional table creation, bootstrap accounts, seed fragments."""

import logging

from kalat.core.config import Settings
from kalat.core.database import SessionLocal, engine
from kalat.models import Base
from kalat.seeds import SEED_FRAGMENTS
from kalat.services.credentials import CredentialStore
from kalat.services.fragments import FragmentRepository

logger = logging.getLogger(__name__)


def prepare_database(settings: Settings) -> None:
    """
    Idempotent; runs on every process start. Several workers may run it at
    once: bootstrap accounts and the seed batch both tolerate losing a
    uniqueness race.
    """
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = CredentialStore(db, settings.BCRYPT_ROUNDS).ensure_bootstrap_accounts(
            settings.BOOTSTRAP_ACCOUNTS
        )
        seeded = FragmentRepository(db).seed_if_empty(SEED_FRAGMENTS)
        logger.info(
            "Database ready: bootstrap_accounts_created=%s seed_fragments_inserted=%s",
            created,
            seeded,
        )
    finally:
        db.close()
