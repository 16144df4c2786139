"""Fragment repository: ordered, append-only store of archive fragments."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kalat.core.errors import InvalidFragmentType, MissingField
from kalat.models import Fragment
from kalat.schemas.fragment import FRAGMENT_TYPES
from kalat.seeds import SeedFragment

logger = logging.getLogger(__name__)

SEED_NAMESPACE = uuid.UUID("6f1d2c4e-8a53-4b0e-9d7a-3c2f5e8b1a90")


def seed_uuid(seed: SeedFragment) -> uuid.UUID:
    """Fixed id for a seed row; every process derives the same one."""
    return uuid.uuid5(SEED_NAMESPACE, seed.fallback_id or seed.label)


def _blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


class FragmentRepository:
    """
    Owns the fragments table. append is the only mutation; there is no update
    or delete. Listing is newest created_at first, later insertion first on ties.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def count(self) -> int:
        return self.db.query(func.count(Fragment.row_id)).scalar() or 0

    def list(self) -> list[Fragment]:
        """Return every fragment, newest first. An empty store gives []."""
        return (
            self.db.query(Fragment)
            .order_by(Fragment.created_at.desc(), Fragment.row_id.desc())
            .all()
        )

    def seed_if_empty(
        self,
        seeds: Sequence[SeedFragment],
        now: datetime | None = None,
    ) -> int:
        """
        Insert seeds in one batch when the store holds no fragments.

        Rows are inserted in the given order. Each one is stamped a microsecond
        older than the previous, so list() returns them in the given order.
        Seed rows carry fixed ids, so when several processes seed at once the
        unique id constraint lets one batch through and rolls the others back.
        Returns the number of rows inserted (0 when the store already had data).
        """
        if self.count() > 0:
            return 0
        base = now or datetime.now(UTC)
        rows = [
            Fragment(
                id=seed_uuid(seed),
                type=seed.type,
                label=seed.label,
                source=seed.source,
                detail=seed.detail,
                created_at=base - timedelta(microseconds=i),
            )
            for i, seed in enumerate(seeds)
        ]
        self.db.add_all(rows)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Fragment store was seeded concurrently; skipping.")
            return 0
        logger.info("Seeded empty fragment store with %d fragments", len(rows))
        return len(rows)

    def append(
        self,
        type: object,
        label: object,
        source: object,
        detail: object = None,
        now: datetime | None = None,
    ) -> Fragment:
        """
        Validate and store a new fragment; return the stored row.

        Raises MissingField when type, label or source is missing or blank, and
        InvalidFragmentType when type is not voice, photo, quote or fact.
        """
        missing = [
            name
            for name, value in (("type", type), ("label", label), ("source", source))
            if _blank(value)
        ]
        if missing:
            raise MissingField(*missing)
        if type not in FRAGMENT_TYPES:
            raise InvalidFragmentType(type)
        if detail is not None and not isinstance(detail, str):
            detail = str(detail)

        fragment = Fragment(
            type=type,
            label=label,
            source=source,
            detail=detail or None,
            created_at=now or datetime.now(UTC),
        )
        self.db.add(fragment)
        self.db.commit()
        self.db.refresh(fragment)
        logger.info("Stored %s fragment %s (%r)", fragment.type, fragment.id, fragment.label)
        return fragment
