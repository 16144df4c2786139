"""Location log: append-only store of client location reports (admin-readable)."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.orm import Session

from kalat.models import Location


class LocationLog:
    def __init__(self, db: Session) -> None:
        self.db = db

    def record(
        self,
        username: str,
        latitude: float,
        longitude: float,
        now: datetime | None = None,
    ) -> Location:
        entry = Location(
            username=username,
            latitude=latitude,
            longitude=longitude,
            created_at=now or datetime.now(UTC),
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def list(self) -> list[Location]:
        """All reports, newest first."""
        return (
            self.db.query(Location)
            .order_by(Location.created_at.desc(), Location.row_id.desc())
            .all()
        )
