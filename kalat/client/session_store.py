"""Durable client-side session record ({token, role, username})."""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from kalat.client.models import SessionState

logger = logging.getLogger(__name__)


class SessionStore:
    """
    One JSON file holding the current session. Clearing it is the whole of
    logout: tokens are stateless, so the server is never told.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> SessionState | None:
        """Return the stored session, or None if absent or unreadable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read session file %s: %s", self.path, e)
            return None
        try:
            return SessionState.model_validate_json(raw)
        except ValidationError:
            logger.warning("Ignoring malformed session file %s", self.path)
            return None

    def save(self, state: SessionState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(state.model_dump_json(), encoding="utf-8")
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
