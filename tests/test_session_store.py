"""Durable client session file."""

import os
import stat
import tempfile
import unittest
from pathlib import Path

from kalat.client.models import SessionState
from kalat.client.session_store import SessionStore


class TestSessionStore(unittest.TestCase):

    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = Path(tmp.name) / "nested" / "session.json"
        self.store = SessionStore(self.path)

    def test_round_trip(self) -> None:
        state = SessionState(token="t", role="admin", username="admin")
        self.store.save(state)
        self.assertEqual(self.store.load(), state)

    @unittest.skipIf(os.name == "nt", "POSIX permissions")
    def test_file_is_private(self) -> None:
        self.store.save(SessionState(token="t", role="user", username="viewer"))
        self.assertEqual(stat.S_IMODE(self.path.stat().st_mode), 0o600)

    def test_missing_file(self) -> None:
        self.assertIsNone(self.store.load())

    def test_malformed_file(self) -> None:
        self.path.parent.mkdir(parents=True)
        for raw in ("not json", '{"token": "t"}', '{"token": "t", "role": "root", "username": "x"}'):
            with self.subTest(raw=raw):
                self.path.write_text(raw, encoding="utf-8")
                self.assertIsNone(self.store.load())

    def test_clear_is_idempotent(self) -> None:
        self.store.save(SessionState(token="t", role="user", username="viewer"))
        self.store.clear()
        self.store.clear()
        self.assertIsNone(self.store.load())


if __name__ == "__main__":
    unittest.main()
