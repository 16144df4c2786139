"""HTTP scenarios against the FastAPI app (login, fragments, locations, health)."""

import tempfile
import unittest
from datetime import UTC, datetime, timedelta
from pathlib import Path

from fastapi.testclient import TestClient

from kalat.client.models import SessionState
from kalat.client.session_store import SessionStore
from kalat.core.security import issue_token
from kalat.main import app
from kalat.seeds import SEED_FRAGMENTS
from tests.support import account, reset_database


class ApiTestCase(unittest.TestCase):
    """Fresh database per test; the app lifespan bootstraps accounts and seeds."""

    def setUp(self) -> None:
        reset_database()
        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def login(self, username: str, password: str) -> str:
        resp = self.client.post("/api/login", json={"username": username, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["token"]

    def auth(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}


class TestLogin(ApiTestCase):

    def test_admin_login_on_fresh_store(self) -> None:
        resp = self.client.post("/api/login", json={"username": "admin", "password": "admin"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["role"], "admin")
        self.assertEqual(body["username"], "admin")
        self.assertTrue(body["token"])

    def test_viewer_login(self) -> None:
        resp = self.client.post("/api/login", json={"username": "viewer", "password": "viewer"})
        self.assertEqual(resp.json()["role"], "user")

    def test_missing_fields(self) -> None:
        for body in ({"username": "admin"}, {"password": "admin"}, {}, {"username": "", "password": ""}):
            with self.subTest(body=body):
                resp = self.client.post("/api/login", json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()["message"], "username and password are required")

    def test_no_body(self) -> None:
        resp = self.client.post("/api/login")
        self.assertEqual(resp.status_code, 400)

    def test_bad_password_and_unknown_user_look_the_same(self) -> None:
        wrong = self.client.post("/api/login", json={"username": "admin", "password": "nope"})
        unknown = self.client.post("/api/login", json={"username": "ghost", "password": "nope"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())


class TestListFragments(ApiTestCase):

    def test_requires_token(self) -> None:
        resp = self.client.get("/api/fragments")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_rejects_garbage_token(self) -> None:
        resp = self.client.get("/api/fragments", headers=self.auth("garbage"))
        self.assertEqual(resp.status_code, 401)

    def test_rejects_expired_token(self) -> None:
        token = issue_token(account(), now=datetime.now(UTC) - timedelta(hours=13))
        resp = self.client.get("/api/fragments", headers=self.auth(token))
        self.assertEqual(resp.status_code, 401)

    def test_viewer_sees_seeds_in_order(self) -> None:
        token = self.login("viewer", "viewer")
        resp = self.client.get("/api/fragments", headers=self.auth(token))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([f["label"] for f in body], [s.label for s in SEED_FRAGMENTS])
        self.assertEqual(
            set(body[0]), {"id", "type", "label", "source", "detail", "created_at"}
        )

    def test_restart_does_not_reseed(self) -> None:
        with TestClient(app):
            pass
        token = self.login("viewer", "viewer")
        resp = self.client.get("/api/fragments", headers=self.auth(token))
        self.assertEqual(len(resp.json()), len(SEED_FRAGMENTS))


class TestCreateFragment(ApiTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.admin_token = self.login("admin", "admin")
        self.viewer_token = self.login("viewer", "viewer")

    def test_admin_creates_fragment_listed_first(self) -> None:
        resp = self.client.post(
            "/api/fragments",
            json={"type": "quote", "label": "Quote 05", "source": '"Say less."'},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        created = resp.json()
        self.assertEqual(created["type"], "quote")
        self.assertIsNone(created["detail"])

        listing = self.client.get("/api/fragments", headers=self.auth(self.viewer_token))
        self.assertEqual(listing.json()[0]["id"], created["id"])

    def test_inline_data_source(self) -> None:
        resp = self.client.post(
            "/api/fragments",
            json={
                "type": "voice",
                "label": "VM #5",
                "source": "data:audio/mpeg;base64,SUQz",
                "detail": "Evening hum",
            },
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["source"], "data:audio/mpeg;base64,SUQz")

    def test_unsupported_type(self) -> None:
        resp = self.client.post(
            "/api/fragments",
            json={"type": "video", "label": "x", "source": "y"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Unsupported fragment type")

    def test_missing_field(self) -> None:
        resp = self.client.post(
            "/api/fragments",
            json={"type": "photo", "source": "https://example.com/a.jpg"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "label is required")

    def test_without_authorization_header(self) -> None:
        resp = self.client.post(
            "/api/fragments", json={"type": "quote", "label": "x", "source": "y"}
        )
        self.assertEqual(resp.status_code, 401)

    def test_with_user_role(self) -> None:
        resp = self.client.post(
            "/api/fragments",
            json={"type": "quote", "label": "x", "source": "y"},
            headers=self.auth(self.viewer_token),
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["message"], "Admin privileges required")

    def test_unauthenticated_invalid_body_is_401_not_400_or_403(self) -> None:
        resp = self.client.post("/api/fragments", json={"type": "video"})
        self.assertEqual(resp.status_code, 401)

    def test_user_role_invalid_body_is_403(self) -> None:
        resp = self.client.post(
            "/api/fragments", json={"type": "video"}, headers=self.auth(self.viewer_token)
        )
        self.assertEqual(resp.status_code, 403)

    def test_wrong_field_type_is_400(self) -> None:
        resp = self.client.post(
            "/api/fragments",
            json={"type": "quote", "label": ["x"], "source": "y"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 400)


class TestStatelessLogout(ApiTestCase):
    """Logout only discards the token client-side; the token itself stays valid."""

    def test_discarded_token_still_works_until_expiry(self) -> None:
        resp = self.client.post("/api/login", json={"username": "viewer", "password": "viewer"})
        state = SessionState.model_validate(resp.json())
        with tempfile.TemporaryDirectory() as tmp:
            store = SessionStore(Path(tmp) / "session.json")
            store.save(state)
            store.clear()
            self.assertIsNone(store.load())
        listing = self.client.get("/api/fragments", headers=self.auth(state.token))
        self.assertEqual(listing.status_code, 200)


class TestLocations(ApiTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.admin_token = self.login("admin", "admin")
        self.viewer_token = self.login("viewer", "viewer")

    def test_report_and_admin_listing(self) -> None:
        resp = self.client.post(
            "/api/locations",
            json={"latitude": 51.5072, "longitude": -0.1276},
            headers=self.auth(self.viewer_token),
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["username"], "viewer")

        log = self.client.get("/api/locations", headers=self.auth(self.admin_token))
        self.assertEqual(log.status_code, 200)
        self.assertEqual(len(log.json()), 1)
        self.assertAlmostEqual(log.json()[0]["latitude"], 51.5072)

    def test_listing_is_admin_only(self) -> None:
        resp = self.client.get("/api/locations", headers=self.auth(self.viewer_token))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.get("/api/locations")
        self.assertEqual(resp.status_code, 401)

    def test_report_requires_token(self) -> None:
        resp = self.client.post("/api/locations", json={"latitude": 1, "longitude": 2})
        self.assertEqual(resp.status_code, 401)

    def test_out_of_range_coordinates(self) -> None:
        resp = self.client.post(
            "/api/locations",
            json={"latitude": 120, "longitude": 0},
            headers=self.auth(self.viewer_token),
        )
        self.assertEqual(resp.status_code, 400)


class TestHealthAndRoot(ApiTestCase):

    def test_health(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "connected")
        self.assertEqual(resp.json()["status"], "ok")

    def test_root(self) -> None:
        self.assertEqual(self.client.get("/").json()["message"], "Kalat API")

    def test_unknown_route_uses_message_shape(self) -> None:
        resp = self.client.get("/api/nothing-here")
        self.assertEqual(resp.status_code, 404)
        self.assertIn("message", resp.json())


if __name__ == "__main__":
    unittest.main()
