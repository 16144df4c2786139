"""Shared helpers for tests: database reset and small builders."""

import json
from collections.abc import Callable
from types import SimpleNamespace
from uuid import uuid4

import httpx

from kalat.core.database import engine
from kalat.models import Base


def reset_database() -> None:
    """Drop and recreate every table in the in-memory test database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def account(username: str = "admin", role: str = "admin") -> SimpleNamespace:
    """Stand-in for an Account row; issue_token only reads id, username and role."""
    return SimpleNamespace(id=uuid4(), username=username, role=role)


def json_response(status_code: int, body: object) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(body).encode("utf-8"),
                          headers={"content-type": "application/json"})


def fragment_payload(label: str = "Snap 09", type: str = "photo", **kwargs: object) -> dict:
    payload = {
        "id": str(uuid4()),
        "type": type,
        "label": label,
        "source": "https://example.com/snap.jpg",
        "detail": None,
        "created_at": "2026-10-19T10:00:00+00:00",
    }
    payload.update(kwargs)
    return payload


class RecordingHandler:
    """httpx.MockTransport handler that records requests and delegates to a callable."""

    def __init__(self, respond: Callable[[httpx.Request], object]) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.respond(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    def count(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )
