"""HTTP client for the archive API (login, fragments, locations)."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from kalat.client.models import FragmentItem, LocationEntry, SessionState

logger = logging.getLogger(__name__)

_fragment_list = TypeAdapter(list[FragmentItem])
_location_list = TypeAdapter(list[LocationEntry])


class ApiError(Exception):
    """Raised when a request fails: network error, non-2xx status or unreadable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class LoginFailed(ApiError):
    """Login was rejected or could not be completed."""


class UploadFailed(ApiError):
    """Fragment upload was rejected or could not be completed."""


def _error_detail(resp: httpx.Response, default: str) -> str:
    """Prefer the server's {"message"}; fall back to the raw text, then default."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500] if resp.text else default
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return default


class ArchiveClient:
    """
    Thin async wrapper over the archive API. Every failure surfaces as ApiError
    (or a subclass), so callers have a single exception to handle.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ArchiveClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, Any] | None = None,
        error_cls: type[ApiError] = ApiError,
        default_error: str = "Request failed",
    ) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            resp = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise error_cls(f"Network error: {e!s}") from e
        if resp.status_code >= 400:
            raise error_cls(_error_detail(resp, default_error), resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise error_cls("Invalid JSON in response", resp.status_code) from e

    async def login(self, username: str, password: str) -> SessionState:
        data = await self._request(
            "POST",
            "/api/login",
            json={"username": username, "password": password},
            error_cls=LoginFailed,
            default_error="Invalid credentials",
        )
        try:
            return SessionState.model_validate(data)
        except ValidationError as e:
            raise LoginFailed("Unexpected login response") from e

    async def list_fragments(self, token: str) -> list[FragmentItem]:
        data = await self._request("GET", "/api/fragments", token=token)
        try:
            return _fragment_list.validate_python(data)
        except ValidationError as e:
            raise ApiError("Unexpected fragment list payload") from e

    async def create_fragment(
        self,
        token: str,
        type: str,
        label: str,
        source: str,
        detail: str | None = None,
    ) -> FragmentItem:
        data = await self._request(
            "POST",
            "/api/fragments",
            token=token,
            json={"type": type, "label": label, "source": source, "detail": detail},
            error_cls=UploadFailed,
            default_error="Upload failed",
        )
        try:
            return FragmentItem.model_validate(data)
        except ValidationError as e:
            raise UploadFailed("Unexpected upload response") from e

    async def report_location(self, token: str, latitude: float, longitude: float) -> None:
        await self._request(
            "POST",
            "/api/locations",
            token=token,
            json={"latitude": latitude, "longitude": longitude},
            default_error="Failed to save location",
        )

    async def list_locations(self, token: str) -> list[LocationEntry]:
        data = await self._request(
            "GET", "/api/locations", token=token, default_error="Failed to fetch locations"
        )
        try:
            return _location_list.validate_python(data)
        except ValidationError as e:
            raise ApiError("Unexpected location list payload") from e
