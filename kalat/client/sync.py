"""Client sync layer: fragment listing with offline fallback, optimistic appends, admin location panel."""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Literal

from kalat.client.api import ApiError, ArchiveClient, UploadFailed
from kalat.client.models import FALLBACK_FRAGMENTS, FragmentItem, LocationEntry, SessionState
from kalat.client.tasks import LatestOnly

logger = logging.getLogger(__name__)

FilterKey = Literal["all", "voice", "photo"]


def media_type_for(mime: str | None) -> str | None:
    """Map a MIME type to a fragment type: audio -> voice, image -> photo."""
    if not mime:
        return None
    if mime.startswith("audio/"):
        return "voice"
    if mime.startswith("image/"):
        return "photo"
    return None


def to_data_url(mime: str, payload: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


class FragmentSync:
    """
    The fragment list a viewer sees: the last full fetch plus the fragments
    this client uploaded since then, newest first.

    A failed fetch falls back to the fixed seed set instead of an error, except
    a 401: the session is no longer valid, so on_unauthorized is called and the
    list stays empty. Uploads are prepended locally and never trigger a
    re-fetch; changes made by other clients appear on the next full load.
    """

    def __init__(
        self,
        api: ArchiveClient,
        fallback: Sequence[FragmentItem] = FALLBACK_FRAGMENTS,
        *,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self.api = api
        self.fallback = list(fallback)
        self.on_unauthorized = on_unauthorized
        self.needs_login = False
        self.session: SessionState | None = None
        self.fetched: list[FragmentItem] = []
        self.local_appends: list[FragmentItem] = []
        self.is_loading = False
        self.using_fallback = False
        self._fetch = LatestOnly()

    @property
    def items(self) -> list[FragmentItem]:
        return [*self.local_appends, *self.fetched]

    def start(self, session: SessionState) -> asyncio.Task[None]:
        """Attach a session and issue the initial listing request."""
        self.session = session
        self.needs_login = False
        return self.load()

    def load(self) -> asyncio.Task[None]:
        """(Re)fetch the full list. Cancels any fetch still in flight."""
        if self.session is None:
            raise RuntimeError("FragmentSync.load() needs a session; call start() first")
        self.is_loading = True
        settled = {item.id for item in self.local_appends}
        return self._fetch.run(self._load(self.session.token, settled))

    async def _load(self, token: str, settled: set[str]) -> None:
        """
        settled holds the uploads made before this fetch started; the server
        listing covers them. Uploads confirmed while it was in flight are kept
        unless the listing already has them.
        """
        try:
            data = await self.api.list_fragments(token)
        except ApiError as e:
            if e.status_code == 401:
                logger.info("Fragment listing rejected the session token: %s", e.message)
                self.fetched = []
                self.local_appends = []
                self.is_loading = False
                self.needs_login = True
                if self.on_unauthorized is not None:
                    self.on_unauthorized()
                return
            logger.warning("Falling back to local seed data: %s", e.message)
            self.fetched = list(self.fallback)
            self.using_fallback = True
        else:
            self.fetched = data
            self.using_fallback = False
        listed = {item.id for item in self.fetched}
        self.local_appends = [
            item
            for item in self.local_appends
            if item.id not in settled and item.id not in listed
        ]
        self.is_loading = False

    def clear(self) -> None:
        """Drop all state (logout). Cancels an in-flight fetch."""
        self._fetch.cancel()
        self.session = None
        self.fetched = []
        self.local_appends = []
        self.is_loading = False
        self.using_fallback = False

    async def upload(
        self,
        type: str,
        label: str,
        source: str,
        detail: str | None = None,
    ) -> FragmentItem:
        """
        Create a fragment and prepend it to the local view.
        Raises UploadFailed with a message suitable for the user.
        """
        if self.session is None or not self.session.is_admin:
            raise UploadFailed("You are not allowed to upload.")
        label = (label or "").strip()
        if not label:
            raise UploadFailed("A label is required.")
        saved = await self.api.create_fragment(
            self.session.token,
            type,
            label,
            source,
            (detail or "").strip() or None,
        )
        saved.uploaded = True
        self.local_appends.insert(0, saved)
        return saved

    async def upload_file(
        self,
        path: Path | str,
        label: str,
        detail: str | None = None,
    ) -> FragmentItem:
        """Upload an audio or image file inline as a data: URL."""
        path = Path(path)
        mime, _ = mimetypes.guess_type(path.name)
        kind = media_type_for(mime)
        if kind is None or mime is None:
            raise UploadFailed("Only audio and image files are supported.")
        try:
            payload = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise UploadFailed(f"Could not read {path.name}: {e.strerror or e}") from e
        return await self.upload(kind, label, to_data_url(mime, payload), detail)

    def stats(self) -> dict[str, int]:
        tally = {"voice": 0, "photo": 0, "quote": 0, "fact": 0}
        for item in self.items:
            tally[item.type] += 1
        return tally

    def filtered(self, key: FilterKey = "all") -> list[FragmentItem]:
        if key == "all":
            return self.items
        return [item for item in self.items if item.type == key]


class LocationsPanel:
    """
    Admin view of the location log. Showing it fetches the log; hiding it (or
    showing it again) cancels a fetch still in flight. A 401 calls
    on_unauthorized like the fragment listing does.
    """

    def __init__(
        self,
        api: ArchiveClient,
        *,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self.api = api
        self.on_unauthorized = on_unauthorized
        self.session: SessionState | None = None
        self.visible = False
        self.entries: list[LocationEntry] = []
        self.is_loading = False
        self.error: str | None = None
        self._fetch = LatestOnly()

    def show(self, session: SessionState) -> asyncio.Task[None] | None:
        if not session.is_admin:
            self.hide()
            return None
        self.session = session
        self.visible = True
        self.is_loading = True
        self.error = None
        return self._fetch.run(self._load(session.token))

    async def _load(self, token: str) -> None:
        try:
            entries = await self.api.list_locations(token)
        except ApiError as e:
            self.error = e.message
            self.is_loading = False
            if e.status_code == 401 and self.on_unauthorized is not None:
                self.on_unauthorized()
            return
        self.entries = entries
        self.is_loading = False

    def hide(self) -> None:
        self._fetch.cancel()
        self.visible = False
        self.is_loading = False

    def clear(self) -> None:
        self.hide()
        self.session = None
        self.entries = []
        self.error = None
