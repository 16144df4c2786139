"""Client session: login/logout and the per-session flows that hang off it."""

from __future__ import annotations

import asyncio
import logging

from kalat.client.api import ArchiveClient
from kalat.client.config import ClientSettings, get_client_settings
from kalat.client.location import GeolocationProvider, LocationCapture
from kalat.client.models import SessionState
from kalat.client.session_store import SessionStore
from kalat.client.sync import FragmentSync, LocationsPanel
from kalat.client.weather import WeatherPoller

logger = logging.getLogger(__name__)


class ClientSession:
    """
    Establishing a session (login, or a stored session on start) loads the
    fragment list and mounts location capture. Logout discards the stored
    token and tears every flow down so nothing fires afterwards. The token is
    not revoked server-side; it simply stops being sent.
    """

    def __init__(
        self,
        api: ArchiveClient,
        store: SessionStore,
        *,
        geolocation: GeolocationProvider | None = None,
        weather: WeatherPoller | None = None,
    ) -> None:
        self.api = api
        self.store = store
        self.geolocation = geolocation
        self.weather = weather
        self.state: SessionState | None = None
        # Set when the server rejected the stored token; cleared by the next login
        self.needs_login = False
        self.sync = FragmentSync(api, on_unauthorized=self._session_expired)
        self.locations = LocationsPanel(api, on_unauthorized=self._session_expired)
        self.capture: LocationCapture | None = None
        self._mount_task: asyncio.Task[None] | None = None
        self._load_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        *,
        geolocation: GeolocationProvider | None = None,
    ) -> ClientSession:
        """Wire a session from KALAT_* settings (API base URL, session file, weather city and key)."""
        settings = settings or get_client_settings()
        api_key = settings.WEATHER_API_KEY
        return cls(
            ArchiveClient(settings.API_BASE_URL, timeout=settings.REQUEST_TIMEOUT_SEC),
            SessionStore(settings.SESSION_FILE),
            geolocation=geolocation,
            weather=WeatherPoller(
                settings.WEATHER_CITY,
                api_key.get_secret_value() if api_key is not None else None,
                timeout=settings.REQUEST_TIMEOUT_SEC,
            ),
        )

    @property
    def is_authenticated(self) -> bool:
        return self.state is not None

    async def login(self, username: str, password: str) -> SessionState:
        """Raises LoginFailed with a user-facing message on rejection."""
        state = await self.api.login(username, password)
        self.store.save(state)
        self.needs_login = False
        self._establish(state)
        logger.info("Logged in as %r (role=%s)", state.username, state.role)
        return state

    def restore(self) -> SessionState | None:
        """
        Resume a stored session, if any. The token is not checked here; if the
        server rejects it (expired, or signed with a rotated secret) the first
        listing gets a 401 and the session logs itself out.
        """
        state = self.store.load()
        if state is not None:
            self._establish(state)
        return state

    def _establish(self, state: SessionState) -> None:
        self._teardown_flows()
        self.state = state
        self._load_task = self.sync.start(state)
        capture = LocationCapture(self.geolocation, self.api, state.token)
        if self.weather is not None:
            capture.on_state_change(self.weather.on_capture_state)
        self.capture = capture
        self._mount_task = asyncio.get_running_loop().create_task(capture.mount())

    async def ready(self) -> None:
        """Wait for the initial fragment load and the location prompt to settle."""
        pending = [t for t in (self._load_task, self._mount_task) if t is not None]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def toggle_locations(self) -> None:
        """Show or hide the admin location log (no-op for viewers)."""
        if self.state is None:
            return
        if self.locations.visible:
            self.locations.hide()
        else:
            self.locations.show(self.state)

    def _teardown_flows(self) -> None:
        if self._mount_task is not None and not self._mount_task.done():
            self._mount_task.cancel()
        self._mount_task = None
        self._load_task = None
        if self.capture is not None:
            self.capture.teardown()
            self.capture = None
        if self.weather is not None:
            self.weather.stop()
        self.sync.clear()
        self.locations.clear()

    def _session_expired(self) -> None:
        if self.state is None:
            return
        logger.info(
            "Session for %r was rejected by the server; login required", self.state.username
        )
        self.logout()
        self.needs_login = True

    def logout(self) -> None:
        self.store.clear()
        self._teardown_flows()
        self.state = None

    async def aclose(self) -> None:
        """Stop every flow and close HTTP clients; the stored session is kept."""
        self._teardown_flows()
        if self.weather is not None:
            await self.weather.aclose()
        await self.api.aclose()
