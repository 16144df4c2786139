"""Location capture: ask for geolocation permission once, report the position once per session.

The flow is a small finite-state machine driven by a pure transition function,
so it can be exercised with synthetic grant/deny/error events and no device:

    initial --request--> requesting --grant--> granted
       |                     |------deny---> denied
       |                     '------fail---> error
       '--capability_missing--> unsupported

denied, unsupported and error are terminal for the instance; there is no
automatic retry and no second prompt.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from typing import Protocol

from kalat.client.api import ApiError, ArchiveClient
from kalat.client.models import Coordinates

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SEC = 15.0

# Shown with the permission prompt.
PERMISSION_PURPOSE = (
    "Used to show local weather. Your position is also saved once per session "
    "to the archive's location log, which the archive admin can view."
)


class CaptureState(str, enum.Enum):
    INITIAL = "initial"
    REQUESTING = "requesting"
    GRANTED = "granted"
    DENIED = "denied"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


class CaptureEvent(str, enum.Enum):
    CAPABILITY_MISSING = "capability_missing"
    REQUEST = "request"
    GRANT = "grant"
    DENY = "deny"
    FAIL = "fail"


_TRANSITIONS: dict[tuple[CaptureState, CaptureEvent], CaptureState] = {
    (CaptureState.INITIAL, CaptureEvent.CAPABILITY_MISSING): CaptureState.UNSUPPORTED,
    (CaptureState.INITIAL, CaptureEvent.REQUEST): CaptureState.REQUESTING,
    (CaptureState.REQUESTING, CaptureEvent.GRANT): CaptureState.GRANTED,
    (CaptureState.REQUESTING, CaptureEvent.DENY): CaptureState.DENIED,
    (CaptureState.REQUESTING, CaptureEvent.FAIL): CaptureState.ERROR,
    # A granted position may be refreshed; the state does not change.
    (CaptureState.GRANTED, CaptureEvent.GRANT): CaptureState.GRANTED,
}


def transition(state: CaptureState, event: CaptureEvent) -> CaptureState:
    """Next state for (state, event); pairs without a transition leave the state unchanged."""
    return _TRANSITIONS.get((state, event), state)


class PermissionDenied(Exception):
    """The user explicitly refused the geolocation prompt."""


class GeolocationProvider(Protocol):
    """Device geolocation. Raises PermissionDenied on refusal, anything else on failure."""

    async def request_position(
        self, *, purpose: str, high_accuracy: bool, timeout: float
    ) -> Coordinates: ...


class LocationCapture:
    """
    One instance per client session. The reported flag lives here and nowhere
    else: a new session gets a new instance and may report again.
    """

    def __init__(
        self,
        provider: GeolocationProvider | None,
        api: ArchiveClient,
        token: str | None,
    ) -> None:
        self.provider = provider
        self.api = api
        self.token = token
        self.state = CaptureState.INITIAL
        self.coords: Coordinates | None = None
        self.reported = False
        self._report_attempted = False
        self._report_task: asyncio.Task[None] | None = None
        self._listeners: list[Callable[[CaptureState], None]] = []

    def on_state_change(self, listener: Callable[[CaptureState], None]) -> None:
        self._listeners.append(listener)

    def _apply(self, event: CaptureEvent) -> CaptureState:
        previous = self.state
        self.state = transition(previous, event)
        if self.state is not previous:
            logger.debug("Location capture %s -> %s", previous.value, self.state.value)
            for listener in self._listeners:
                listener(self.state)
        return self.state

    async def mount(self) -> None:
        """Start the flow. Only the first call from the initial state does anything."""
        if self.state is not CaptureState.INITIAL:
            return
        if self.provider is None:
            self._apply(CaptureEvent.CAPABILITY_MISSING)
            return
        self._apply(CaptureEvent.REQUEST)
        try:
            coords = await self.provider.request_position(
                purpose=PERMISSION_PURPOSE,
                high_accuracy=True,
                timeout=REQUEST_TIMEOUT_SEC,
            )
        except PermissionDenied:
            self._apply(CaptureEvent.DENY)
            return
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug("Geolocation request failed: %s", e)
            self._apply(CaptureEvent.FAIL)
            return
        self.update_position(coords)

    def update_position(self, coords: Coordinates) -> None:
        """Apply a position from the provider. Ignored unless the flow is requesting or granted."""
        if self._apply(CaptureEvent.GRANT) is not CaptureState.GRANTED:
            return
        self.coords = coords
        self._maybe_report()

    def _maybe_report(self) -> None:
        if self._report_attempted or self.coords is None or not self.token:
            return
        self._report_attempted = True
        self._report_task = asyncio.get_running_loop().create_task(
            self._report(self.coords, self.token)
        )

    async def _report(self, coords: Coordinates, token: str) -> None:
        """Best effort and fire-once: a failed report is dropped, not retried."""
        try:
            await self.api.report_location(token, coords.latitude, coords.longitude)
        except ApiError as e:
            logger.debug("Failed to save location: %s", e.message)
            return
        self.reported = True

    @property
    def report_task(self) -> asyncio.Task[None] | None:
        return self._report_task

    def teardown(self) -> None:
        """Cancel a report still in flight (logout or navigation away)."""
        if self._report_task is not None and not self._report_task.done():
            self._report_task.cancel()
        self._listeners.clear()
