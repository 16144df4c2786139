"""Weather panel data: OpenWeatherMap lookup for a configured city, refreshed every 20 minutes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import BaseModel

from kalat.client.location import CaptureState

logger = logging.getLogger(__name__)

WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
REFRESH_INTERVAL_SEC = 20 * 60

MISSING_KEY_MESSAGE = "API key missing"
UNAVAILABLE_MESSAGE = "Unable to load"


class WeatherReading(BaseModel):
    summary: str
    temperature: str


def parse_weather(data: Any) -> WeatherReading:
    """
    Build a reading from an OpenWeatherMap current-weather payload.
    Raises ValueError when the temperature is missing or not a number.
    """
    if not isinstance(data, dict):
        raise ValueError("Invalid weather payload")
    main = data.get("main")
    temperature = main.get("temp") if isinstance(main, dict) else None
    if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
        raise ValueError("Invalid weather payload")
    conditions = data.get("weather")
    first = conditions[0] if isinstance(conditions, list) and conditions else None
    description = first.get("description") if isinstance(first, dict) else None
    pieces = [p for p in (data.get("name"), description) if p]
    return WeatherReading(
        summary=" • ".join(pieces) or "Current weather",
        temperature=f"{round(temperature)}°C",
    )


class WeatherPoller:
    """
    Read-only consumer of a granted location state. Starts polling when
    started, keeps the last reading or error, and stops on stop().
    """

    def __init__(
        self,
        city: str,
        api_key: str | None,
        *,
        interval: float = REFRESH_INTERVAL_SEC,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.city = city
        self.api_key = api_key
        self.interval = interval
        self.reading: WeatherReading | None = None
        self.error: str | None = None
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def fetch_once(self) -> WeatherReading | None:
        if not self.api_key:
            self.error = MISSING_KEY_MESSAGE
            return None
        params = {"q": self.city, "units": "metric", "appid": self.api_key}
        try:
            resp = await self._client.get(WEATHER_URL, params=params)
            resp.raise_for_status()
            reading = parse_weather(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Weather request for %r failed: %s", self.city, e)
            self.reading = None
            self.error = UNAVAILABLE_MESSAGE
            return None
        self.reading = reading
        self.error = None
        return reading

    async def _run(self) -> None:
        while True:
            await self.fetch_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        if not self.api_key:
            self.error = MISSING_KEY_MESSAGE
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def aclose(self) -> None:
        self.stop()
        await self._client.aclose()

    def on_capture_state(self, state: CaptureState) -> None:
        """Listener for LocationCapture: poll only while location is granted."""
        if state is CaptureState.GRANTED:
            self.start()
        else:
            self.stop()


def status_label(
    state: CaptureState, poller: WeatherPoller | None = None
) -> tuple[str, str]:
    """(label, value) text for the weather panel in each capture state."""
    if state is CaptureState.REQUESTING:
        return "Weather", "Awaiting permission"
    if state is CaptureState.DENIED:
        return "Weather", "Permission denied"
    if state is CaptureState.UNSUPPORTED:
        return "Weather", "Location unavailable"
    if state is CaptureState.ERROR:
        return "Weather", "Location error"
    if state is CaptureState.GRANTED:
        if poller is not None and poller.reading is not None:
            return poller.reading.summary, poller.reading.temperature
        if poller is not None and poller.error:
            return "Weather", poller.error
        return "Weather", "Loading..."
    return "Weather", "Allow location to view"
