"""Async client for the archive API: session, fragment sync, location capture, weather."""

from kalat.client.api import ApiError, ArchiveClient, LoginFailed, UploadFailed
from kalat.client.config import ClientSettings, get_client_settings
from kalat.client.location import CaptureEvent, CaptureState, LocationCapture, transition
from kalat.client.models import Coordinates, FragmentItem, LocationEntry, SessionState
from kalat.client.session import ClientSession
from kalat.client.session_store import SessionStore
from kalat.client.sync import FragmentSync, LocationsPanel
from kalat.client.weather import WeatherPoller, WeatherReading

__all__ = [
    "ApiError",
    "ArchiveClient",
    "CaptureEvent",
    "CaptureState",
    "ClientSession",
    "ClientSettings",
    "Coordinates",
    "FragmentItem",
    "FragmentSync",
    "LocationCapture",
    "LocationEntry",
    "LocationsPanel",
    "LoginFailed",
    "SessionState",
    "SessionStore",
    "UploadFailed",
    "WeatherPoller",
    "WeatherReading",
    "get_client_settings",
    "transition",
]
