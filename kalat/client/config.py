"""Client configuration loaded from KALAT_* environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Validated client settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="KALAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT_SEC: float = 30.0
    # Durable {token, role, username} record; removed on logout
    SESSION_FILE: Path = Path.home() / ".kalat" / "session.json"

    # OpenWeatherMap; without a key the weather panel reports "API key missing"
    WEATHER_CITY: str = "London"
    WEATHER_API_KEY: SecretStr | None = None

    @field_validator("API_BASE_URL")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        s = v.strip().rstrip("/")
        if not (s.lower().startswith("http://") or s.lower().startswith("https://")):
            raise ValueError("KALAT_API_BASE_URL must use http or https")
        return s

    @field_validator("REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0 or v > 300:
            raise ValueError("KALAT_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 300")
        return v

    @field_validator("WEATHER_CITY")
    @classmethod
    def validate_weather_city(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("KALAT_WEATHER_CITY must be non-empty")
        return v.strip()


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
