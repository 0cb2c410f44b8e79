# =============================================================================
# core/config.py  —  Settings for the weather tool provider
# =============================================================================
#
# Every value can be overridden from the environment (or a .env file loaded
# by the entry point) using the WEATHER_ prefix, e.g.:
#
#   WEATHER_USER_AGENT="my-weather-app/2.0 (me@example.com)"
#   WEATHER_HTTP_TIMEOUT=10
#
# Nominatim's usage policy requires an identifying User-Agent, and NWS asks
# for one too, so the same value is sent to both services.
# =============================================================================

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class WeatherSettings(BaseSettings):
    """Connection settings for the external weather and geocoding services."""

    # --- External services ---
    nws_api_base: str = "https://api.weather.gov"
    nominatim_base: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "weather-app/1.0"

    # --- HTTP behaviour ---
    http_timeout: float = 30.0     # Seconds, applied to connect/read/write/pool
    http_retries: int = 0          # Connection-level retries only (httpx transport)

    # --- Logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="WEATHER_", extra="ignore")


@lru_cache
def get_settings() -> WeatherSettings:
    """Return the process-wide settings, read once from the environment."""
    return WeatherSettings()
