# =============================================================================
# core/weather.py  —  Forecasts and alerts from the National Weather Service
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Fetches data from api.weather.gov and turns it into domain models
#   (ForecastPeriod, AlertRecord), plus the text formatting the tools use.
#
# THE TWO-STAGE FORECAST:
#   NWS does not serve forecasts by coordinate directly.  You first ask
#   /points/{lat},{lon} which grid office covers that spot; the answer holds
#   a forecast URL.  Only then can you fetch the periods.  So:
#
#       coordinate ──▶ /points ──▶ properties.forecast ──▶ periods
#
#   The second request cannot start before the first one answers.
#
# COVERAGE:
#   NWS only covers the United States.  A points lookup for Paris fails (404)
#   or comes back without a forecast URL.  Both cases raise NotFound and the
#   periods request is never made.
#
# FETCH vs FORMAT:
#   get_forecast() / get_alerts() return domain models (possibly an empty
#   list).  format_forecast() / format_alerts() turn them into text.  Tests
#   exercise either half on its own.
# =============================================================================

import logging

import httpx
from pydantic import ValidationError

from core.config import WeatherSettings
from core.errors import NotFound, TransportFailure
from core.http import GEOJSON, fetch_json
from core.models import (
    AlertProperties,
    AlertRecord,
    AlertsResponse,
    ForecastPeriod,
    ForecastResponse,
    PointsResponse,
)

logger = logging.getLogger(__name__)

_NWS_HEADERS = {"Accept": GEOJSON}

# Coordinates are sent to /points with this many decimals; NWS redirects
# anything more precise.
COORDINATE_PRECISION = 4


def points_url(settings: WeatherSettings, latitude: float, longitude: float) -> str:
    """Build the /points URL for a coordinate, rounded to 4 decimals."""
    return (
        f"{settings.nws_api_base}/points/"
        f"{latitude:.{COORDINATE_PRECISION}f},{longitude:.{COORDINATE_PRECISION}f}"
    )


# =============================================================================
# FORECAST
# =============================================================================
async def get_forecast_url(
    client: httpx.AsyncClient,
    settings: WeatherSettings,
    latitude: float,
    longitude: float,
) -> str:
    """Resolve the forecast locator for a coordinate (the "points" lookup).

    Raises:
        NotFound: the lookup failed or had no forecast URL, which in
            practice means the location is outside NWS coverage.
    """
    url = points_url(settings, latitude, longitude)
    try:
        data = await fetch_json(client, url, headers=_NWS_HEADERS)
        points = PointsResponse.model_validate(data)
    except (TransportFailure, ValidationError) as exc:
        logger.warning("Points lookup failed for %s,%s: %s", latitude, longitude, exc)
        raise NotFound(f"No forecast office covers {latitude}, {longitude}") from exc

    if points.properties is None or not points.properties.forecast:
        raise NotFound(f"No forecast office covers {latitude}, {longitude}")
    return points.properties.forecast


async def get_forecast(
    client: httpx.AsyncClient,
    settings: WeatherSettings,
    latitude: float,
    longitude: float,
) -> list[ForecastPeriod]:
    """Fetch forecast periods for a coordinate, in NWS order.

    Returns an empty list when NWS has no periods for the location.

    Raises:
        NotFound: the points lookup did not yield a forecast URL.
        TransportFailure: the forecast request itself failed.
    """
    forecast_url = await get_forecast_url(client, settings, latitude, longitude)
    data = await fetch_json(client, forecast_url, headers=_NWS_HEADERS)

    try:
        forecast = ForecastResponse.model_validate(data)
    except ValidationError as exc:
        raise TransportFailure(forecast_url, f"unexpected forecast shape: {exc.error_count()} errors") from exc

    if forecast.properties is None:
        return []
    return [period.to_period() for period in forecast.properties.periods]


def _number(value: float) -> str:
    """58.0 -> "58", 58.5 -> "58.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


def format_period(period: ForecastPeriod) -> str:
    """One line per period: ``Tonight: 52°F - Chance Light Rain (wind 5 mph SW)``."""
    temperature = "?" if period.temperature is None else _number(period.temperature)
    line = (
        f"{period.name or 'Unknown period'}: "
        f"{temperature}°{period.temperature_unit or ''} - "
        f"{period.short_forecast or 'No description'}"
    )
    wind = " ".join(part for part in (period.wind_speed, period.wind_direction) if part)
    if wind:
        line += f" (wind {wind})"
    return line


def format_forecast(latitude: float, longitude: float, periods: list[ForecastPeriod]) -> str:
    lines = "\n".join(format_period(period) for period in periods)
    return f"Forecast for {_number(latitude)}, {_number(longitude)}:\n\n{lines}"


# =============================================================================
# ALERTS
# =============================================================================
async def get_alerts(
    client: httpx.AsyncClient,
    settings: WeatherSettings,
    state: str,
) -> list[AlertRecord]:
    """Fetch active alerts for a two-letter state code, in NWS order.

    The code is upper-cased before querying, so "ca" and "CA" hit the same
    area.  Returns an empty list when there are no active alerts.

    Raises:
        TransportFailure: the alerts request failed.
    """
    area = state.upper()
    url = f"{settings.nws_api_base}/alerts"
    data = await fetch_json(client, url, params={"area": area}, headers=_NWS_HEADERS)

    try:
        alerts = AlertsResponse.model_validate(data)
    except ValidationError as exc:
        raise TransportFailure(url, f"unexpected alerts shape: {exc.error_count()} errors") from exc

    return [
        (feature.properties or AlertProperties()).to_record()
        for feature in alerts.features
    ]


def format_alert(alert: AlertRecord) -> str:
    return "\n".join(
        [
            f"Event: {alert.event or 'Unknown'}",
            f"Area: {alert.area_desc or 'Unknown'}",
            f"Severity: {alert.severity or 'Unknown'}",
            f"Status: {alert.status or 'Unknown'}",
            f"Headline: {alert.headline or 'No headline'}",
            "---",
        ]
    )


def format_alerts(state: str, alerts: list[AlertRecord]) -> str:
    blocks = "\n".join(format_alert(alert) for alert in alerts)
    return f"Active alerts for {state.upper()}:\n\n{blocks}"
