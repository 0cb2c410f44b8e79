# =============================================================================
# core/geocoding.py  —  City/state → coordinates via OpenStreetMap Nominatim
# =============================================================================
#
# The weather service only understands coordinates, but users (and the
# model) talk about places.  This module is the first hop of the
# geocode → points → forecast chain.
#
# Nominatim is free and keyless, but its usage policy REQUIRES a User-Agent
# that identifies the application.  build_client() in core/http.py sets it.
# =============================================================================

import logging

import httpx
from pydantic import ValidationError

from core.config import WeatherSettings
from core.errors import NotFound, TransportFailure
from core.http import fetch_json
from core.models import GeoCoordinate, GeocodingMatch

logger = logging.getLogger(__name__)


async def get_coordinates(
    client: httpx.AsyncClient,
    settings: WeatherSettings,
    city: str,
    state: str,
) -> GeoCoordinate:
    """Look up one match for ``city, state``.

    Exactly one request is made, limited to a single result.

    Raises:
        TransportFailure: the lookup itself failed.
        NotFound: Nominatim answered with no usable match.
    """
    url = f"{settings.nominatim_base}/search"
    data = await fetch_json(
        client,
        url,
        params={"q": f"{city},{state}", "format": "json", "limit": 1},
    )

    if not isinstance(data, list):
        raise TransportFailure(url, "expected a JSON array")
    if not data:
        raise NotFound(f"No geocoding match for {city}, {state}")

    try:
        match = GeocodingMatch.model_validate(data[0])
    except ValidationError as exc:
        raise TransportFailure(url, f"unexpected result shape: {exc.error_count()} errors") from exc

    if match.lat is None or match.lon is None:
        raise NotFound(f"Geocoding match for {city}, {state} has no coordinates")

    logger.debug("Geocoded %s, %s to %s,%s", city, state, match.lat, match.lon)
    return GeoCoordinate(
        latitude=match.lat,
        longitude=match.lon,
        display_name=match.display_name or f"{city}, {state}",
    )


def format_coordinates(coords: GeoCoordinate) -> str:
    """Render a coordinate as the text block the get_coordinates tool returns."""
    return (
        f"Location: {coords.display_name}\n"
        f"Latitude: {coords.latitude}\n"
        f"Longitude: {coords.longitude}"
    )
