# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the weather provider)
# =============================================================================
#
# Two kinds of model live here:
#
#   1. DOMAIN MODELS (dataclasses) — GeoCoordinate, ForecastPeriod,
#      AlertRecord.  These are what core/ hands to tools/.  They are
#      transient: built per tool call, formatted to text, thrown away.
#
#   2. RESPONSE MODELS (pydantic) — one per external endpoint.  The
#      external services guarantee very little, so EVERY field is optional.
#      A missing field decodes to None, and core/ decides whether that
#      means "not found" or "empty" rather than crashing on a KeyError.
#
# Field names on the response models follow Python naming; the aliases are
# the camelCase keys the National Weather Service actually sends.
# =============================================================================

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Domain models
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class GeoCoordinate:
    """A geocoded location."""

    latitude: float                    # [-90, 90]
    longitude: float                   # [-180, 180]
    display_name: str                  # "Livermore, Alameda County, California, ..."


@dataclass(frozen=True)
class ForecastPeriod:
    """One named forecast period ("Tonight", "Tuesday", ...)."""

    name: Optional[str] = None
    temperature: Optional[float] = None
    temperature_unit: Optional[str] = None     # "F" or "C"
    wind_speed: Optional[str] = None           # Free text, e.g. "5 to 10 mph"
    wind_direction: Optional[str] = None       # "NW"
    short_forecast: Optional[str] = None       # "Chance Light Rain"


@dataclass(frozen=True)
class AlertRecord:
    """One active weather alert."""

    event: Optional[str] = None
    area_desc: Optional[str] = None
    severity: Optional[str] = None
    status: Optional[str] = None
    headline: Optional[str] = None


# -----------------------------------------------------------------------------
# Response models — Nominatim
# -----------------------------------------------------------------------------
class _Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GeocodingMatch(_Response):
    """One element of the Nominatim /search JSON array.

    Nominatim sends lat/lon as strings; pydantic coerces them to floats.
    """

    lat: Optional[float] = None
    lon: Optional[float] = None
    display_name: Optional[str] = None


# -----------------------------------------------------------------------------
# Response models — National Weather Service
# -----------------------------------------------------------------------------
class PointsProperties(_Response):
    forecast: Optional[str] = None


class PointsResponse(_Response):
    """GET /points/{lat},{lon}"""

    properties: Optional[PointsProperties] = None


class PeriodPayload(_Response):
    name: Optional[str] = None
    temperature: Optional[float] = None
    temperature_unit: Optional[str] = Field(default=None, alias="temperatureUnit")
    wind_speed: Optional[str] = Field(default=None, alias="windSpeed")
    wind_direction: Optional[str] = Field(default=None, alias="windDirection")
    short_forecast: Optional[str] = Field(default=None, alias="shortForecast")

    def to_period(self) -> ForecastPeriod:
        return ForecastPeriod(
            name=self.name,
            temperature=self.temperature,
            temperature_unit=self.temperature_unit,
            wind_speed=self.wind_speed,
            wind_direction=self.wind_direction,
            short_forecast=self.short_forecast,
        )


class ForecastProperties(_Response):
    periods: list[PeriodPayload] = Field(default_factory=list)


class ForecastResponse(_Response):
    """GET <forecast url from the points lookup>"""

    properties: Optional[ForecastProperties] = None


class AlertProperties(_Response):
    event: Optional[str] = None
    area_desc: Optional[str] = Field(default=None, alias="areaDesc")
    severity: Optional[str] = None
    status: Optional[str] = None
    headline: Optional[str] = None

    def to_record(self) -> AlertRecord:
        return AlertRecord(
            event=self.event,
            area_desc=self.area_desc,
            severity=self.severity,
            status=self.status,
            headline=self.headline,
        )


class AlertFeature(_Response):
    properties: Optional[AlertProperties] = None


class AlertsResponse(_Response):
    """GET /alerts?area=<STATE>"""

    features: list[AlertFeature] = Field(default_factory=list)
