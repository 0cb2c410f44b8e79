"""Pytest configuration and shared fixtures for the weather agent tests.

External HTTP is never touched: ``FakeApi`` stands in for Nominatim and
api.weather.gov behind an ``httpx.MockTransport``, and records every request
so tests can assert on what was (or was not) sent.
"""

from typing import Any, Optional

import httpx
import pytest

from core.config import WeatherSettings
from core.http import build_client

FORECAST_PATH = "/gridpoints/MTR/99,105/forecast"
FORECAST_URL = f"https://api.weather.gov{FORECAST_PATH}"

LIVERMORE_MATCH = {
    "lat": "37.6818745",
    "lon": "-121.7680088",
    "display_name": "Livermore, Alameda County, California, United States",
}

PERIODS = [
    {
        "name": "Tonight",
        "temperature": 52,
        "temperatureUnit": "F",
        "windSpeed": "5 mph",
        "windDirection": "SW",
        "shortForecast": "Chance Light Rain",
    },
    {
        "name": "Tuesday",
        "temperature": 64,
        "temperatureUnit": "F",
        "windSpeed": "5 to 10 mph",
        "windDirection": "W",
        "shortForecast": "Mostly Sunny",
    },
]

ALERT_FEATURES = [
    {
        "properties": {
            "event": "Wind Advisory",
            "areaDesc": "San Francisco Bay Shoreline",
            "severity": "Moderate",
            "status": "Actual",
            "headline": "Wind Advisory issued October 18 at 3:00AM PDT",
        }
    },
    {
        "properties": {
            "event": "Beach Hazards Statement",
            "areaDesc": "Coastal North Bay",
            "severity": "Minor",
            "status": "Actual",
            "headline": "Beach Hazards Statement issued October 18",
        }
    },
]


class FakeApi:
    """Routes requests by URL path to canned JSON bodies (or exceptions)."""

    def __init__(self):
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, body: Any = None, status: int = 200) -> "FakeApi":
        self.routes[path] = (status, body)
        return self

    def fail(self, path: str) -> "FakeApi":
        """Make requests to ``path`` fail at the connection level."""
        self.routes[path] = (0, httpx.ConnectError("connection refused"))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(request.url.path, (404, {"detail": "Not Found"}))
        if isinstance(body, Exception):
            raise body
        return httpx.Response(status, json=body)

    def client(self, settings: WeatherSettings) -> httpx.AsyncClient:
        return build_client(settings, transport=httpx.MockTransport(self.handler))

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def last_params(self) -> Optional[httpx.QueryParams]:
        return self.requests[-1].url.params if self.requests else None


@pytest.fixture
def settings():
    """Default settings, independent of the developer's environment."""
    return WeatherSettings(
        nws_api_base="https://api.weather.gov",
        nominatim_base="https://nominatim.openstreetmap.org",
        user_agent="weather-app/1.0",
    )


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def livermore_api(fake_api):
    """Geocoding, points and forecast all succeed for Livermore, CA."""
    fake_api.add("/search", [LIVERMORE_MATCH])
    fake_api.add("/points/37.6819,-121.7680", {"properties": {"forecast": FORECAST_URL}})
    fake_api.add(FORECAST_PATH, {"properties": {"periods": PERIODS}})
    return fake_api


class ScriptedChat:
    """Returns the scripted ModelTurns in order and records what was sent."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.prompts = []
        self.tool_results = []
        self.skipped = []

    async def send_prompt(self, text):
        self.prompts.append(text)
        return self.replies.pop(0)

    async def send_tool_result(self, call, result, skipped=()):
        self.tool_results.append((call, result))
        self.skipped.extend(skipped)
        return self.replies.pop(0)


class ScriptedModel:
    """A ChatModel whose single chat session plays back ``replies``."""

    def __init__(self, *replies):
        self.chat = ScriptedChat(replies)
        self.declarations = None
        self.history = None

    def start_chat(self, declarations, history=()):
        self.declarations = list(declarations)
        self.history = tuple(history)
        return self.chat
