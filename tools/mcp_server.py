# =============================================================================
# tools/mcp_server.py  —  FastMCP Weather Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the MCP tools the agent can call.  Each tool is a thin wrapper
#   around core/ functions: it opens an HTTP client, calls core/, and turns
#   the outcome into TEXT.
#
# HOW IT WORKS (the flow):
#   1. The model decides it needs information (e.g., coordinates)
#   2. The agent calls the tool by name over MCP (e.g., "get_coordinates")
#   3. FastMCP validates the arguments against the tool signature
#      (types + the Field constraints below) and rejects bad ones with a
#      descriptive error before the tool body runs
#   4. The function calls core/, formats the result, and returns it
#
# THE TOOL BOUNDARY:
#   Every core/ failure (TransportFailure, NotFound) is caught HERE and
#   turned into a sentence.  The model always gets something it can reason
#   over, never a stack trace.  "Nothing found" and "could not check" always
#   produce different text.
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m tools.mcp_server
#   b) Spawned by the agent over stdio (agent/weather_agent.py)
# =============================================================================

import json
import logging
import sys
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from core.config import get_settings
from core.errors import NotFound, TransportFailure
from core.geocoding import format_coordinates, get_coordinates as lookup_coordinates
from core.http import build_client
from core.weather import (
    format_alerts,
    format_forecast,
    get_alerts as fetch_alerts,
    get_forecast as fetch_forecast,
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the agent over STDOUT.
# Anything printed to stdout would corrupt the JSON-RPC stream.
#
#   CYAN   → incoming requests (tool name + parameters)
#   GREEN  → responses
#   YELLOW → intermediate status
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logger = logging.getLogger("weather.mcp")


def _log_request(tool_name: str, **params) -> None:
    """CYAN: `get_forecast called with: latitude=37.68, longitude=-121.77`."""
    arguments = ", ".join(f"{name}={value!r}" for name, value in params.items())
    logger.info("%s%s called with: %s%s", _CYAN, tool_name, arguments, _RESET)


def _log_status(tool_name: str, message: str) -> None:
    """YELLOW: what the tool learned from core/ (a match, a failure, a count)."""
    logger.info("%s  → %s: %s%s", _YELLOW, tool_name, message, _RESET)


def _log_response(tool_name: str, text: str) -> str:
    """GREEN: the exact text handed back to the model.  Returns ``text``."""
    logger.info("%s  ← %s response: %s%s", _GREEN, tool_name, json.dumps(text), _RESET)
    return text


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
mcp = FastMCP("weather")


# =============================================================================
# TOOL 1: get_coordinates
# =============================================================================
# The forecast tool only takes coordinates, so the model is told to call
# this one FIRST.  The description says so explicitly.
# =============================================================================
@mcp.tool(
    description="Get latitude and longitude for a city. Use this BEFORE getting a forecast."
)
async def get_coordinates(
    city: Annotated[str, Field(description="City name (e.g. Livermore)")],
    state: Annotated[
        str,
        Field(min_length=2, max_length=2, description="Two-letter state code (e.g. CA)"),
    ],
) -> str:
    _log_request("get_coordinates", city=city, state=state)

    settings = get_settings()
    async with build_client(settings) as client:
        try:
            coords = await lookup_coordinates(client, settings, city, state)
        except (NotFound, TransportFailure) as exc:
            _log_status("get_coordinates", str(exc))
            return _log_response(
                "get_coordinates", f"Could not find coordinates for {city}, {state}."
            )

    _log_status("get_coordinates", f"Matched {coords.display_name}")
    return _log_response("get_coordinates", format_coordinates(coords))


# =============================================================================
# TOOL 2: get_alerts
# =============================================================================
@mcp.tool(description="Get weather alerts for a state")
async def get_alerts(
    state: Annotated[
        str,
        Field(min_length=2, max_length=2, description="Two-letter state code (e.g. CA, NY)"),
    ],
) -> str:
    _log_request("get_alerts", state=state)
    state_code = state.upper()

    settings = get_settings()
    async with build_client(settings) as client:
        try:
            alerts = await fetch_alerts(client, settings, state_code)
        except TransportFailure as exc:
            _log_status("get_alerts", str(exc))
            return _log_response("get_alerts", f"Failed to retrieve alerts data for {state_code}")

    if not alerts:
        return _log_response("get_alerts", f"No active alerts for {state_code}")

    _log_status("get_alerts", f"Found {len(alerts)} active alerts")
    return _log_response("get_alerts", format_alerts(state_code, alerts))


# =============================================================================
# TOOL 3: get_forecast
# =============================================================================
# Two external calls, strictly in order: /points, then the forecast URL
# it returns.  A failed points lookup means "outside the US" and stops
# there; it is reported, not retried.
# =============================================================================
@mcp.tool(description="Get weather forecast for a location (requires latitude/longitude)")
async def get_forecast(
    latitude: Annotated[
        float, Field(ge=-90, le=90, description="Latitude of the location")
    ],
    longitude: Annotated[
        float, Field(ge=-180, le=180, description="Longitude of the location")
    ],
) -> str:
    _log_request("get_forecast", latitude=latitude, longitude=longitude)

    settings = get_settings()
    async with build_client(settings) as client:
        try:
            periods = await fetch_forecast(client, settings, latitude, longitude)
        except NotFound as exc:
            _log_status("get_forecast", str(exc))
            return _log_response(
                "get_forecast",
                "Failed to get forecast URL. Location might be outside the US.",
            )
        except TransportFailure as exc:
            _log_status("get_forecast", str(exc))
            return _log_response("get_forecast", "Failed to retrieve forecast data")

    if not periods:
        return _log_response("get_forecast", "No forecast periods available")

    _log_status("get_forecast", f"Got {len(periods)} forecast periods")
    return _log_response("get_forecast", format_forecast(latitude, longitude, periods))


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    """Serve the weather tools over stdio."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    print("Weather MCP Server running on stdio", file=sys.stderr, flush=True)
    mcp.run(transport="stdio", show_banner=False)


if __name__ == "__main__":
    main()
