# =============================================================================
# core/http.py  —  Shared HTTP plumbing for the external data sources
# =============================================================================
#
# One AsyncClient per tool invocation: build_client() is used as an async
# context manager by tools/mcp_server.py and the client is closed when the
# tool returns.  Tests pass in a client backed by httpx.MockTransport.
#
# fetch_json() is the ONLY place that talks to the network.  Every way a
# request can go wrong (connection error, timeout, 4xx/5xx, non-JSON body)
# comes out of it as a TransportFailure.
# =============================================================================

import logging
from typing import Any, Optional

import httpx

from core.config import WeatherSettings
from core.errors import TransportFailure

logger = logging.getLogger(__name__)

GEOJSON = "application/geo+json"


def build_client(settings: WeatherSettings, **kwargs: Any) -> httpx.AsyncClient:
    """Create the AsyncClient used for one tool invocation.

    The identifying User-Agent goes on every request; the NWS-specific
    Accept header is added per request in core/weather.py.
    """
    kwargs.setdefault(
        "transport", httpx.AsyncHTTPTransport(retries=settings.http_retries)
    )
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.http_timeout,
        follow_redirects=True,
        **kwargs,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, str]] = None,
) -> Any:
    """GET ``url`` and return the decoded JSON body.

    Raises:
        TransportFailure: for any network, HTTP status or decoding error.
    """
    try:
        response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as exc:
        logger.error("HTTP %s from %s", exc.response.status_code, url)
        raise TransportFailure(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        logger.error("Error requesting %s: %s", url, exc)
        raise TransportFailure(url, str(exc) or type(exc).__name__) from exc
    except ValueError as exc:
        # response.json() raises json.JSONDecodeError, a ValueError subclass
        logger.error("Invalid JSON from %s: %s", url, exc)
        raise TransportFailure(url, "invalid JSON body") from exc
