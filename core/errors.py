# =============================================================================
# core/errors.py  —  Failures raised by the external data helpers
# =============================================================================
#
# core/ raises, tools/ catches.  Nothing defined here is allowed to escape a
# tool invocation: tools/mcp_server.py turns every WeatherServiceError into a
# plain-text answer so the model always has something to reason over.
#
# An empty answer (no alerts, no forecast periods) is NOT an error.  Those
# come back from core/ as empty lists.
# =============================================================================


class WeatherServiceError(Exception):
    """Base class for failures talking to the geocoding or weather services."""


class TransportFailure(WeatherServiceError):
    """The request failed: network error, non-2xx status or an undecodable body."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class NotFound(WeatherServiceError):
    """The service answered, but had nothing for the requested location."""
