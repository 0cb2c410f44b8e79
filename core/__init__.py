# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the data-access logic behind the weather tools:
# geocoding (Nominatim), forecasts and alerts (National Weather Service),
# the models they decode into and the text they format to.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, google-genai or agent/.  The
#   tools/ layer wraps these functions; the agent never calls them directly.
# =============================================================================
