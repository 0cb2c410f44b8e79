# =============================================================================
# agent/config.py  —  Settings for the agent (client) process
# =============================================================================
#
# Read from the environment with the AGENT_ prefix.  The Gemini key is also
# accepted under its conventional name, GOOGLE_API_KEY, so an existing .env
# works unchanged.
# =============================================================================

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentSettings(BaseSettings):
    """Model, tool-server and loop settings for the client."""

    # --- Model ---
    gemini_model: str = "gemini-2.5-flash"
    google_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AGENT_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
    )

    # --- Tool server (spawned over stdio as `python -m <server_module>`) ---
    server_module: str = "tools.mcp_server"

    # --- Loop ---
    max_tool_calls: int = Field(default=1, ge=0)

    # --- Logging ---
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="AGENT_", extra="ignore", populate_by_name=True)
