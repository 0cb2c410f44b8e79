# =============================================================================
# agent/weather_agent.py  —  Wiring: Gemini + stdio MCP weather server
# =============================================================================
#
# HOW IT FITS TOGETHER:
#
#   ┌───────────────────────────────────────────────┐
#   │                  AgentLoop                    │
#   │  ┌──────────────┐          ┌───────────────┐  │
#   │  │ GeminiModel  │◀────────▶│McpToolProvider│  │
#   │  │ (google-genai│  loop.py │ (fastmcp      │  │
#   │  │  async chat) │          │  Client)      │  │
#   │  └──────────────┘          └───────┬───────┘  │
#   └────────────────────────────────────┼──────────┘
#                                        │ stdio (subprocess)
#                                        ▼
#                            ┌─────────────────────┐
#                            │ tools/mcp_server.py │
#                            │  • get_coordinates  │
#                            │  • get_alerts       │
#                            │  • get_forecast     │
#                            └─────────────────────┘
#
# MCP CONNECTION:
#   The tool server runs as `python -m tools.mcp_server` from the project
#   root, using the same interpreter as the agent so it sees the same
#   installed packages.  The parent environment (including anything loaded
#   from .env) is passed through.
# =============================================================================

import os
import sys
from pathlib import Path

from fastmcp import Client
from fastmcp.client.transports import StdioTransport
from google import genai

from agent.config import AgentSettings
from agent.gemini import GeminiModel
from agent.loop import AgentLoop
from agent.prompt import get_weather_assistant_prompt
from agent.tool_client import McpToolProvider

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def create_tool_provider(settings: AgentSettings) -> McpToolProvider:
    """Tool provider that spawns the weather server over stdio."""
    transport = StdioTransport(
        command=sys.executable,
        args=["-m", settings.server_module],
        env=dict(os.environ),
        cwd=str(PROJECT_ROOT),
    )
    return McpToolProvider(Client(transport))


def create_model(settings: AgentSettings) -> GeminiModel:
    # genai.Client falls back to GOOGLE_API_KEY / GEMINI_API_KEY when api_key is None
    client = genai.Client(api_key=settings.google_api_key)
    return GeminiModel(
        client,
        model=settings.gemini_model,
        system_instruction=get_weather_assistant_prompt(),
    )


def create_agent(settings: AgentSettings) -> AgentLoop:
    """Create the weather agent.

    Use the result as an async context manager: entering it starts the
    tool server and discovers its tools, leaving it shuts the server down.
    """
    return AgentLoop(
        model=create_model(settings),
        tools=create_tool_provider(settings),
        max_tool_calls=settings.max_tool_calls,
    )
