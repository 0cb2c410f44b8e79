# =============================================================================
# main.py  —  Entry Point for the Weather Agent
# =============================================================================
#
# HOW TO RUN:
#   python main.py                                   # demonstration prompt
#   python main.py "Any weather alerts in Texas?"    # your own prompt
#
# WHAT HAPPENS:
#   1. Spawns the weather MCP server (tools/mcp_server.py) over stdio
#   2. Discovers its tools and bridges them into Gemini function declarations
#   3. Sends the prompt to Gemini
#   4. If Gemini asks for a tool, runs it and sends the result back
#   5. Prints the exchange and exits
#
# FAILURES:
#   Tool-level problems (city not found, NWS down, ...) come back as text
#   and the model explains them.  A call to a tool the server never offered
#   is reported to the user as an "Agent:" line and exits with status 1.
#   A failure of the model service or of the MCP connection is logged and
#   also exits with status 1.
# =============================================================================

import asyncio
import logging
import sys

from dotenv import load_dotenv

# Load environment variables from .env (GOOGLE_API_KEY, WEATHER_*, AGENT_*)
# before any settings object is created.
load_dotenv()

from agent.config import AgentSettings
from agent.errors import UnknownTool
from agent.prompt import DEMO_PROMPT
from agent.weather_agent import create_agent

logger = logging.getLogger("weather.agent")


async def run_agent(prompt: str) -> int:
    """Run one agent turn for ``prompt``, print it, and return an exit status."""
    settings = AgentSettings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    print(f"User: {prompt}")
    try:
        async with create_agent(settings) as agent:
            turn = await agent.run(prompt)
    except UnknownTool as exc:
        logger.error("Agent turn failed: %s", exc)
        print(f"Agent: Sorry, I tried to use a tool I do not have. {exc}")
        return 1
    except Exception:
        logger.exception("Agent turn failed")
        return 1

    for call, result in turn.tool_calls:
        print(f"Agent wants to call: {call.tool_name} with {call.arguments}")
        logger.info("Tool %s returned:\n%s", call.tool_name, result.text)

    print(f"Agent: {turn.final_text}")
    return 0


def main() -> None:
    prompt = " ".join(sys.argv[1:]).strip() or DEMO_PROMPT
    sys.exit(asyncio.run(run_agent(prompt)))


if __name__ == "__main__":
    main()
