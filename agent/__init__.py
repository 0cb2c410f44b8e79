# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the client side of the bridge: it connects a
# function-calling model (Google Gemini) to the MCP weather tools.
#
# ARCHITECTURAL ROLE:
#   - schema_bridge.py  turns discovered MCP tool schemas into function
#                       declarations the model accepts
#   - loop.py           runs one turn: prompt → tool call → result → answer
#   - gemini.py         google-genai adapter
#   - tool_client.py    fastmcp Client adapter
#   - weather_agent.py  wires them together for main.py
#
# WHAT THE AGENT IS NOT:
#   - It does NOT call the weather APIs itself (that's core/, via tools/)
#   - It does NOT recover from model or transport failures; those end the
#     turn and main.py reports them
# =============================================================================
