# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP and core/.  Each tool:
#     1. Declares typed, constrained parameters (FastMCP turns them into the
#        JSON schema the agent discovers with list_tools)
#     2. Calls core/ functions
#     3. Converts results AND failures into text for the model
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT contain HTTP or parsing logic (that's in core/)
#   - They do NOT know about Gemini (they're model-agnostic)
# =============================================================================
