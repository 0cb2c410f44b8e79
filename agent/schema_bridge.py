# =============================================================================
# agent/schema_bridge.py  —  MCP tool schemas → model function declarations
# =============================================================================
#
# MCP tools describe their arguments with JSON Schema.  Gemini's function
# calling wants an explicitly object-typed parameters block.  The two
# dialects mostly agree, except on the top-level type: some tool providers
# leave it implicit, and the model must never see an absent or ambiguous
# type there.  So this module always writes ``"type": "object"`` itself.
#
# Property schemas are copied as they are.  Whether the model's arguments
# actually satisfy them is checked by the tool provider at call time.
# =============================================================================

import copy
from typing import Iterable

from agent.models import FunctionDeclaration, ToolDescriptor

OBJECT = "object"


def to_function_declaration(tool: ToolDescriptor) -> FunctionDeclaration:
    """Convert one descriptor.

    Raises:
        ValueError: the descriptor has no name.  That is a bug in whoever
            built it, not something to recover from.
    """
    if not tool.name:
        raise ValueError(f"Tool descriptor without a name: {tool!r}")

    return FunctionDeclaration(
        name=tool.name,
        description=tool.description or "",
        parameters={
            "type": OBJECT,
            "properties": copy.deepcopy(tool.properties),
            "required": tool.required,
        },
    )


def to_function_declarations(tools: Iterable[ToolDescriptor]) -> list[FunctionDeclaration]:
    """Convert every discovered tool, preserving order."""
    return [to_function_declaration(tool) for tool in tools]
