# =============================================================================
# agent/tool_client.py  —  MCP tool discovery and invocation (fastmcp Client)
# =============================================================================
#
# The agent reaches the weather tools through an MCP client.  In production
# the client spawns tools/mcp_server.py as a subprocess and talks to it over
# stdin/stdout; in tests it talks to the FastMCP server object in memory.
# Either way this class sees the same two calls:
#
#   list_tools()               → [ToolDescriptor, ...]
#   call_tool(name, arguments) → ToolResult
#
# A tool that rejects its arguments (FastMCP validation) comes back as a
# ToolResult with is_error=True and a descriptive message, which the model
# can read like any other result.  Transport failures are NOT caught here.
# =============================================================================

import logging
from typing import Any

from fastmcp import Client
from mcp import types as mcp_types

from agent.models import ContentBlock, ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)


def to_descriptor(tool: mcp_types.Tool) -> ToolDescriptor:
    return ToolDescriptor(
        name=tool.name,
        description=tool.description or "",
        parameter_schema=dict(tool.inputSchema or {}),
    )


def to_content_block(block: Any) -> ContentBlock:
    """Map an MCP content block onto our tagged ContentBlock."""
    block_type = getattr(block, "type", "unknown")
    return ContentBlock(
        type=block_type,
        text=getattr(block, "text", None),
        data=getattr(block, "data", None),
        mime_type=getattr(block, "mimeType", None),
    )


class McpToolProvider:
    """Discovery and invocation over an MCP client connection.

    Use as an async context manager; the connection is open inside it.
    """

    def __init__(self, client: Client):
        self._client = client

    async def __aenter__(self) -> "McpToolProvider":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._client.__aexit__(exc_type, exc, tb)

    async def list_tools(self) -> list[ToolDescriptor]:
        tools = await self._client.list_tools()
        logger.info("Discovered %d tools: %s", len(tools), ", ".join(t.name for t in tools))
        return [to_descriptor(tool) for tool in tools]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        result = await self._client.call_tool(name, arguments, raise_on_error=False)
        if result.is_error:
            logger.warning("Tool %s reported an error", name)
        return ToolResult(
            content=tuple(to_content_block(block) for block in result.content),
            is_error=result.is_error,
        )
