# =============================================================================
# agent/models.py  —  Data Models for the agent side of the bridge
# =============================================================================
#
# Everything the agent loop passes around is defined here, independent of
# both MCP and Gemini:
#
#   ToolDescriptor       ← what list_tools() discovered (MCP side)
#   FunctionDeclaration  ← what the model is told it may call (Gemini side)
#   CallRequest          ← what the model asked for
#   ToolResult           ← what the tool provider answered
#   Conversation         ← the ordered history of one agent turn
#
# The adapters in agent/gemini.py and agent/tool_client.py convert to and
# from the SDK types at the edges, so agent/loop.py never touches them.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# -----------------------------------------------------------------------------
# Tools
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """A named tool as advertised by the tool provider.

    ``parameter_schema`` is the JSON schema of the tool's arguments:
    ``{"type": "object", "properties": {...}, "required": [...]}``.  Some
    providers leave out the top-level ``type``; agent/schema_bridge.py
    copes with that.
    """

    name: str
    description: str = ""
    parameter_schema: dict[str, Any] = field(default_factory=dict)

    @property
    def properties(self) -> dict[str, Any]:
        return self.parameter_schema.get("properties") or {}

    @property
    def required(self) -> list[str]:
        return list(self.parameter_schema.get("required") or [])


@dataclass(frozen=True)
class FunctionDeclaration:
    """A tool described in the shape a function-calling model expects."""

    name: str
    description: str
    parameters: dict[str, Any]


@dataclass(frozen=True)
class CallRequest:
    """The model asking for ``tool_name`` to be run with ``arguments``."""

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    call_id: Optional[str] = None      # Set by models that correlate calls


@dataclass(frozen=True)
class ContentBlock:
    """One block of tool output.  ``type`` is the MCP tag ("text", "image", ...)."""

    type: str
    text: Optional[str] = None
    data: Optional[str] = None
    mime_type: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type}
        if self.text is not None:
            payload["text"] = self.text
        if self.data is not None:
            payload["data"] = self.data
        if self.mime_type is not None:
            payload["mimeType"] = self.mime_type
        return payload


@dataclass(frozen=True)
class ToolResult:
    """What a tool invocation produced."""

    content: tuple[ContentBlock, ...] = ()
    is_error: bool = False

    @classmethod
    def from_text(cls, text: str, is_error: bool = False) -> "ToolResult":
        return cls(content=(ContentBlock(type="text", text=text),), is_error=is_error)

    @property
    def text(self) -> str:
        """All text blocks joined by newlines (non-text blocks are skipped)."""
        return "\n".join(block.text for block in self.content if block.text is not None)

    def to_payload(self) -> list[dict[str, Any]]:
        return [block.to_payload() for block in self.content]


# -----------------------------------------------------------------------------
# Conversation
# -----------------------------------------------------------------------------
class Role(str, Enum):
    USER = "user"
    MODEL = "model"
    TOOL = "tool"


@dataclass(frozen=True)
class Message:
    """One entry of a conversation.

    A USER message carries ``text``.  A MODEL message carries ``text``
    and/or ``calls``.  A TOOL message carries the ``call`` it answers and
    its ``result``.
    """

    role: Role
    text: Optional[str] = None
    calls: tuple[CallRequest, ...] = ()
    call: Optional[CallRequest] = None
    result: Optional[ToolResult] = None


@dataclass(frozen=True)
class Conversation:
    """Immutable conversation history.  Each ``with_*`` returns a new value."""

    messages: tuple[Message, ...] = ()

    @classmethod
    def from_prompt(cls, prompt: str) -> "Conversation":
        return cls().with_user(prompt)

    def with_user(self, text: str) -> "Conversation":
        return Conversation(self.messages + (Message(role=Role.USER, text=text),))

    def with_model(self, text: Optional[str], calls: tuple[CallRequest, ...] = ()) -> "Conversation":
        return Conversation(self.messages + (Message(role=Role.MODEL, text=text, calls=calls),))

    def with_tool_result(self, call: CallRequest, result: ToolResult) -> "Conversation":
        return Conversation(
            self.messages + (Message(role=Role.TOOL, call=call, result=result),)
        )

    @property
    def last(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    @property
    def pending_prompt(self) -> Optional[str]:
        """The trailing user message waiting for an answer, if any."""
        last = self.last
        if last is not None and last.role is Role.USER:
            return last.text
        return None

    @property
    def history(self) -> tuple[Message, ...]:
        """Everything before the pending prompt."""
        if self.pending_prompt is not None:
            return self.messages[:-1]
        return self.messages


@dataclass(frozen=True)
class ModelTurn:
    """One model response: final text, function calls, or both."""

    text: Optional[str] = None
    calls: tuple[CallRequest, ...] = ()


@dataclass(frozen=True)
class AgentTurn:
    """The outcome of AgentLoop.run()."""

    conversation: Conversation
    final_text: str
    tool_calls: tuple[tuple[CallRequest, ToolResult], ...] = ()
