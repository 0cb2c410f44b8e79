# =============================================================================
# agent/loop.py  —  The Agent Loop (prompt → tool call → tool result → answer)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Runs one agent turn against a function-calling model and a tool
#   provider.  The turn is a small state machine:
#
#     AWAITING_MODEL_TURN ──(text only)──────────────────────▶ FINAL_ANSWER
#            │
#            └─(function call)─▶ TOOL_CALL_REQUESTED
#                                      │ lookup among discovered tools
#                                      ▼
#                               AWAITING_TOOL_RESULT
#                                      │ ToolResult sent back as a
#                                      ▼ function response (same name)
#                               AWAITING_MODEL_TURN ──▶ FINAL_ANSWER
#
#   Every step waits for the previous one; each input is the previous
#   step's output.
#
# THE RULES:
#   - At most ``max_tool_calls`` tool invocations per turn (default 1).
#     With the default the loop is strictly request → call → response →
#     answer; a ToolResult is never inspected for further calls.
#   - When a model response holds several function calls, only the FIRST
#     is run.  The rest are logged and answered with NOT_RUN; every
#     function call gets exactly one function response.
#   - A call naming a tool that was never discovered raises UnknownTool
#     and the tool provider is not contacted.
#   - Arguments the tool never declared are dropped before the call.
#     Missing or invalid ones are left for the tool provider to reject.
# =============================================================================

import logging
from enum import Enum
from typing import Any, Iterable, Optional, Protocol, Sequence, Union

from agent.errors import UnknownTool
from agent.models import (
    AgentTurn,
    CallRequest,
    Conversation,
    FunctionDeclaration,
    Message,
    ModelTurn,
    ToolDescriptor,
    ToolResult,
)
from agent.schema_bridge import to_function_declarations

logger = logging.getLogger(__name__)

NO_ANSWER = "The model did not produce an answer."
NOT_RUN = ToolResult.from_text("Not executed: only one tool call is run per response.", is_error=True)


class TurnState(str, Enum):
    AWAITING_MODEL_TURN = "awaiting_model_turn"
    TOOL_CALL_REQUESTED = "tool_call_requested"
    AWAITING_TOOL_RESULT = "awaiting_tool_result"
    FINAL_ANSWER = "final_answer"


# -----------------------------------------------------------------------------
# Collaborators (see agent/gemini.py and agent/tool_client.py)
# -----------------------------------------------------------------------------
class ChatSession(Protocol):
    async def send_prompt(self, text: str) -> ModelTurn: ...

    async def send_tool_result(
        self,
        call: CallRequest,
        result: ToolResult,
        skipped: Sequence[tuple[CallRequest, ToolResult]] = (),
    ) -> ModelTurn: ...


class ChatModel(Protocol):
    def start_chat(
        self,
        declarations: Iterable[FunctionDeclaration],
        history: Iterable[Message] = (),
    ) -> ChatSession: ...


class ToolProvider(Protocol):
    async def list_tools(self) -> list[ToolDescriptor]: ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult: ...


# -----------------------------------------------------------------------------
# The loop
# -----------------------------------------------------------------------------
class AgentLoop:
    """Drives one model + one tool provider through agent turns.

    Tools are discovered once (``discover()``, or on entering the async
    context) and reused for every turn.
    """

    def __init__(self, model: ChatModel, tools: ToolProvider, max_tool_calls: int = 1):
        if max_tool_calls < 0:
            raise ValueError("max_tool_calls must be >= 0")
        self.model = model
        self.tools = tools
        self.max_tool_calls = max_tool_calls
        self._descriptors: Optional[dict[str, ToolDescriptor]] = None
        self.state = TurnState.FINAL_ANSWER

    async def __aenter__(self) -> "AgentLoop":
        if hasattr(self.tools, "__aenter__"):
            await self.tools.__aenter__()
        await self.discover()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if hasattr(self.tools, "__aexit__"):
            await self.tools.__aexit__(exc_type, exc, tb)

    async def discover(self) -> list[ToolDescriptor]:
        """Ask the tool provider what it offers.  Called once per loop."""
        descriptors = await self.tools.list_tools()
        self._descriptors = {d.name: d for d in descriptors}
        return descriptors

    @property
    def descriptors(self) -> list[ToolDescriptor]:
        return list((self._descriptors or {}).values())

    def lookup(self, name: str) -> ToolDescriptor:
        try:
            return (self._descriptors or {})[name]
        except KeyError:
            raise UnknownTool(name, sorted(self._descriptors or {})) from None

    def _enter(self, state: TurnState) -> None:
        logger.debug("Agent loop: %s → %s", self.state.value, state.value)
        self.state = state

    async def run(self, prompt: Union[str, Conversation]) -> AgentTurn:
        """Run one turn for ``prompt`` and return the final answer.

        ``prompt`` is either plain text or a Conversation whose last
        message is the user prompt to answer; earlier messages are sent to
        the model as history.
        """
        if self._descriptors is None:
            await self.discover()

        conversation = Conversation.from_prompt(prompt) if isinstance(prompt, str) else prompt
        text = conversation.pending_prompt
        if text is None:
            raise ValueError("Conversation does not end with a user prompt")

        chat = self.model.start_chat(
            to_function_declarations(self.descriptors), history=conversation.history
        )

        # Step 1: prompt + declarations
        self._enter(TurnState.AWAITING_MODEL_TURN)
        reply = await chat.send_prompt(text)
        conversation = conversation.with_model(reply.text, reply.calls)

        tool_calls: list[tuple[CallRequest, ToolResult]] = []
        while reply.calls:
            if len(tool_calls) >= self.max_tool_calls:
                logger.warning(
                    "Tool call limit (%d) reached; ignoring request for %s",
                    self.max_tool_calls,
                    reply.calls[0].tool_name,
                )
                break

            call, dropped = reply.calls[0], reply.calls[1:]
            if dropped:
                logger.warning(
                    "Model requested %d tool calls; only %s will run, dropping %s",
                    len(reply.calls),
                    call.tool_name,
                    ", ".join(c.tool_name for c in dropped),
                )

            # Step 2: look up and invoke
            self._enter(TurnState.TOOL_CALL_REQUESTED)
            call = self._prepare(call)

            self._enter(TurnState.AWAITING_TOOL_RESULT)
            result = await self.tools.call_tool(call.tool_name, call.arguments)
            tool_calls.append((call, result))
            conversation = conversation.with_tool_result(call, result)
            skipped = tuple((other, NOT_RUN) for other in dropped)
            for other, placeholder in skipped:
                conversation = conversation.with_tool_result(other, placeholder)

            # Step 3: function responses, keyed by the same tool names
            self._enter(TurnState.AWAITING_MODEL_TURN)
            reply = await chat.send_tool_result(call, result, skipped=skipped)
            conversation = conversation.with_model(reply.text, reply.calls)

        self._enter(TurnState.FINAL_ANSWER)
        return AgentTurn(
            conversation=conversation,
            final_text=reply.text or NO_ANSWER,
            tool_calls=tuple(tool_calls),
        )

    def _prepare(self, call: CallRequest) -> CallRequest:
        """Check the tool exists and drop arguments it never declared."""
        descriptor = self.lookup(call.tool_name)
        declared = descriptor.properties
        extra = sorted(set(call.arguments) - set(declared))
        if not extra:
            return call
        logger.warning("Dropping undeclared arguments for %s: %s", call.tool_name, ", ".join(extra))
        return CallRequest(
            tool_name=call.tool_name,
            arguments={k: v for k, v in call.arguments.items() if k in declared},
            call_id=call.call_id,
        )
