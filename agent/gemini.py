# =============================================================================
# agent/gemini.py  —  Google Gemini adapter (google-genai SDK)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Wraps a google-genai async chat so agent/loop.py only ever sees our own
#   types: it sends a prompt or a ToolResult and gets back a ModelTurn.
#
# FUNCTION CALLING WITH GEMINI (the round trip):
#
#   1. chat.send_message("Is it going to rain in Livermore, CA?")
#        → response parts contain FunctionCall(name="get_coordinates", args={...})
#   2. chat.send_message([Part(function_response=FunctionResponse(
#            name="get_coordinates", response={"content": [...]}))])
#        → response parts contain the final text
#
#   The chat object keeps the history between the two calls.  A function
#   response MUST carry the same name as the call it answers, and a model
#   response holding N calls is answered by ONE message with N responses.
#
# ERRORS:
#   google-genai raises APIError subclasses for HTTP-level failures and lets
#   httpx errors through for connection problems.  Both become ModelError.
# =============================================================================

import logging
from typing import Iterable, Optional, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from agent.errors import ModelError
from agent.models import (
    CallRequest,
    FunctionDeclaration,
    Message,
    ModelTurn,
    Role,
    ToolResult,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Our types → google-genai types
# -----------------------------------------------------------------------------
def to_genai_declaration(declaration: FunctionDeclaration) -> types.FunctionDeclaration:
    return types.FunctionDeclaration(
        name=declaration.name,
        description=declaration.description,
        parameters_json_schema=declaration.parameters,
    )


def build_tools(declarations: Iterable[FunctionDeclaration]) -> list[types.Tool]:
    """All declarations go into a single Tool, as Gemini expects."""
    function_declarations = [to_genai_declaration(d) for d in declarations]
    if not function_declarations:
        return []
    return [types.Tool(function_declarations=function_declarations)]


def function_response_part(call: CallRequest, result: ToolResult) -> types.Part:
    response: dict = {"content": result.to_payload()}
    if result.is_error:
        response["isError"] = True
    return types.Part(
        function_response=types.FunctionResponse(
            id=call.call_id,
            name=call.tool_name,
            response=response,
        )
    )


def _function_call_part(call: CallRequest) -> types.Part:
    return types.Part(
        function_call=types.FunctionCall(id=call.call_id, name=call.tool_name, args=call.arguments)
    )


def to_content(message: Message) -> types.Content:
    """Convert one history entry into a google-genai Content."""
    if message.role is Role.USER:
        return types.Content(role="user", parts=[types.Part(text=message.text or "")])

    if message.role is Role.MODEL:
        parts = [types.Part(text=message.text)] if message.text else []
        parts.extend(_function_call_part(call) for call in message.calls)
        return types.Content(role="model", parts=parts)

    # Tool results go back to Gemini on the user side of the chat
    return types.Content(
        role="user", parts=[function_response_part(message.call, message.result)]
    )


def to_contents(messages: Iterable[Message]) -> list[types.Content]:
    """Convert a history, merging consecutive tool results into one Content.

    The results answering one model response must travel together, one
    function response per function call.
    """
    contents: list[types.Content] = []
    previous: Optional[Message] = None
    for message in messages:
        content = to_content(message)
        if previous is not None and previous.role is Role.TOOL and message.role is Role.TOOL:
            contents[-1].parts.extend(content.parts)
        else:
            contents.append(content)
        previous = message
    return contents


# -----------------------------------------------------------------------------
# google-genai response → our types
# -----------------------------------------------------------------------------
def to_model_turn(response: types.GenerateContentResponse) -> ModelTurn:
    """Pull text and function calls out of the first candidate."""
    candidate = response.candidates[0] if response.candidates else None
    parts = (candidate.content.parts or []) if candidate and candidate.content else []

    texts = [part.text for part in parts if part.text and not part.thought]
    calls = tuple(
        CallRequest(
            tool_name=part.function_call.name,
            arguments=dict(part.function_call.args or {}),
            call_id=part.function_call.id,
        )
        for part in parts
        if part.function_call is not None and part.function_call.name
    )
    return ModelTurn(text="".join(texts) or None, calls=calls)


# -----------------------------------------------------------------------------
# Chat session
# -----------------------------------------------------------------------------
class GeminiChat:
    """One chat session with the declarations fixed at creation time."""

    def __init__(self, chat):
        self._chat = chat

    async def send_prompt(self, text: str) -> ModelTurn:
        return await self._send(text)

    async def send_tool_result(
        self,
        call: CallRequest,
        result: ToolResult,
        skipped: Sequence[tuple[CallRequest, ToolResult]] = (),
    ) -> ModelTurn:
        """Answer every call of the last model response in one message."""
        parts = [function_response_part(call, result)]
        parts.extend(function_response_part(other, placeholder) for other, placeholder in skipped)
        return await self._send(parts)

    async def _send(self, message) -> ModelTurn:
        try:
            response = await self._chat.send_message(message)
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            raise ModelError(f"Gemini request failed: {exc}") from exc
        return to_model_turn(response)


class GeminiModel:
    """Factory for chat sessions against one Gemini model."""

    def __init__(
        self,
        client: genai.Client,
        model: str,
        system_instruction: Optional[str] = None,
    ):
        self._client = client
        self.model = model
        self.system_instruction = system_instruction

    def start_chat(
        self,
        declarations: Iterable[FunctionDeclaration],
        history: Iterable[Message] = (),
    ) -> GeminiChat:
        config = types.GenerateContentConfig(
            system_instruction=self.system_instruction,
            tools=build_tools(declarations),
        )
        contents = to_contents(history)
        chat = self._client.aio.chats.create(model=self.model, config=config, history=contents)
        logger.debug("Started %s chat with %d history entries", self.model, len(contents))
        return GeminiChat(chat)
