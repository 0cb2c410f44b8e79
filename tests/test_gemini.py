"""Unit tests for the google-genai adapter (no network: the SDK client is mocked)."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google import genai
from google.genai import types

from agent.errors import ModelError
from agent.gemini import (
    GeminiChat,
    GeminiModel,
    build_tools,
    function_response_part,
    to_content,
    to_contents,
    to_model_turn,
)
from agent.loop import AgentLoop
from agent.models import CallRequest, Conversation, FunctionDeclaration, ToolDescriptor, ToolResult

DECLARATION = FunctionDeclaration(
    name="get_coordinates",
    description="Get latitude and longitude for a city.",
    parameters={
        "type": "object",
        "properties": {"city": {"type": "string"}, "state": {"type": "string"}},
        "required": ["city", "state"],
    },
)


def response_with(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


class TestToModelTurn:
    def test_text_only(self):
        turn = to_model_turn(response_with(types.Part(text="It will rain.")))

        assert turn.text == "It will rain."
        assert turn.calls == ()

    def test_function_call(self):
        part = types.Part(
            function_call=types.FunctionCall(
                id="abc", name="get_coordinates", args={"city": "Livermore", "state": "CA"}
            )
        )

        turn = to_model_turn(response_with(part))

        assert turn.text is None
        assert turn.calls == (
            CallRequest("get_coordinates", {"city": "Livermore", "state": "CA"}, "abc"),
        )

    def test_multiple_calls_keep_order(self):
        turn = to_model_turn(
            response_with(
                types.Part(function_call=types.FunctionCall(name="get_alerts", args={"state": "CA"})),
                types.Part(function_call=types.FunctionCall(name="get_forecast", args={})),
            )
        )

        assert [c.tool_name for c in turn.calls] == ["get_alerts", "get_forecast"]

    def test_thoughts_are_not_answer_text(self):
        turn = to_model_turn(
            response_with(types.Part(text="thinking...", thought=True), types.Part(text="Answer"))
        )

        assert turn.text == "Answer"

    def test_no_candidates(self):
        turn = to_model_turn(types.GenerateContentResponse(candidates=[]))

        assert turn.text is None
        assert turn.calls == ()


def test_build_tools_uses_object_json_schema():
    tools = build_tools([DECLARATION])

    assert len(tools) == 1
    declaration = tools[0].function_declarations[0]
    assert declaration.name == "get_coordinates"
    assert declaration.parameters_json_schema["type"] == "object"
    assert declaration.parameters_json_schema["required"] == ["city", "state"]


def test_build_tools_empty():
    assert build_tools([]) == []


def test_function_response_keyed_by_tool_name():
    call = CallRequest("get_coordinates", {"city": "Livermore", "state": "CA"}, "abc")
    result = ToolResult.from_text("Latitude: 37.68")

    part = function_response_part(call, result)

    assert part.function_response.name == "get_coordinates"
    assert part.function_response.id == "abc"
    assert part.function_response.response == {
        "content": [{"type": "text", "text": "Latitude: 37.68"}]
    }


def test_function_response_flags_errors():
    part = function_response_part(
        CallRequest("get_coordinates", {}), ToolResult.from_text("bad input", is_error=True)
    )

    assert part.function_response.response["isError"] is True


def test_history_conversion():
    call = CallRequest("get_coordinates", {"city": "Livermore", "state": "CA"})
    conversation = (
        Conversation.from_prompt("Rain in Livermore?")
        .with_model(None, (call,))
        .with_tool_result(call, ToolResult.from_text("Latitude: 37.68"))
    )

    contents = [to_content(message) for message in conversation.messages]

    assert [c.role for c in contents] == ["user", "model", "user"]
    assert contents[0].parts[0].text == "Rain in Livermore?"
    assert contents[1].parts[0].function_call.name == "get_coordinates"
    assert contents[2].parts[0].function_response.name == "get_coordinates"


@pytest.mark.asyncio
async def test_chat_send_prompt():
    chat = MagicMock()
    chat.send_message = AsyncMock(return_value=response_with(types.Part(text="Hello")))

    turn = await GeminiChat(chat).send_prompt("Hi")

    chat.send_message.assert_awaited_once_with("Hi")
    assert turn.text == "Hello"


@pytest.mark.asyncio
async def test_chat_send_tool_result():
    chat = MagicMock()
    chat.send_message = AsyncMock(return_value=response_with(types.Part(text="Done")))
    call = CallRequest("get_alerts", {"state": "CA"})

    await GeminiChat(chat).send_tool_result(call, ToolResult.from_text("No active alerts for CA"))

    (message,), _ = chat.send_message.await_args
    assert message[0].function_response.name == "get_alerts"


@pytest.mark.asyncio
async def test_chat_transport_failure_becomes_model_error():
    chat = MagicMock()
    chat.send_message = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(ModelError):
        await GeminiChat(chat).send_prompt("Hi")


def test_start_chat_passes_declarations_and_history():
    client = MagicMock()
    model = GeminiModel(client, model="gemini-2.5-flash", system_instruction="Be brief.")
    history = Conversation.from_prompt("Earlier question").with_model("Earlier answer").messages

    model.start_chat([DECLARATION], history=history)

    kwargs = client.aio.chats.create.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    assert kwargs["config"].system_instruction == "Be brief."
    assert kwargs["config"].tools[0].function_declarations[0].name == "get_coordinates"
    assert [c.role for c in kwargs["history"]] == ["user", "model"]


def test_history_merges_results_of_one_response():
    first = CallRequest("get_coordinates", {"city": "Livermore", "state": "CA"}, "c1")
    second = CallRequest("get_alerts", {"state": "CA"}, "c2")
    conversation = (
        Conversation.from_prompt("Rain in Livermore?")
        .with_model(None, (first, second))
        .with_tool_result(first, ToolResult.from_text("Latitude: 37.68"))
        .with_tool_result(second, ToolResult.from_text("Not executed", is_error=True))
    )

    contents = to_contents(conversation.messages)

    assert [c.role for c in contents] == ["user", "model", "user"]
    assert [p.function_response.id for p in contents[2].parts] == ["c1", "c2"]


# =============================================================================
# Real google-genai chat, only generate_content is replaced
# =============================================================================
def count_parts(contents, kind):
    return sum(1 for content in contents for part in content.parts or [] if getattr(part, kind))


@pytest.mark.asyncio
async def test_every_call_gets_a_function_response(monkeypatch):
    """Two calls in one response: one runs, but Gemini hears back about both."""
    client = genai.Client(api_key="test-key")
    generate = AsyncMock(
        side_effect=[
            response_with(
                types.Part(
                    function_call=types.FunctionCall(
                        id="c1", name="get_coordinates", args={"city": "Livermore", "state": "CA"}
                    )
                ),
                types.Part(
                    function_call=types.FunctionCall(id="c2", name="get_alerts", args={"state": "CA"})
                ),
            ),
            response_with(types.Part(text="Livermore is at 37.68N; no rain expected.")),
        ]
    )
    monkeypatch.setattr(client.aio.models, "generate_content", generate)

    tools = AsyncMock()
    tools.list_tools.return_value = [
        ToolDescriptor("get_coordinates", parameter_schema={"properties": {"city": {}, "state": {}}}),
        ToolDescriptor("get_alerts", parameter_schema={"properties": {"state": {}}}),
    ]
    tools.call_tool.return_value = ToolResult.from_text("Latitude: 37.68\nLongitude: -121.77")

    turn = await AgentLoop(GeminiModel(client, model="gemini-2.5-flash"), tools).run(
        "Is it going to rain in Livermore, CA?"
    )

    assert turn.final_text == "Livermore is at 37.68N; no rain expected."
    tools.call_tool.assert_awaited_once_with("get_coordinates", {"city": "Livermore", "state": "CA"})

    contents = generate.await_args_list[1].kwargs["contents"]
    assert count_parts(contents, "function_call") == 2
    assert count_parts(contents, "function_response") == 2
    responses = contents[-1].parts
    assert [p.function_response.name for p in responses] == ["get_coordinates", "get_alerts"]
    assert [p.function_response.id for p in responses] == ["c1", "c2"]
    assert responses[1].function_response.response["isError"] is True
