from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Sequence

import httpx
import pytest

from themefather.completion import CompletionClient, ContentChunk, DoneChunk, EmptyChunk, StreamChunk
from themefather.errors import RequestFailedError, StreamParseError, StreamTimedOutError, TemplateNotFoundError
from themefather.platforms import Platform
from themefather.prompts import PromptMessage
from themefather.state import UserRequestState
from themefather.synthesizer import SynthesisOutput, ThemeSynthesizer
from themefather.templates import TemplateStore


class Stall:
    def __init__(self, seconds: float) -> None:
        self.seconds = seconds


class FakeClient:
    """Plays back a script of chunks, stalls and errors."""

    def __init__(self, script: list[StreamChunk | Stall | Exception]) -> None:
        self.script = script
        self.calls: list[dict[str, object]] = []
        self.closed = False

    async def stream_chat(
        self, model: str, messages: Sequence[PromptMessage], temperature: float
    ) -> AsyncIterator[StreamChunk]:
        self.calls.append({"model": model, "messages": list(messages), "temperature": temperature})
        try:
            for item in self.script:
                if isinstance(item, Stall):
                    await asyncio.sleep(item.seconds)
                elif isinstance(item, Exception):
                    raise item
                else:
                    yield item
        finally:
            self.closed = True


class EmptyTemplates(TemplateStore):
    def get(self, platform):  # type: ignore[no-untyped-def]
        return None


def _synthesizer(client: object, *, timeout: float = 0.05, templates: TemplateStore | None = None) -> ThemeSynthesizer:
    return ThemeSynthesizer(
        client,  # type: ignore[arg-type]
        templates or TemplateStore(),
        model="gpt-4o",
        temperature=0.2,
        inactivity_timeout=timeout,
    )


def _state(description: str = "dark mode") -> UserRequestState:
    return UserRequestState(platform=Platform.IOS, description=description)


def _frame(content: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]})


def _http_client(*lines: str) -> CompletionClient:
    body = ("\n".join(lines) + "\n").encode("utf-8")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body)

    return CompletionClient("sk-test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_content_then_done_accumulates_text() -> None:
    synthesizer = _synthesizer(_http_client(_frame("A"), _frame("B"), "data: [DONE]"))
    output = await synthesizer.synthesize(_state())
    assert output == SynthesisOutput(theme="AB", description="dark mode")


@pytest.mark.asyncio
async def test_done_alone_is_an_empty_success() -> None:
    output = await _synthesizer(_http_client("data: [DONE]")).synthesize(_state())
    assert output.theme == ""


@pytest.mark.asyncio
async def test_malformed_frame_is_a_hard_failure() -> None:
    synthesizer = _synthesizer(_http_client(_frame("A"), "data: {not json"))
    with pytest.raises(StreamParseError):
        await synthesizer.synthesize(_state())


@pytest.mark.asyncio
async def test_request_failure_propagates() -> None:
    client = FakeClient([RequestFailedError(500, "upstream down")])
    with pytest.raises(RequestFailedError):
        await _synthesizer(client).synthesize(_state())


@pytest.mark.asyncio
async def test_prompt_uses_platform_template_and_fixed_sampling() -> None:
    client = FakeClient([ContentChunk("x"), DoneChunk()])
    await _synthesizer(client).synthesize(_state("neon purple"))

    call = client.calls[0]
    assert call["model"] == "gpt-4o"
    assert call["temperature"] == pytest.approx(0.2)
    system, user = call["messages"]  # type: ignore[misc]
    assert TemplateStore().require(Platform.IOS) in system.content
    assert "neon purple" in user.content


@pytest.mark.asyncio
async def test_fragments_are_reported_as_they_arrive() -> None:
    client = FakeClient([ContentChunk("a: "), EmptyChunk(), ContentChunk("#000000"), DoneChunk()])
    seen: list[str] = []

    async def observe(fragment: str) -> None:
        seen.append(fragment)

    output = await _synthesizer(client).synthesize(_state(), on_fragment=observe)
    assert seen == ["a: ", "#000000"]
    assert output.theme == "a: #000000"


@pytest.mark.asyncio
async def test_stall_before_any_content_times_out() -> None:
    client = FakeClient([Stall(5)])
    with pytest.raises(StreamTimedOutError):
        await _synthesizer(client).synthesize(_state())
    assert client.closed


@pytest.mark.asyncio
async def test_empty_chunks_do_not_count_as_content() -> None:
    client = FakeClient([EmptyChunk(), EmptyChunk(), Stall(5)])
    with pytest.raises(StreamTimedOutError):
        await _synthesizer(client).synthesize(_state())


@pytest.mark.asyncio
async def test_stall_after_content_keeps_partial_theme() -> None:
    client = FakeClient([ContentChunk("windowBg: "), ContentChunk("#101010"), Stall(5), ContentChunk("late")])
    output = await _synthesizer(client).synthesize(_state())
    assert output.theme == "windowBg: #101010"
    assert client.closed


@pytest.mark.asyncio
async def test_every_received_chunk_restarts_the_window() -> None:
    # Each gap is shorter than the window, the total is longer.
    script: list[StreamChunk | Stall | Exception] = []
    for _ in range(4):
        script.extend([Stall(0.05), EmptyChunk()])
    script.extend([ContentChunk("done"), DoneChunk()])
    output = await _synthesizer(FakeClient(script), timeout=0.15).synthesize(_state())
    assert output.theme == "done"


@pytest.mark.asyncio
async def test_end_of_stream_without_done_succeeds() -> None:
    output = await _synthesizer(FakeClient([ContentChunk("abc")])).synthesize(_state())
    assert output.theme == "abc"


@pytest.mark.asyncio
async def test_missing_template_is_reported() -> None:
    client = FakeClient([DoneChunk()])
    with pytest.raises(TemplateNotFoundError):
        await _synthesizer(client, templates=EmptyTemplates()).synthesize(_state())
    assert client.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "state",
    [UserRequestState(), UserRequestState(platform=Platform.ANDROID), UserRequestState(description="x")],
)
async def test_incomplete_state_is_a_caller_error(state: UserRequestState) -> None:
    with pytest.raises(ValueError):
        await _synthesizer(FakeClient([])).synthesize(state)
