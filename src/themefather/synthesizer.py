"""Theme synthesis over a streamed completion."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import aclosing
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from themefather.completion import DoneChunk, StreamChunk
from themefather.errors import StreamTimedOutError
from themefather.prompts import PromptMessage, build_messages
from themefather.state import UserRequestState
from themefather.templates import TemplateStore

FragmentObserver = Callable[[str], Awaitable[None]]


class CompletionStream(Protocol):
    def stream_chat(
        self, model: str, messages: Sequence[PromptMessage], temperature: float
    ) -> AsyncIterator[StreamChunk]: ...


@dataclass(frozen=True)
class SynthesisOutput:
    """Generated theme text plus the description it was drafted from."""

    theme: str
    description: str


class ThemeSynthesizer:
    """Fills a platform template from a description via a streamed completion."""

    def __init__(
        self,
        client: CompletionStream,
        templates: TemplateStore,
        *,
        model: str,
        temperature: float,
        inactivity_timeout: float,
    ) -> None:
        self._client = client
        self._templates = templates
        self._model = model
        self._temperature = temperature
        self._inactivity_timeout = inactivity_timeout

    async def synthesize(
        self,
        state: UserRequestState,
        on_fragment: FragmentObserver | None = None,
    ) -> SynthesisOutput:
        """Draft a theme for a described request.

        Every received chunk restarts the inactivity window. When the window
        elapses the text collected so far is returned, unless nothing was
        collected, which raises ``StreamTimedOutError``. Transport and parse
        errors propagate and drop any partial text.
        """
        if state.platform is None or state.description is None:
            raise ValueError("synthesis requires both a platform and a description")

        template = self._templates.require(state.platform)
        messages = build_messages(template, state.description, platform=state.platform)
        logger.info("synthesizer.start platform={} model={}", state.platform.value, self._model)

        parts: list[str] = []
        async with aclosing(self._client.stream_chat(self._model, messages, self._temperature)) as stream:
            while True:
                try:
                    chunk = await asyncio.wait_for(anext(stream), timeout=self._inactivity_timeout)
                except StopAsyncIteration:
                    break
                except TimeoutError:
                    if not parts:
                        raise StreamTimedOutError(
                            f"no content within {self._inactivity_timeout}s of inactivity"
                        ) from None
                    logger.warning(
                        "synthesizer.stalled platform={} chars={} keeping partial theme",
                        state.platform.value,
                        sum(len(part) for part in parts),
                    )
                    break
                if isinstance(chunk, DoneChunk):
                    break
                if not chunk.text:
                    continue
                parts.append(chunk.text)
                if on_fragment is not None:
                    await on_fragment(chunk.text)

        theme = "".join(parts)
        logger.info("synthesizer.done platform={} chars={}", state.platform.value, len(theme))
        return SynthesisOutput(theme=theme, description=state.description)
