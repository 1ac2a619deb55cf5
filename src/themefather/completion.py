"""Streaming chat completions client.

Speaks the OpenAI ``/chat/completions`` protocol with ``stream: true`` and
turns the ``data:`` event lines into ``StreamChunk`` values.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from enum import StrEnum

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from themefather.config import Settings
from themefather.errors import MissingCredentialError, RequestFailedError, StreamParseError, TransportError
from themefather.prompts import PromptMessage

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class OpenAIModel(StrEnum):
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"


@dataclass(frozen=True)
class ContentChunk:
    text: str


@dataclass(frozen=True)
class EmptyChunk:
    text: str = ""


@dataclass(frozen=True)
class DoneChunk:
    text: str = ""


StreamChunk = ContentChunk | EmptyChunk | DoneChunk


class _Delta(BaseModel):
    content: str | None = None


class _ChunkChoice(BaseModel):
    delta: _Delta = _Delta()


class _CompletionChunk(BaseModel):
    choices: list[_ChunkChoice] = []


def parse_frame(line: str) -> StreamChunk | None:
    """Parse one event-stream line; ``None`` means the line carries nothing."""
    if not line.startswith(DATA_PREFIX):
        return None
    body = line[len(DATA_PREFIX) :]
    if not body:
        return None
    if body == DONE_SENTINEL:
        return DoneChunk()
    try:
        chunk = _CompletionChunk.model_validate_json(body)
    except ValidationError as exc:
        raise StreamParseError(f"malformed stream chunk: {body[:100]}") from exc
    if chunk.choices and chunk.choices[0].delta.content is not None:
        return ContentChunk(chunk.choices[0].delta.content)
    return EmptyChunk()


class CompletionClient:
    """Chat completions over HTTP, authenticated with a bearer token."""

    def __init__(
        self,
        api_key: str | None,
        *,
        api_base: str = "https://api.openai.com/v1",
        timeout: float = 600.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise MissingCredentialError("completion API key is not set (OPENAI_API_KEY)")
        self._base_url = api_base.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> CompletionClient:
        return cls(
            settings.openai_api_key,
            api_base=settings.api_base,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def stream_chat(
        self,
        model: str,
        messages: Sequence[PromptMessage],
        temperature: float,
    ) -> AsyncIterator[StreamChunk]:
        """Yield chunks until ``[DONE]``, the end of the body, or the first error."""
        body = {
            "model": model,
            "messages": [message.model_dump() for message in messages],
            "temperature": temperature,
            "stream": True,
        }
        logger.info("completion.request model={} messages={}", model, len(messages))
        client = self._get_client()
        try:
            async with client.stream("POST", f"{self._base_url}/chat/completions", json=body) as response:
                if not response.is_success:
                    error_body = (await response.aread()).decode("utf-8", errors="replace")
                    logger.error("completion.request.failed status={} body={}", response.status_code, error_body[:500])
                    raise RequestFailedError(response.status_code, error_body)
                async for line in response.aiter_lines():
                    chunk = parse_frame(line)
                    if chunk is None:
                        continue
                    yield chunk
                    if isinstance(chunk, DoneChunk):
                        return
        except httpx.HTTPError as exc:
            raise TransportError(f"completion stream failed: {exc}") from exc
