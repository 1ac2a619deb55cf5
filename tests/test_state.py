from __future__ import annotations

import pytest

from themefather.platforms import Platform
from themefather.state import ConversationStore, UserRequestState


@pytest.mark.asyncio
async def test_text_without_platform_is_ignored() -> None:
    store = ConversationStore()
    assert await store.submit_description("u1", "dark mode") is None
    assert await store.get("u1") is None


@pytest.mark.asyncio
async def test_select_then_describe() -> None:
    store = ConversationStore()
    await store.select_platform("u1", Platform.IOS)
    assert await store.get("u1") == UserRequestState(platform=Platform.IOS)

    state = await store.submit_description("u1", "dark mode")
    assert state == UserRequestState(platform=Platform.IOS, description="dark mode")


@pytest.mark.asyncio
async def test_description_is_taken_only_once() -> None:
    store = ConversationStore()
    await store.select_platform("u1", Platform.ANDROID)
    assert await store.submit_description("u1", "first") is not None
    assert await store.submit_description("u1", "second") is None
    assert (await store.get("u1")).description == "first"  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_finish_clears_the_entry() -> None:
    store = ConversationStore()
    await store.select_platform("u1", Platform.MACOS)
    state = await store.submit_description("u1", "pastel")
    assert state is not None
    await store.finish("u1", state)
    assert await store.get("u1") is None


@pytest.mark.asyncio
async def test_finish_keeps_a_newer_request() -> None:
    store = ConversationStore()
    await store.select_platform("u1", Platform.MACOS)
    state = await store.submit_description("u1", "pastel")
    assert state is not None
    await store.select_platform("u1", Platform.WINDOWS)
    await store.finish("u1", state)
    assert await store.get("u1") == UserRequestState(platform=Platform.WINDOWS)


@pytest.mark.asyncio
async def test_reset_then_new_platform_starts_clean() -> None:
    store = ConversationStore()
    await store.select_platform("u1", Platform.IOS)
    await store.submit_description("u1", "dark mode")
    await store.reset("u1")
    assert await store.get("u1") is None

    await store.select_platform("u1", Platform.ANDROID)
    assert await store.get("u1") == UserRequestState(platform=Platform.ANDROID)


@pytest.mark.asyncio
async def test_users_are_independent() -> None:
    store = ConversationStore()
    await store.select_platform("u1", Platform.IOS)
    await store.select_platform("u2", Platform.ANDROID)
    await store.reset("u1")
    assert await store.get("u1") is None
    assert await store.get("u2") == UserRequestState(platform=Platform.ANDROID)


@pytest.mark.asyncio
async def test_get_returns_a_copy() -> None:
    store = ConversationStore()
    await store.select_platform("u1", Platform.IOS)
    snapshot = await store.get("u1")
    assert snapshot is not None
    snapshot.description = "tampered"
    assert (await store.get("u1")).description is None  # type: ignore[union-attr]
