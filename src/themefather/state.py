"""Per-user conversation state."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace

from loguru import logger

from themefather.platforms import Platform


@dataclass
class UserRequestState:
    """One user's in-progress theme request.

    ``description`` is only ever set on an entry that already has a platform.
    """

    platform: Platform | None = None
    description: str | None = None


class ConversationStore:
    """Table of in-progress requests keyed by user id.

    Every method holds the table lock only for its own read or mutation; callers
    run synthesis after the method returns.
    """

    def __init__(self) -> None:
        self._states: dict[str, UserRequestState] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: str) -> UserRequestState | None:
        async with self._lock:
            state = self._states.get(user_id)
            return replace(state) if state is not None else None

    async def reset(self, user_id: str) -> None:
        async with self._lock:
            removed = self._states.pop(user_id, None)
        logger.debug("state.reset had_request={}", removed is not None)

    async def select_platform(self, user_id: str, platform: Platform) -> UserRequestState:
        async with self._lock:
            state = UserRequestState(platform=platform)
            self._states[user_id] = state
        logger.debug("state.platform_selected platform={}", platform.value)
        return replace(state)

    async def submit_description(self, user_id: str, text: str) -> UserRequestState | None:
        """Attach ``text`` to a waiting request and hand it back for synthesis.

        Returns ``None`` when the user has no request or its description is
        already set; such messages are ignored.
        """
        async with self._lock:
            state = self._states.get(user_id)
            if state is None or state.platform is None or state.description is not None:
                return None
            state.description = text
            return state

    async def finish(self, user_id: str, state: UserRequestState) -> None:
        """Drop ``state`` once its synthesis has ended.

        A request started after ``state`` was submitted is left in place.
        """
        async with self._lock:
            if self._states.get(user_id) is state:
                del self._states[user_id]
