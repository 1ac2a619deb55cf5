"""Theme Father conversation flow.

A user picks a platform with a command, then sends one text message
describing the theme. That message is turned into a theme and the request is
cleared, whatever the outcome.
"""

from __future__ import annotations

from loguru import logger

from themefather.channels.bus import MessageBus
from themefather.channels.events import InboundMessage, OutboundMessage
from themefather.commands import Command
from themefather.errors import ThemeFatherError
from themefather.logging_utils import user_context
from themefather.prompts import (
    EMPTY_THEME_MESSAGE,
    RESET_MESSAGE,
    SYNTHESIS_FAILED_MESSAGE,
    WELCOME_MESSAGE,
    platform_prompt,
    processing_message,
)
from themefather.state import ConversationStore
from themefather.synthesizer import SynthesisOutput, ThemeSynthesizer


class ThemeBot:
    """Routes inbound commands and text through the conversation state machine."""

    def __init__(self, store: ConversationStore, synthesizer: ThemeSynthesizer, bus: MessageBus) -> None:
        self._store = store
        self._synthesizer = synthesizer
        self._bus = bus

    async def handle_inbound(self, message: InboundMessage) -> SynthesisOutput | None:
        with user_context(message.sender_id):
            if message.command is not None:
                command = Command.parse(message.command)
                if command is None:
                    logger.debug("bot.command.unknown command={}", message.command)
                    return None
                await self.handle_command(message, command)
                return None
            return await self.handle_text(message)

    async def handle_command(self, message: InboundMessage, command: Command) -> None:
        user_id = message.sender_id
        platform = command.platform
        if platform is not None:
            await self._store.select_platform(user_id, platform)
            logger.info("bot.platform_selected platform={}", platform.value)
            await self._reply(message, platform_prompt(platform))
            return

        await self._store.reset(user_id)
        if command is Command.START:
            await self._reply(message, WELCOME_MESSAGE)
        else:
            logger.info("bot.reset")
            await self._reply(message, RESET_MESSAGE)

    async def handle_text(self, message: InboundMessage) -> SynthesisOutput | None:
        user_id = message.sender_id
        state = await self._store.submit_description(user_id, message.content)
        if state is None or state.platform is None:
            return None

        try:
            await self._reply(message, processing_message(state.platform), progress=True)
            try:
                output = await self._synthesizer.synthesize(state, on_fragment=self._log_fragment)
            except ThemeFatherError:
                logger.exception("bot.synthesis.failed platform={}", state.platform.value)
                await self._reply(message, SYNTHESIS_FAILED_MESSAGE)
                return None
            await self._reply(message, output.theme if output.theme.strip() else EMPTY_THEME_MESSAGE)
            return output
        finally:
            await self._store.finish(user_id, state)

    async def _reply(self, message: InboundMessage, content: str, *, progress: bool = False) -> None:
        await self._bus.publish_outbound(
            OutboundMessage(
                channel=message.channel,
                chat_id=message.chat_id,
                content=content,
                progress=progress,
            )
        )

    @staticmethod
    async def _log_fragment(fragment: str) -> None:
        logger.trace("bot.synthesis.fragment chars={}", len(fragment))
