"""Telegram channel adapter."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from loguru import logger
from telegram import BotCommand, Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from themefather.channels.base import BaseChannel
from themefather.channels.bus import MessageBus
from themefather.channels.events import InboundMessage, OutboundMessage
from themefather.channels.utils import split_text
from themefather.commands import Command
from themefather.errors import ConfigurationError

TYPING_INTERVAL_SECONDS = 4
MAX_TYPING_SECONDS = 600


@dataclass(frozen=True)
class TelegramConfig:
    """Telegram adapter config."""

    token: str


class TelegramChannel(BaseChannel):
    """Telegram adapter using long polling mode."""

    name = "telegram"

    def __init__(self, bus: MessageBus, config: TelegramConfig) -> None:
        super().__init__(bus)
        self._config = config
        self._app: Application | None = None
        self._typing_tasks: dict[str, asyncio.Task[None]] = {}

    async def start(self) -> None:
        if not self._config.token:
            raise ConfigurationError("telegram token is empty")
        logger.info("telegram.channel.start")
        self._running = True
        self._app = Application.builder().token(self._config.token).build()
        self._app.add_handler(CommandHandler([command.value for command in Command], self._on_command, block=False))
        self._app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self._on_text, block=False))
        await self._app.initialize()
        await self._app.start()
        await self._app.bot.set_my_commands(
            [BotCommand(command.value.lower(), command.description) for command in Command]
        )
        updater = self._app.updater
        if updater is None:
            return
        await updater.start_polling(drop_pending_updates=True, allowed_updates=["message"])
        logger.info("telegram.channel.polling")
        while self._running:
            await asyncio.sleep(0.5)

    async def stop(self) -> None:
        self._running = False
        for task in self._typing_tasks.values():
            task.cancel()
        self._typing_tasks.clear()
        if self._app is None:
            return
        updater = self._app.updater
        if updater is not None and updater.running:
            await updater.stop()
        if self._app.running:
            await self._app.stop()
        await self._app.shutdown()
        self._app = None
        logger.info("telegram.channel.stopped")

    async def send(self, message: OutboundMessage) -> None:
        if self._app is None:
            return
        if not message.progress:
            self._stop_typing(message.chat_id)
        if not message.content.strip():
            logger.warning("telegram.channel.send.empty chat_id={}", message.chat_id)
            return
        for piece in split_text(message.content):
            await self._app.bot.send_message(chat_id=int(message.chat_id), text=piece)
        if message.progress:
            self._start_typing(message.chat_id)

    async def _on_command(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        if update.message is None or update.effective_user is None:
            return
        text = update.message.text or ""
        command = Command.parse(text.split(maxsplit=1)[0]) if text.strip() else None
        if command is None:
            return
        user = update.effective_user
        chat_id = str(update.message.chat_id)
        logger.info(
            "telegram.channel.command chat_id={} sender_id={} command={}",
            chat_id,
            user.id,
            command.value,
        )
        await self.publish_inbound(
            InboundMessage(
                channel=self.name,
                sender_id=str(user.id),
                chat_id=chat_id,
                content="",
                command=command.value,
                metadata={"username": user.username or "", "message_id": update.message.message_id},
            )
        )

    async def _on_text(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        if update.message is None or update.effective_user is None:
            return
        user = update.effective_user
        chat_id = str(update.message.chat_id)
        text = update.message.text or ""

        logger.info(
            "telegram.channel.inbound chat_id={} sender_id={} username={} content={}",
            chat_id,
            user.id,
            user.username or "",
            text[:100],  # Log first 100 chars to avoid verbose logs
        )

        await self.publish_inbound(
            InboundMessage(
                channel=self.name,
                sender_id=str(user.id),
                chat_id=chat_id,
                content=text,
                metadata={"username": user.username or "", "message_id": update.message.message_id},
            )
        )

    def _start_typing(self, chat_id: str) -> None:
        self._stop_typing(chat_id)
        self._typing_tasks[chat_id] = asyncio.create_task(self._typing_loop(chat_id))

    def _stop_typing(self, chat_id: str) -> None:
        task = self._typing_tasks.pop(chat_id, None)
        if task is not None:
            task.cancel()

    async def _typing_loop(self, chat_id: str) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + MAX_TYPING_SECONDS
        try:
            while self._app is not None and loop.time() < deadline:
                await self._app.bot.send_chat_action(chat_id=int(chat_id), action="typing")
                await asyncio.sleep(TYPING_INTERVAL_SECONDS)
        except asyncio.CancelledError:
            return
        except Exception:
            logger.exception("telegram.channel.typing_loop.error chat_id={}", chat_id)
            return
