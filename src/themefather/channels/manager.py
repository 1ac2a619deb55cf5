"""Channel manager."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from themefather.channels.base import BaseChannel
from themefather.channels.bus import MessageBus
from themefather.channels.events import InboundMessage

InboundDispatcher = Callable[[InboundMessage], Awaitable[object]]


class ChannelManager:
    """Coordinate inbound routing and outbound dispatch for channels.

    Each inbound message is handled in its own task so one user's slow theme
    never holds up another user's messages. Outbound messages reach only the
    channel they are addressed to.
    """

    def __init__(self, bus: MessageBus, dispatch: InboundDispatcher) -> None:
        self.bus = bus
        self._dispatch = dispatch
        self._channels: dict[str, BaseChannel] = {}
        self._tasks: list[asyncio.Task[None]] = []
        self._inflight: set[asyncio.Task[None]] = set()
        self._unsubscribers: list[Callable[[], None]] = []

    def register(self, channel: BaseChannel) -> None:
        self._channels[channel.name] = channel

    async def start(self) -> None:
        self._unsubscribers.append(self.bus.on_inbound(self._handle_inbound))
        for name, channel in self._channels.items():
            self._unsubscribers.append(self.bus.on_outbound(channel.send, channel=name))
            self._tasks.append(asyncio.create_task(channel.start()))
        logger.info("channels.manager.started channels={}", ",".join(self._channels))

    async def join(self) -> None:
        """Wait until every channel has stopped; re-raises a channel failure."""
        await asyncio.gather(*self._tasks)

    async def stop(self) -> None:
        for channel in self._channels.values():
            await channel.stop()
        pending = [*self._tasks, *self._inflight]
        for task in pending:
            task.cancel()
        # Failures were already raised from join() or logged by _process_inbound.
        await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        self._inflight.clear()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        logger.info("channels.manager.stopped")

    async def _handle_inbound(self, message: InboundMessage) -> None:
        task = asyncio.create_task(self._process_inbound(message))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _process_inbound(self, message: InboundMessage) -> None:
        try:
            await self._dispatch(message)
        except Exception:
            logger.exception("channels.manager.inbound.error channel={} chat_id={}", message.channel, message.chat_id)
