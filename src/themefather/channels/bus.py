"""Signal-based channel bus.

Messages are sent with their channel name as the blinker sender, so a
subscriber can listen to every channel or to a single one.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from blinker import ANY, NamedSignal

from themefather.channels.events import InboundMessage, OutboundMessage

InboundHandler = Callable[[InboundMessage], Coroutine[Any, Any, None]]
OutboundHandler = Callable[[OutboundMessage], Coroutine[Any, Any, None]]


class MessageBus:
    """In-process message bus backed by blinker signals."""

    def __init__(self) -> None:
        self._inbound = NamedSignal("themefather.inbound")
        self._outbound = NamedSignal("themefather.outbound")

    async def publish_inbound(self, message: InboundMessage) -> None:
        await self._inbound.send_async(message.channel, message=message)

    async def publish_outbound(self, message: OutboundMessage) -> None:
        await self._outbound.send_async(message.channel, message=message)

    def on_inbound(self, handler: InboundHandler) -> Callable[[], None]:
        async def _receiver(sender: Any, *, message: InboundMessage) -> None:
            await handler(message)

        self._inbound.connect(_receiver, weak=False)
        return lambda: self._inbound.disconnect(_receiver)

    def on_outbound(self, handler: OutboundHandler, *, channel: str | None = None) -> Callable[[], None]:
        """Subscribe to outbound messages, optionally only those addressed to ``channel``."""

        async def _receiver(sender: Any, *, message: OutboundMessage) -> None:
            await handler(message)

        self._outbound.connect(_receiver, sender=channel if channel is not None else ANY, weak=False)
        return lambda: self._outbound.disconnect(_receiver)
