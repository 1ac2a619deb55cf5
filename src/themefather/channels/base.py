"""Base channel interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from themefather.channels.bus import MessageBus
from themefather.channels.events import InboundMessage, OutboundMessage


class BaseChannel(ABC):
    """Abstract base class for channel adapters."""

    name: str = "base"

    def __init__(self, bus: MessageBus) -> None:
        self.bus = bus
        self._running = False

    @abstractmethod
    async def start(self) -> None:
        """Start receiving messages; returns once the channel stops."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop the channel and release its resources."""

    @abstractmethod
    async def send(self, message: OutboundMessage) -> None:
        """Deliver one outbound message."""

    async def publish_inbound(self, message: InboundMessage) -> None:
        await self.bus.publish_inbound(message)
