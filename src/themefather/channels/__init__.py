"""Channel adapters and bus exports."""

from themefather.channels.base import BaseChannel
from themefather.channels.bus import MessageBus
from themefather.channels.events import InboundMessage, OutboundMessage
from themefather.channels.manager import ChannelManager
from themefather.channels.telegram import TelegramChannel, TelegramConfig

__all__ = [
    "BaseChannel",
    "ChannelManager",
    "InboundMessage",
    "MessageBus",
    "OutboundMessage",
    "TelegramChannel",
    "TelegramConfig",
]
