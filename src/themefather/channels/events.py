"""Channel bus event models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class InboundMessage:
    """Command or text received from an external channel.

    ``command`` is the bot command name without the leading slash, or ``None``
    for plain text.
    """

    channel: str
    sender_id: str
    chat_id: str
    content: str
    command: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class OutboundMessage:
    """Message to be delivered to one external channel.

    ``progress`` marks an interim reply sent while more output is on its way.
    """

    channel: str
    chat_id: str
    content: str
    progress: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
