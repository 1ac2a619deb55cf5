"""Supported theme platforms."""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    """Platform a theme is drafted for; the value is its display name."""

    IOS = "iOS"
    ANDROID = "Android"
    MACOS = "macOS"
    WINDOWS = "Windows"

    @property
    def template_key(self) -> str:
        return _TEMPLATE_KEYS[self]

    @classmethod
    def parse(cls, value: str) -> Platform | None:
        """Resolve a display name or template key, ignoring case."""
        normalized = value.strip().casefold()
        for platform in cls:
            if normalized in (platform.value.casefold(), platform.template_key):
                return platform
        return None


_TEMPLATE_KEYS: dict[Platform, str] = {
    Platform.IOS: "ios",
    Platform.ANDROID: "android",
    Platform.MACOS: "macos",
    Platform.WINDOWS: "tdesktop",
}
