"""Bot commands."""

from __future__ import annotations

from enum import StrEnum

from themefather.platforms import Platform


class Command(StrEnum):
    START = "start"
    CREATE_IOS_THEME = "createIosTheme"
    CREATE_ANDROID_THEME = "createAndroidTheme"
    CREATE_MACOS_THEME = "createMacosTheme"
    CREATE_WINDOWS_THEME = "createWindowsTheme"
    RESET = "reset"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def platform(self) -> Platform | None:
        """Platform selected by this command, if it starts a theme request."""
        return _PLATFORMS.get(self)

    @classmethod
    def parse(cls, value: str) -> Command | None:
        """Resolve a command name, with or without ``/`` and ``@botname``; case-insensitive."""
        name = value.strip().removeprefix("/").split("@", 1)[0].casefold()
        for command in cls:
            if command.value.casefold() == name:
                return command
        return None


_DESCRIPTIONS: dict[Command, str] = {
    Command.START: "Start the bot and show available commands",
    Command.CREATE_IOS_THEME: "Create a theme for iOS",
    Command.CREATE_ANDROID_THEME: "Create a theme for Android",
    Command.CREATE_MACOS_THEME: "Create a theme for macOS",
    Command.CREATE_WINDOWS_THEME: "Create a theme for Windows",
    Command.RESET: "Reset the current theme creation process",
}

_PLATFORMS: dict[Command, Platform] = {
    Command.CREATE_IOS_THEME: Platform.IOS,
    Command.CREATE_ANDROID_THEME: Platform.ANDROID,
    Command.CREATE_MACOS_THEME: Platform.MACOS,
    Command.CREATE_WINDOWS_THEME: Platform.WINDOWS,
}
