"""Bundled theme templates.

Each template is a text file of ``key: value`` lines shipped as package data
under ``themefather/assets/themes``. The model is asked to return the same
lines with only the values changed.
"""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable

from loguru import logger

from themefather.errors import TemplateNotFoundError
from themefather.platforms import Platform

TEMPLATE_FILES: dict[str, str] = {
    "android": "template_android_theme.txt",
    "ios": "template_ios_theme.txt",
    "macos": "template_macos_theme.txt",
    "tdesktop": "template_tdesktop_theme.txt",
}


def _default_root() -> Traversable:
    return resources.files("themefather").joinpath("assets", "themes")


class TemplateStore:
    """Case-insensitive lookup from platform to template text."""

    def __init__(self, root: Traversable | None = None) -> None:
        self._root = root if root is not None else _default_root()
        self._cache: dict[str, str | None] = {}

    def keys(self) -> list[str]:
        return sorted(TEMPLATE_FILES)

    def get(self, platform: str | Platform) -> str | None:
        """Return the template for a platform name or template key, or None."""
        key = self._resolve_key(platform)
        if key is None:
            return None
        if key not in self._cache:
            self._cache[key] = self._load(key)
        return self._cache[key]

    def require(self, platform: str | Platform) -> str:
        template = self.get(platform)
        if template is None:
            raise TemplateNotFoundError(str(platform))
        return template

    @staticmethod
    def _resolve_key(platform: str | Platform) -> str | None:
        if isinstance(platform, Platform):
            return platform.template_key
        normalized = platform.strip().casefold()
        if normalized in TEMPLATE_FILES:
            return normalized
        parsed = Platform.parse(normalized)
        return parsed.template_key if parsed is not None else None

    def _load(self, key: str) -> str | None:
        resource = self._root.joinpath(TEMPLATE_FILES[key])
        try:
            text = resource.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError):
            logger.warning("templates.load.failed key={}", key)
            return None
        return text.rstrip("\n") or None
