"""Application-level exception types for Theme Father."""

from __future__ import annotations


class ThemeFatherError(Exception):
    """Base exception for Theme Father."""


class ConfigurationError(ThemeFatherError):
    """Base exception for configuration and startup validation errors."""


class MissingCredentialError(ConfigurationError):
    """Raised when the completion API key is not configured."""


class TemplateNotFoundError(ConfigurationError):
    """Raised when no template is bundled for a supported platform."""

    def __init__(self, platform: str) -> None:
        super().__init__(f"no theme template for platform {platform!r}")
        self.platform = platform


class TransportError(ThemeFatherError):
    """Raised when the completion API cannot be reached or the connection drops."""


class RequestFailedError(TransportError):
    """Raised when the completion API answers with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"completion request failed status={status} body={body[:200]}")
        self.status = status
        self.body = body


class StreamParseError(ThemeFatherError):
    """Raised when a streamed event frame does not hold a valid chunk."""


class StreamTimedOutError(ThemeFatherError):
    """Raised when the stream stalls before producing any content."""
