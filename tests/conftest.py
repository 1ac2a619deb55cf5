from __future__ import annotations

import pytest

_ENV_KEYS = (
    "OPENAI_API_KEY",
    "TELOXIDE_TOKEN",
    "TELEGRAM_BOT_TOKEN",
    "THEMEFATHER_OPENAI_API_KEY",
    "THEMEFATHER_TELEGRAM_TOKEN",
    "THEMEFATHER_MODEL",
    "THEMEFATHER_TEMPERATURE",
    "THEMEFATHER_INACTIVITY_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Keep a developer's .env out of the settings under test.
    monkeypatch.chdir(tmp_path)
