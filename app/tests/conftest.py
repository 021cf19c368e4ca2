from __future__ import annotations

from typing import Iterator

import pytest

from email_relay.core import settings as core_settings

SMTP_ENV_KEYS = (
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_SECURE",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_TIMEOUT",
)


@pytest.fixture(autouse=True)
def basic_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """テストごとに SMTP 設定を空にし、設定キャッシュをクリアする。"""

    for key in SMTP_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("SSM_PATH_PREFIX", raising=False)
    core_settings.load_settings.cache_clear()
    yield
    core_settings.load_settings.cache_clear()


@pytest.fixture
def smtp_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """送信可能な SMTP 設定を環境変数へセットする。"""

    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_USER", "relay-user")
    monkeypatch.setenv("SMTP_PASS", "relay-pass")
    core_settings.load_settings.cache_clear()
