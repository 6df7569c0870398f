from __future__ import annotations

import pytest

from idle_guard.runtime.settings import load_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("IDLE_MAX_MS", "IDLE_WARNING_MS", "IDLE_LOGIN_ROUTE", "IDLE_CHANNEL_NAME", "IDLE_GUARD_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()
    assert settings.idle.idle_max_ms == 15 * 60 * 1000
    assert settings.idle.warning_ms == 60 * 1000
    assert settings.idle.login_route == "/login"
    assert settings.idle.channel_name == "idle"
    assert settings.auth.api_key == ""


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IDLE_MAX_MS", "15000")
    monkeypatch.setenv("IDLE_WARNING_MS", "5000")
    monkeypatch.setenv("IDLE_LOGIN_ROUTE", "signin")
    monkeypatch.setenv("WS_MAX_MESSAGES_PER_WINDOW", "not-a-number")

    settings = load_settings()
    assert settings.idle.idle_max_ms == 15000
    assert settings.idle.warning_ms == 5000
    assert settings.idle.login_route == "/signin"
    assert settings.limits.ws_max_messages_per_window == 600


def test_warning_must_fit_in_budget(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IDLE_MAX_MS", "5000")
    monkeypatch.setenv("IDLE_WARNING_MS", "5000")

    with pytest.raises(ValueError, match="IDLE_WARNING_MS"):
        load_settings()
