"""Secrets and authentication configuration."""

from __future__ import annotations

import os

ENV_IDLE_GUARD_API_KEY = "IDLE_GUARD_API_KEY"


def get_idle_guard_api_key() -> str:
    return (os.getenv(ENV_IDLE_GUARD_API_KEY) or "").strip()


__all__ = ["ENV_IDLE_GUARD_API_KEY", "get_idle_guard_api_key"]
