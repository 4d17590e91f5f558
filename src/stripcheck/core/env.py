"""Centralized environment variable helpers."""

from __future__ import annotations

import os


def getenv(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)


def child_env(overrides: dict[str, str]) -> dict[str, str]:
    env = os.environ.copy()
    env.update(overrides)
    return env
