"""Shared FastAPI dependencies."""

from __future__ import annotations

from composer.settings import ComposerSettings

_settings: ComposerSettings | None = None


def get_settings() -> ComposerSettings:
    """FastAPI dependency: return the shared ComposerSettings."""
    assert _settings is not None, "Settings not initialised"
    return _settings
