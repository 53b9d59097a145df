"""Tests for service options loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from composer.settings import DEFAULT_MAX_OUTPUT_CHARS, ComposerSettings, load_settings
from composer.validator.models import ScriptMode


class TestLoadSettings:
    def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COMPOSER_OPTIONS_PATH", str(tmp_path / "missing.json"))
        monkeypatch.delenv("COMPOSER_MAX_OUTPUT_CHARS", raising=False)
        monkeypatch.delenv("COMPOSER_DEFAULT_MODE", raising=False)
        monkeypatch.delenv("COMPOSER_DETECT_SCRIPT_ERRORS", raising=False)
        settings = load_settings()
        assert settings.max_output_chars == DEFAULT_MAX_OUTPUT_CHARS
        assert settings.default_mode == ScriptMode.collection
        assert settings.detect_script_errors is False

    def test_options_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        opts = tmp_path / "options.json"
        opts.write_text(json.dumps({"max_output_chars": 10, "default_mode": "ad"}))
        monkeypatch.setenv("COMPOSER_OPTIONS_PATH", str(opts))
        monkeypatch.setenv("COMPOSER_DEFAULT_MODE", "freeform")
        settings = load_settings()
        assert settings.max_output_chars == 10
        assert settings.default_mode == ScriptMode.ad

    def test_env_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COMPOSER_OPTIONS_PATH", str(tmp_path / "missing.json"))
        monkeypatch.setenv("COMPOSER_MAX_OUTPUT_CHARS", "1000")
        monkeypatch.setenv("COMPOSER_DEFAULT_MODE", "batchcollection")
        monkeypatch.setenv("COMPOSER_DETECT_SCRIPT_ERRORS", "True")
        settings = load_settings()
        assert settings.max_output_chars == 1000
        assert settings.default_mode == ScriptMode.batchcollection
        assert settings.detect_script_errors is True

    def test_invalid_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ComposerSettings(max_output_chars=0)
