"""Composer service options."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from composer.validator.models import ScriptMode

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT_CHARS = 5_000_000


class ComposerSettings(BaseModel):
    """Runtime options for the validation service."""

    max_output_chars: int = Field(DEFAULT_MAX_OUTPUT_CHARS, gt=0)
    default_mode: ScriptMode = ScriptMode.collection
    detect_script_errors: bool = False


def load_settings() -> ComposerSettings:
    """Load options from /data/options.json or env fallback."""
    opts_path = os.environ.get("COMPOSER_OPTIONS_PATH", "/data/options.json")
    if Path(opts_path).exists():
        logger.info("Loading options from %s", opts_path)
        return ComposerSettings(**json.loads(Path(opts_path).read_text()))
    return ComposerSettings(
        max_output_chars=int(
            os.environ.get("COMPOSER_MAX_OUTPUT_CHARS", str(DEFAULT_MAX_OUTPUT_CHARS))
        ),
        default_mode=os.environ.get("COMPOSER_DEFAULT_MODE", ScriptMode.collection.value),
        detect_script_errors=os.environ.get("COMPOSER_DETECT_SCRIPT_ERRORS", "")
        .lower()
        in ("1", "true", "yes"),
    )
