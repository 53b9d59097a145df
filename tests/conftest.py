"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add script_composer/ to Python path so `from composer.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "script_composer"))

import pytest

os.environ["COMPOSER_DEV_MODE"] = "true"

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def ad_output(fixtures_dir: Path) -> str:
    return (fixtures_dir / "ad_output.txt").read_text()


@pytest.fixture
def batch_output(fixtures_dir: Path) -> str:
    return (fixtures_dir / "batch_output.txt").read_text()


@pytest.fixture
def batch_json_output(fixtures_dir: Path) -> str:
    return (fixtures_dir / "batch_output.json").read_text()
