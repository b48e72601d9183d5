from __future__ import annotations

import json
import pathlib
import sys
from typing import Any

import click.testing
import pytest

from refdoc.config import models

# Add tests directory to sys.path so helpers.py can be imported
_tests_dir = pathlib.Path(__file__).parent
if str(_tests_dir) not in sys.path:
    sys.path.insert(0, str(_tests_dir))

import helpers  # noqa: E402


@pytest.fixture
def runner() -> click.testing.CliRunner:
    """Create a CLI runner for testing."""
    return click.testing.CliRunner()


@pytest.fixture
def config() -> models.ConverterConfig:
    return models.ConverterConfig()


@pytest.fixture
def scenario() -> dict[str, Any]:
    return helpers.scenario_model()


@pytest.fixture
def write_model(tmp_path: pathlib.Path):
    """Write a model dict to a JSON file and return its path."""

    def _write(model: object, name: str = "api.json") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(json.dumps(model))
        return path

    return _write
