from __future__ import annotations

import pytest

import refdoc
from refdoc import pipeline, yaml_config
from refdoc.config import models


def test_lazy_exports() -> None:
    assert refdoc.convert is pipeline.convert
    assert refdoc.ConverterConfig is models.ConverterConfig
    assert "run" in dir(refdoc)


def test_unknown_attribute() -> None:
    with pytest.raises(AttributeError, match="no attribute 'missing'"):
        refdoc.missing  # pyright: ignore[reportAttributeAccessIssue]  # noqa: B018


def test_dump_keeps_insertion_order() -> None:
    text = yaml_config.dump({"b": 1, "a": [{"z": "x", "y": "ü"}]})

    assert text == "b: 1\na:\n- z: x\n  y: ü\n"


def test_dump_header() -> None:
    assert yaml_config.dump({"a": 1}, header=True) == "### YamlMime:UniversalReference\na: 1\n"
