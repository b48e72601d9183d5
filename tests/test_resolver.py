from __future__ import annotations

from typing import Any

import pytest
from helpers import intrinsic, method, node, project, ref

from refdoc import parser, resolver
from refdoc.config import models
from refdoc.symbols import Symbol, SymbolTable
from refdoc.types import ResolutionStatus


def _parse(model: dict[str, Any]) -> tuple[list[Symbol], SymbolTable]:
    table = SymbolTable()
    return parser.parse_tree(model, table, models.ConverterConfig()), table


def test_forward_reference_resolves(scenario: dict[str, Any]) -> None:
    roots, table = _parse(scenario)

    references = resolver.resolve_ids(roots[0], table)

    target = references["@ref:5!B@"]
    assert target.resolved
    assert target.uid == "pkg.N.B"
    assert target.name == "B"


def test_reference_into_sibling_root() -> None:
    model = project(
        "pkg",
        node("First", "Namespace", 1, node("A", "Class", 2, method("m", 3, ref("Z", 21)))),
        node("Second", "Namespace", 20, node("Z", "Class", 21)),
    )
    roots, table = _parse(model)

    references = resolver.resolve_ids(roots[0], table)

    assert references["@ref:21!Z@"].uid == "pkg.Second.Z"


def test_missing_target_is_unresolved_not_an_error() -> None:
    model = project("pkg", node("N", "Namespace", 1, node("A", "Class", 2, method("m", 3, ref("Gone", 999)))))
    roots, table = _parse(model)

    references = resolver.resolve_ids(roots[0], table)

    target = references["@ref:999!Gone@"]
    assert target.status is ResolutionStatus.UNRESOLVED
    assert target.uid is None
    assert target.name == "Gone"


def test_reference_map_is_read_only(scenario: dict[str, Any]) -> None:
    roots, table = _parse(scenario)
    references = resolver.resolve_ids(roots[0], table)

    with pytest.raises(TypeError):
        references["x"] = references["@ref:5!B@"]  # pyright: ignore[reportIndexIssue]


def test_tree_without_markers_gives_empty_map() -> None:
    model = project("pkg", node("N", "Namespace", 1, method("f", 2, intrinsic("void"), kind="Function")))
    roots, table = _parse(model)

    assert dict(resolver.resolve_ids(roots[0], table)) == {}


_REFERENCES = {
    "@ref:5!B@": resolver.ReferenceTarget(
        token="@ref:5!B@", name="B", status=ResolutionStatus.RESOLVED, uid="pkg.N.B"
    ),
    "@ref:9!Gone@": resolver.ReferenceTarget(
        token="@ref:9!Gone@", name="Gone", status=ResolutionStatus.UNRESOLVED
    ),
}


@pytest.mark.parametrize(
    ("text", "link", "expected"),
    [
        pytest.param("@ref:5!B@", True, "<xref:pkg.N.B>", id="linked"),
        pytest.param("m(): @ref:5!B@", False, "m(): B", id="plain"),
        pytest.param("@ref:5!B@[]", True, "<xref:pkg.N.B>[]", id="linked_in_array"),
        pytest.param("@ref:9!Gone@", True, "Gone", id="unresolved"),
        pytest.param("@ref:7!Other@ | string", True, "Other | string", id="unknown_marker"),
        pytest.param("string", True, "string", id="no_marker"),
    ],
)
def test_substitute(text: str, link: bool, expected: str) -> None:
    assert resolver.substitute(text, _REFERENCES, link=link) == expected
