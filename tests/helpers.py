"""Test helpers for building extractor JSON models."""

from __future__ import annotations

from typing import Any


def node(
    name: str,
    kind: str,
    node_id: int | None = None,
    *children: dict[str, Any],
    **extra: Any,
) -> dict[str, Any]:
    """A declaration node; ``kind`` is the extractor's kindString."""
    result: dict[str, Any] = {"name": name, "kindString": kind}
    if node_id is not None:
        result["id"] = node_id
    if children:
        result["children"] = list(children)
    result.update(extra)
    return result


def project(name: str, *children: dict[str, Any]) -> dict[str, Any]:
    return {"id": 0, "name": name, "kind": 1, "children": list(children)}


def intrinsic(name: str) -> dict[str, Any]:
    return {"type": "intrinsic", "name": name}


def ref(name: str, target: int | None = None, *arguments: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {"type": "reference", "name": name}
    if target is not None:
        result["id"] = target
    if arguments:
        result["typeArguments"] = list(arguments)
    return result


def param(name: str, type_obj: dict[str, Any], **flags: bool) -> dict[str, Any]:
    result: dict[str, Any] = {"name": name, "kindString": "Parameter", "type": type_obj}
    if flags:
        result["flags"] = flags
    return result


def signature(
    name: str,
    returns: dict[str, Any] | None = None,
    *params: dict[str, Any],
    **extra: Any,
) -> dict[str, Any]:
    result: dict[str, Any] = {"name": name, "kindString": "Call signature"}
    if returns is not None:
        result["type"] = returns
    if params:
        result["parameters"] = list(params)
    result.update(extra)
    return result


def method(
    name: str,
    node_id: int,
    returns: dict[str, Any] | None = None,
    *params: dict[str, Any],
    kind: str = "Method",
) -> dict[str, Any]:
    """A callable node with a single signature."""
    return node(name, kind, node_id, signatures=[signature(name, returns, *params)])


def scenario_model() -> dict[str, Any]:
    """Namespace N holding classes A and B; A.m returns B."""
    return project(
        "pkg",
        node(
            "N",
            "Namespace",
            1,
            node("A", "Class", 2, method("m", 3, ref("B", 5))),
            node("B", "Class", 5),
        ),
    )
