"""Render extractor type objects as TypeScript-like text with reference markers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from refdoc import symbols

if TYPE_CHECKING:
    from collections.abc import Sequence

    from refdoc.types import TypeDocNode

_FALLBACK = "any"

# Types that need parentheses when nested in an array or another operator
_COMPOUND = frozenset({"union", "intersection", "conditional", "function"})


def _target_id(type_obj: dict[str, Any]) -> int | None:
    """Extractor id of the referenced declaration, if the reference has one."""
    target = type_obj.get("id", type_obj.get("target"))
    if isinstance(target, int) and not isinstance(target, bool):
        return target
    return None


def _kind(type_obj: dict[str, Any]) -> str:
    if type_obj.get("type") == "reflection" and _declaration_signatures(type_obj):
        return "function"
    return str(type_obj.get("type", ""))


def _declaration_signatures(type_obj: dict[str, Any]) -> list[TypeDocNode]:
    declaration = type_obj.get("declaration") or {}
    return list(declaration.get("signatures") or [])


def _wrap(type_obj: dict[str, Any]) -> str:
    text = render_type(type_obj)
    if _kind(type_obj) in _COMPOUND:
        return f"({text})"
    return text


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, dict) and "value" in value:
        # bigint literals arrive as {"negative": bool, "value": "123"}
        sign = "-" if value.get("negative") else ""
        return f"{sign}{value['value']}n"
    return str(value)


def _render_reference(type_obj: dict[str, Any]) -> str:
    name = str(type_obj.get("name", _FALLBACK))
    target = _target_id(type_obj)
    text = symbols.make_token(target, name) if target is not None else name
    arguments = type_obj.get("typeArguments") or []
    if arguments:
        text += "<" + ", ".join(render_type(arg) for arg in arguments) + ">"
    return text


def _render_reflection(type_obj: dict[str, Any]) -> str:
    signatures = _declaration_signatures(type_obj)
    if signatures:
        return render_signature_type(signatures[0])

    declaration = type_obj.get("declaration") or {}
    members: list[str] = []
    for child in declaration.get("children") or []:
        optional = "?" if (child.get("flags") or {}).get("isOptional") else ""
        child_type = child.get("type")
        rendered = render_type(child_type) if child_type else _FALLBACK
        members.append(f"{child.get('name', '')}{optional}: {rendered}")
    for index in declaration.get("indexSignature") or []:
        if isinstance(index, dict):
            members.append(_render_index_signature(index))
    if not members:
        return "object"
    return "{ " + "; ".join(members) + " }"


def _render_index_signature(index: TypeDocNode) -> str:
    params = index.get("parameters") or []
    key = params[0] if params else {}
    key_type = render_type(key["type"]) if key.get("type") else "string"
    value_type = render_type(index["type"]) if index.get("type") else _FALLBACK
    return f"[{key.get('name', 'key')}: {key_type}]: {value_type}"


def render_type(type_obj: dict[str, Any] | None) -> str:
    """Render a type object; references with a target id become markers."""
    if not type_obj:
        return _FALLBACK

    match type_obj.get("type"):
        case "intrinsic" | "typeParameter" | "unknown" | "inferred":
            return str(type_obj.get("name", _FALLBACK))
        case "reference":
            return _render_reference(type_obj)
        case "array":
            return f"{_wrap(type_obj.get('elementType') or {})}[]"
        case "union":
            return " | ".join(render_type(t) for t in type_obj.get("types") or [])
        case "intersection":
            return " & ".join(_wrap(t) for t in type_obj.get("types") or [])
        case "tuple":
            elements = type_obj.get("elements") or type_obj.get("elementTypes") or []
            return "[" + ", ".join(render_type(t) for t in elements) + "]"
        case "named-tuple-member" | "namedTupleMember":
            optional = "?" if type_obj.get("isOptional") else ""
            return f"{type_obj.get('name', '')}{optional}: {render_type(type_obj.get('element'))}"
        case "stringLiteral":
            return json.dumps(str(type_obj.get("value", "")))
        case "literal":
            return _literal(type_obj.get("value"))
        case "reflection":
            return _render_reflection(type_obj)
        case "typeOperator":
            return f"{type_obj.get('operator', 'keyof')} {_wrap(type_obj.get('target') or {})}"
        case "indexedAccess":
            obj = _wrap(type_obj.get("objectType") or {})
            return f"{obj}[{render_type(type_obj.get('indexType'))}]"
        case "query":
            return f"typeof {render_type(type_obj.get('queryType'))}"
        case "conditional":
            return (
                f"{_wrap(type_obj.get('checkType') or {})} extends "
                + f"{render_type(type_obj.get('extendsType'))} ? "
                + f"{render_type(type_obj.get('trueType'))} : "
                + render_type(type_obj.get("falseType"))
            )
        case "predicate":
            prefix = "asserts " if type_obj.get("asserts") else ""
            name = type_obj.get("name", "value")
            target = type_obj.get("targetType")
            if target is None:
                return f"{prefix}{name}"
            return f"{prefix}{name} is {render_type(target)}"
        case "optional":
            return f"{_wrap(type_obj.get('elementType') or {})}?"
        case "rest":
            return f"...{_wrap(type_obj.get('elementType') or {})}"
        case "template-literal":
            head = type_obj.get("head", "")
            parts = [f"${{{render_type(t)}}}{s}" for t, s in type_obj.get("tail") or []]
            return "`" + head + "".join(parts) + "`"
        case _:
            return str(type_obj.get("name", _FALLBACK))


def render_parameter(param: TypeDocNode) -> str:
    flags = param.get("flags") or {}
    rest = "..." if flags.get("isRest") else ""
    optional = "?" if flags.get("isOptional") or "defaultValue" in param else ""
    return f"{rest}{param.get('name', '')}{optional}: {render_type(param.get('type'))}"


def render_parameters(params: Sequence[TypeDocNode]) -> str:
    return ", ".join(render_parameter(p) for p in params)


def render_type_parameters(type_params: Sequence[TypeDocNode]) -> str:
    """Render ``<T, U extends X>``; empty string when there are none."""
    if not type_params:
        return ""
    rendered: list[str] = []
    for tp in type_params:
        text = str(tp.get("name", ""))
        if tp.get("type"):
            text += f" extends {render_type(tp['type'])}"
        rendered.append(text)
    return "<" + ", ".join(rendered) + ">"


def render_signature_type(signature: TypeDocNode) -> str:
    """Render a call signature as a function type ``(a: T) => R``."""
    params = render_parameters(signature.get("parameters") or [])
    return f"({params}) => {render_type(signature.get('type'))}"


def overload_suffix(signature: TypeDocNode) -> str:
    """Parameter type list used to tell overloads apart, without markers."""
    types = [
        symbols.strip_tokens(render_type(p.get("type")))
        for p in signature.get("parameters") or []
    ]
    return "(" + ",".join(types) + ")"
