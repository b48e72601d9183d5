from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, cast

from refdoc import exceptions, type_text
from refdoc.symbols import Parameter, SourceLocation, Symbol, Syntax
from refdoc.types import SymbolKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from refdoc.config.models import ConverterConfig
    from refdoc.symbols import SymbolTable
    from refdoc.types import TypeDocComment, TypeDocNode

logger = logging.getLogger(__name__)

_KIND_BY_NAME: dict[str, SymbolKind] = {
    "External module": SymbolKind.MODULE,
    "Module": SymbolKind.MODULE,
    "Namespace": SymbolKind.NAMESPACE,
    "Class": SymbolKind.CLASS,
    "Interface": SymbolKind.INTERFACE,
    "Enumeration": SymbolKind.ENUM,
    "Enumeration member": SymbolKind.FIELD,
    "Method": SymbolKind.METHOD,
    "Function": SymbolKind.FUNCTION,
    "Constructor": SymbolKind.CONSTRUCTOR,
    "Property": SymbolKind.PROPERTY,
    "Accessor": SymbolKind.PROPERTY,
    "Variable": SymbolKind.VARIABLE,
    "Type alias": SymbolKind.TYPE_ALIAS,
    "Event": SymbolKind.EVENT,
}

# Numeric ReflectionKind flags for models that omit kindString
_KIND_BY_FLAG: dict[int, SymbolKind] = {
    2: SymbolKind.MODULE,
    4: SymbolKind.NAMESPACE,
    8: SymbolKind.ENUM,
    16: SymbolKind.FIELD,
    32: SymbolKind.VARIABLE,
    64: SymbolKind.FUNCTION,
    128: SymbolKind.CLASS,
    256: SymbolKind.INTERFACE,
    512: SymbolKind.CONSTRUCTOR,
    1024: SymbolKind.PROPERTY,
    2048: SymbolKind.METHOD,
    262144: SymbolKind.PROPERTY,
    2097152: SymbolKind.TYPE_ALIAS,
}


@dataclasses.dataclass
class _CommentInfo:
    summary: str = ""
    remarks: str = ""
    returns: str = ""
    deprecated: str | None = None
    examples: list[str] = dataclasses.field(default_factory=list)


@dataclasses.dataclass(frozen=True)
class _ParseContext:
    package: str
    table: SymbolTable
    config: ConverterConfig


def symbol_kind(node: TypeDocNode) -> SymbolKind | None:
    """Map an extractor node to a symbol kind, or None if it is not documented."""
    if (kind_string := node.get("kindString")) is not None:
        return _KIND_BY_NAME.get(kind_string)
    kind = node.get("kind")
    if isinstance(kind, int) and not isinstance(kind, bool):
        return _KIND_BY_FLAG.get(kind)
    return None


def _clean_name(name: str) -> str:
    """Drop the quotes the extractor puts around file module names."""
    if len(name) >= 2 and name[0] == name[-1] and name[0] in "\"'":
        return name[1:-1]
    return name


def _parts_text(parts: Sequence[dict[str, Any]] | None) -> str:
    return "".join(str(p.get("text", "")) for p in parts or []).strip()


def _read_comment(comment: TypeDocComment | None) -> _CommentInfo:
    """Collect summary, remarks and tags from legacy or current comment shapes."""
    info = _CommentInfo()
    if not comment:
        return info

    info.summary = (comment.get("shortText") or _parts_text(comment.get("summary"))).strip()
    info.remarks = (comment.get("text") or "").strip()
    info.returns = (comment.get("returns") or "").strip()

    tags = [(t.get("tag", ""), str(t.get("text", "")).strip()) for t in comment.get("tags") or []]
    tags += [
        (str(t.get("tag", "")).removeprefix("@"), _parts_text(t.get("content")))
        for t in comment.get("blockTags") or []
    ]
    for tag, text in tags:
        match tag.lower():
            case "deprecated":
                info.deprecated = text
            case "example":
                info.examples.append(text)
            case "returns" | "return":
                info.returns = info.returns or text
            case "remarks":
                info.remarks = info.remarks or text
            case _:
                pass
    return info


def _check_node(node: object, where: str) -> TypeDocNode:
    if not isinstance(node, dict):
        raise exceptions.MalformedInputError(
            f"Expected an object at {where}, got {type(node).__name__}"
        )
    name = cast("dict[str, Any]", node).get("name")
    if not isinstance(name, str) or not name:
        raise exceptions.MalformedInputError(f"Node at {where} has no name")
    return cast("TypeDocNode", node)


def _children(node: TypeDocNode, where: str) -> list[TypeDocNode]:
    children = node.get("children")
    if children is None:
        return []
    if not isinstance(children, list):
        raise exceptions.MalformedInputError(f"'children' of {where} must be a list")
    return children


def _source(node: TypeDocNode) -> SourceLocation | None:
    sources = node.get("sources") or []
    if not sources:
        return None
    first = sources[0]
    return SourceLocation(path=str(first.get("fileName", "")), line=int(first.get("line", 0)))


def _parameters(params: Sequence[TypeDocNode]) -> list[Parameter]:
    result = list[Parameter]()
    for param in params:
        flags = param.get("flags") or {}
        result.append(
            Parameter(
                name=str(param.get("name", "")),
                type=type_text.render_type(param.get("type")),
                description=_read_comment(param.get("comment")).summary,
                optional=bool(flags.get("isOptional")) or "defaultValue" in param,
            )
        )
    return result


def _type_parameters(node: TypeDocNode) -> list[TypeDocNode]:
    return list(node.get("typeParameters") or node.get("typeParameter") or [])


def _heritage(types: Sequence[dict[str, Any]] | None) -> list[str]:
    return [type_text.render_type(t) for t in types or []]


def _declaration_syntax(node: TypeDocNode, kind: SymbolKind, name: str) -> Syntax | None:
    """Syntax for containers and value-like members."""
    flags = node.get("flags") or {}
    type_params = _type_parameters(node)
    generics = type_text.render_type_parameters(type_params)
    static = "static " if flags.get("isStatic") else ""

    match kind:
        case SymbolKind.CLASS:
            abstract = "abstract " if flags.get("isAbstract") else ""
            content = f"{abstract}class {name}{generics}"
            if extends := _heritage(node.get("extendedTypes")):
                content += f" extends {', '.join(extends)}"
            if implements := _heritage(node.get("implementedTypes")):
                content += f" implements {', '.join(implements)}"
        case SymbolKind.INTERFACE:
            content = f"interface {name}{generics}"
            if extends := _heritage(node.get("extendedTypes")):
                content += f" extends {', '.join(extends)}"
        case SymbolKind.ENUM:
            content = f"enum {name}"
        case SymbolKind.TYPE_ALIAS:
            content = f"type {name}{generics} = {type_text.render_type(node.get('type'))}"
        case SymbolKind.FIELD:
            content = name
            if (value := _enum_value(node)) is not None:
                content += f" = {value}"
        case SymbolKind.PROPERTY | SymbolKind.EVENT | SymbolKind.VARIABLE:
            value_type = _value_type(node)
            optional = "?" if flags.get("isOptional") else ""
            if kind is SymbolKind.VARIABLE:
                prefix = "const " if flags.get("isConst") else "let "
            else:
                prefix = static + ("readonly " if flags.get("isReadonly") else "")
            return Syntax(content=f"{prefix}{name}{optional}: {value_type}", return_type=value_type)
        case _:
            return None

    return Syntax(
        content=content,
        type_parameters=_parameters(type_params),
    )


def _accessor_signature(node: TypeDocNode, key: str) -> TypeDocNode | None:
    # Older models store accessor signatures as one-element lists
    signature = cast("dict[str, Any]", node).get(key)
    if isinstance(signature, list):
        return signature[0] if signature else None
    return cast("TypeDocNode | None", signature)


def _value_type(node: TypeDocNode) -> str:
    if node.get("type"):
        return type_text.render_type(node.get("type"))
    if getter := _accessor_signature(node, "getSignature"):
        return type_text.render_type(getter.get("type"))
    if setter := _accessor_signature(node, "setSignature"):
        params = setter.get("parameters") or []
        if params:
            return type_text.render_type(params[0].get("type"))
    return type_text.render_type(None)


def _enum_value(node: TypeDocNode) -> str | None:
    if "defaultValue" in node:
        return str(node["defaultValue"])
    member_type = node.get("type") or {}
    if member_type.get("type") == "literal" and member_type.get("value") is not None:
        return str(member_type["value"])
    return None


def _callable_syntax(
    signature: TypeDocNode, kind: SymbolKind, name: str, owner: str, *, static: bool
) -> Syntax:
    params = signature.get("parameters") or []
    param_text = type_text.render_parameters(params)
    type_params = _type_parameters(signature)
    generics = type_text.render_type_parameters(type_params)

    if kind is SymbolKind.CONSTRUCTOR:
        content = f"new {owner}({param_text})"
        return_type = None
    else:
        return_type = type_text.render_type(signature.get("type"))
        prefix = "function " if kind is SymbolKind.FUNCTION else ""
        if static:
            prefix = "static " + prefix
        content = f"{prefix}{name}{generics}({param_text}): {return_type}"

    return Syntax(
        content=content,
        parameters=_parameters(params),
        type_parameters=_parameters(type_params),
        return_type=return_type,
    )


def _new_symbol(
    node: TypeDocNode,
    kind: SymbolKind,
    name: str,
    uid: str,
    parent: Symbol | None,
    ctx: _ParseContext,
    comment: TypeDocComment | None = None,
) -> Symbol:
    flags = node.get("flags") or {}
    info = _read_comment(comment if comment is not None else node.get("comment"))
    return Symbol(
        uid=uid,
        name=name,
        kind=kind,
        package=ctx.package,
        parent=parent.uid if parent is not None else None,
        source_id=node.get("id"),
        summary=info.summary,
        remarks=info.remarks,
        deprecated=info.deprecated,
        examples=info.examples,
        is_static=bool(flags.get("isStatic")),
        is_optional=bool(flags.get("isOptional")),
        source=_source(node),
    )


def _unique_uid(uid: str, kind: SymbolKind, lifted: str | None, ctx: _ParseContext) -> str:
    """Return ``uid``, or a qualified variant when it is already declared.

    ``lifted`` is the uid the symbol would have inside the transparent module it
    was declared in; it is tried first. Remaining clashes, such as a class and a
    namespace merged under one name, are qualified with the kind and a counter.
    """
    if uid not in ctx.table:
        return uid

    if lifted is not None and lifted not in ctx.table:
        unique = lifted
    else:
        unique = f"{uid}-{kind}"
        counter = 2
        while unique in ctx.table:
            unique = f"{uid}-{kind}-{counter}"
            counter += 1
    logger.warning(f"'{uid}' is declared more than once, registering the {kind} as '{unique}'")
    return unique


def _parse_callable(
    node: TypeDocNode,
    kind: SymbolKind,
    name: str,
    parent: Symbol | None,
    module: str | None,
    ctx: _ParseContext,
) -> list[Symbol]:
    """One symbol per signature; overloads get a parameter-type suffix."""
    prefix = parent.uid if parent else ctx.package
    owner = parent.name if parent else name
    signatures = node.get("signatures") or [cast("TypeDocNode", {"name": name})]

    result = list[Symbol]()
    seen = set[str]()
    for index, signature in enumerate(signatures):
        suffix = ""
        if len(signatures) > 1:
            suffix = type_text.overload_suffix(signature)
            if suffix in seen:
                suffix = f"{suffix}_{index}"
            seen.add(suffix)
        lifted = f"{prefix}.{module}.{name}{suffix}" if module is not None else None
        uid = _unique_uid(f"{prefix}.{name}{suffix}", kind, lifted, ctx)

        comment = signature.get("comment") or node.get("comment")
        symbol = _new_symbol(node, kind, name, uid, parent, ctx, comment=comment)
        static = bool((signature.get("flags") or {}).get("isStatic")) or symbol.is_static
        symbol.syntax = _callable_syntax(signature, kind, name, owner, static=static)
        symbol.syntax.return_description = _read_comment(comment).returns
        ctx.table.register(symbol)
        result.append(symbol)
    return result


def _parse_declaration(
    node: TypeDocNode,
    name: str,
    parent: Symbol | None,
    module: str | None,
    ctx: _ParseContext,
    where: str,
) -> list[Symbol]:
    kind = symbol_kind(node)
    if kind is None:
        logger.debug(f"Skipping {where}: not a documented kind")
        return []
    if (node.get("flags") or {}).get("isPrivate"):
        logger.debug(f"Skipping private {where}")
        return []

    if kind is SymbolKind.MODULE and not ctx.config.group_by_module:
        # Module is transparent: its members belong to the module's parent
        return [
            symbol
            for child in _children(node, where)
            for symbol in _parse_node(child, parent, ctx, where, module=name)
        ]

    if kind.is_callable:
        return _parse_callable(node, kind, name, parent, module, ctx)

    prefix = parent.uid if parent else ctx.package
    lifted = f"{prefix}.{module}.{name}" if module is not None else None
    uid = _unique_uid(f"{prefix}.{name}", kind, lifted, ctx)
    symbol = _new_symbol(node, kind, name, uid, parent, ctx)
    symbol.syntax = _declaration_syntax(node, kind, name)
    symbol.extends = _heritage(node.get("extendedTypes"))
    symbol.implements = _heritage(node.get("implementedTypes"))
    if kind is SymbolKind.FIELD:
        symbol.numeric_value = _enum_value(node)
    ctx.table.register(symbol)

    for child in _children(node, where):
        symbol.children.extend(_parse_node(child, symbol, ctx, where))
    return [symbol]


def _parse_node(
    node: object,
    parent: Symbol | None,
    ctx: _ParseContext,
    where: str,
    module: str | None = None,
) -> list[Symbol]:
    checked = _check_node(node, where)
    name = _clean_name(checked["name"])
    where = f"{where}/{name}"
    try:
        return _parse_declaration(checked, name, parent, module, ctx, where)
    except (AttributeError, TypeError, ValueError, KeyError, IndexError) as e:
        raise exceptions.MalformedInputError(
            f"Unexpected node shape at {where}: {type(e).__name__}: {e}"
        ) from e


def package_name(root: object) -> str:
    """Name of the package the model documents (the root node's name)."""
    return _check_node(root, "root")["name"]


def parse_tree(root: object, table: SymbolTable, config: ConverterConfig) -> list[Symbol]:
    """Walk the model once, registering every symbol, and return the root symbols.

    The root node itself is the project; its children become root symbols.

    Raises:
        MalformedInputError: If the model is not a tree of named objects.
    """
    ctx = _ParseContext(package=package_name(root), table=table, config=config)
    checked = cast("TypeDocNode", root)

    roots = list[Symbol]()
    for child in _children(checked, ctx.package):
        roots.extend(_parse_node(child, None, ctx, ctx.package))

    logger.info(f"Parsed {len(table)} symbols in {len(roots)} root trees from {ctx.package}")
    return roots
