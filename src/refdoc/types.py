from __future__ import annotations

import enum
from typing import Any, NotRequired, TypedDict


class SymbolKind(enum.StrEnum):
    """Kind of a documentable symbol, as written to the ``type`` field of an item."""

    MODULE = "module"
    NAMESPACE = "namespace"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    METHOD = "method"
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    PROPERTY = "property"
    VARIABLE = "variable"
    FIELD = "field"
    TYPE_ALIAS = "typealias"
    EVENT = "event"

    @property
    def is_container(self) -> bool:
        """Containers own children and get a document of their own."""
        return self in CONTAINER_KINDS

    @property
    def is_callable(self) -> bool:
        return self in (SymbolKind.METHOD, SymbolKind.FUNCTION, SymbolKind.CONSTRUCTOR)


CONTAINER_KINDS = frozenset(
    {
        SymbolKind.MODULE,
        SymbolKind.NAMESPACE,
        SymbolKind.CLASS,
        SymbolKind.INTERFACE,
        SymbolKind.ENUM,
    }
)


class ResolutionStatus(enum.StrEnum):
    """Outcome of looking up a reference token in the symbol table."""

    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


# --- Input model (extractor JSON) ---


class TypeDocComment(TypedDict, total=False):
    """Comment block attached to a declaration or signature."""

    shortText: str
    text: str
    returns: str
    tags: list[dict[str, str]]
    summary: list[dict[str, str]]
    blockTags: list[dict[str, Any]]


class TypeDocSource(TypedDict, total=False):
    fileName: str
    line: int
    character: int


class TypeDocNode(TypedDict, total=False):
    """Declaration, signature or parameter node in the extractor's JSON model.

    Only the fields refdoc reads are listed; anything else is ignored.
    """

    id: int
    name: str
    kind: int
    kindString: str
    flags: dict[str, bool]
    comment: TypeDocComment
    children: list[TypeDocNode]
    signatures: list[TypeDocNode]
    parameters: list[TypeDocNode]
    typeParameter: list[TypeDocNode]
    typeParameters: list[TypeDocNode]
    type: dict[str, Any]
    getSignature: TypeDocNode | list[TypeDocNode]
    setSignature: TypeDocNode | list[TypeDocNode]
    extendedTypes: list[dict[str, Any]]
    implementedTypes: list[dict[str, Any]]
    defaultValue: str
    sources: list[TypeDocSource]


# --- Output model (UniversalReference YAML) ---


class RemoteDict(TypedDict):
    path: str
    branch: str
    repo: str


class SourceDict(TypedDict):
    """Source location of an item, with an optional link into the hosted repository."""

    path: str
    startLine: int
    remote: NotRequired[RemoteDict]


class ParameterDict(TypedDict):
    id: str
    type: list[str]
    description: str
    optional: NotRequired[bool]


class ReturnDict(TypedDict):
    type: list[str]
    description: str


# Functional form because "return" is a keyword
SyntaxDict = TypedDict(
    "SyntaxDict",
    {
        "content": str,
        "parameters": list[ParameterDict],
        "typeParameters": list[ParameterDict],
        "return": ReturnDict,
    },
    total=False,
)


class ItemDict(TypedDict, total=False):
    """One entry of a flattened document."""

    uid: str
    name: str
    fullName: str
    parent: str
    children: list[str]
    langs: list[str]
    type: str
    summary: str
    remarks: str
    deprecated: dict[str, str]
    example: list[str]
    syntax: SyntaxDict
    extends: list[str]
    implements: list[str]
    numericValue: str
    optional: bool
    isStatic: bool
    package: str
    source: SourceDict


class ReferenceDict(TypedDict):
    """Reference descriptor listed at the bottom of a document."""

    name: str
    status: str
    uid: NotRequired[str]


class DocumentDict(TypedDict):
    items: list[ItemDict]
    references: list[ReferenceDict]


class IndexReferenceDict(TypedDict):
    uid: str
    name: str
    type: str


class PackageIndexDict(TypedDict):
    items: list[ItemDict]
    references: list[IndexReferenceDict]


class TocItem(TypedDict):
    """Navigation node; leaves omit ``items``."""

    name: str
    href: str
    uid: NotRequired[str]
    items: NotRequired[list[TocItem]]
