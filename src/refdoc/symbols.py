"""Symbol tree and the run-scoped symbol table."""

from __future__ import annotations

import dataclasses
import re
from typing import TYPE_CHECKING

from refdoc import exceptions
from refdoc.types import SymbolKind

if TYPE_CHECKING:
    from collections.abc import Iterator

# Inline reference marker: @ref:<target>!<text as written>@
REFERENCE_TOKEN = re.compile(r"@ref:(?P<target>[^!@\s]+)!(?P<text>[^@]*)@")


def make_token(target: str | int, text: str) -> str:
    """Build the inline marker for a reference to ``target`` written as ``text``."""
    return f"@ref:{target}!{text}@"


def strip_tokens(text: str) -> str:
    """Replace every marker with its written text."""
    return REFERENCE_TOKEN.sub(lambda m: m["text"], text)


@dataclasses.dataclass
class Parameter:
    name: str
    type: str = ""
    description: str = ""
    optional: bool = False


@dataclasses.dataclass
class Syntax:
    """Declaration syntax; type texts may contain reference markers."""

    content: str
    parameters: list[Parameter] = dataclasses.field(default_factory=list)
    type_parameters: list[Parameter] = dataclasses.field(default_factory=list)
    return_type: str | None = None
    return_description: str = ""


@dataclasses.dataclass
class SourceLocation:
    path: str
    line: int


@dataclasses.dataclass
class Symbol:
    """A documentable declaration and the symbols it owns.

    Only ``children`` are ownership edges. Inheritance and type usage live in
    the text fields as reference markers and are resolved by table lookup.
    """

    uid: str
    name: str
    kind: SymbolKind
    package: str
    parent: str | None = None
    source_id: int | None = None
    children: list[Symbol] = dataclasses.field(default_factory=list)
    summary: str = ""
    remarks: str = ""
    deprecated: str | None = None
    examples: list[str] = dataclasses.field(default_factory=list)
    syntax: Syntax | None = None
    extends: list[str] = dataclasses.field(default_factory=list)
    implements: list[str] = dataclasses.field(default_factory=list)
    numeric_value: str | None = None
    is_static: bool = False
    is_optional: bool = False
    source: SourceLocation | None = None

    @property
    def is_container(self) -> bool:
        return self.kind.is_container

    @property
    def full_name(self) -> str:
        """uid without the package prefix."""
        return self.uid.removeprefix(f"{self.package}.")

    def walk(self) -> Iterator[Symbol]:
        """Yield this symbol and all descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def iter_type_texts(self) -> Iterator[str]:
        """Yield every text field that may carry reference markers."""
        if self.syntax is not None:
            yield self.syntax.content
            for param in self.syntax.parameters:
                yield param.type
            for param in self.syntax.type_parameters:
                yield param.type
            if self.syntax.return_type is not None:
                yield self.syntax.return_type
        yield from self.extends
        yield from self.implements


class SymbolTable:
    """uid -> Symbol mapping for one run, with extractor ids as aliases.

    Populated once by the parser, then only read.
    """

    def __init__(self) -> None:
        self._by_uid: dict[str, Symbol] = {}
        self._uid_by_source_id: dict[str, str] = {}

    def register(self, symbol: Symbol) -> None:
        """Add a symbol, raising DuplicateSymbolError if its uid is taken."""
        if symbol.uid in self._by_uid:
            raise exceptions.DuplicateSymbolError(symbol.uid)
        self._by_uid[symbol.uid] = symbol
        # Overloads share the extractor id of their declaration; the first one wins
        if symbol.source_id is not None:
            self._uid_by_source_id.setdefault(str(symbol.source_id), symbol.uid)

    def lookup(self, target: str) -> Symbol | None:
        """Find a symbol by extractor id, falling back to uid."""
        uid = self._uid_by_source_id.get(target, target)
        return self._by_uid.get(uid)

    def get(self, uid: str) -> Symbol | None:
        return self._by_uid.get(uid)

    def __contains__(self, uid: object) -> bool:
        return uid in self._by_uid

    def __len__(self) -> int:
        return len(self._by_uid)

    def uids(self) -> list[str]:
        return list(self._by_uid)
