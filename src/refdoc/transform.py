from __future__ import annotations

import dataclasses
import logging
import posixpath
from typing import TYPE_CHECKING

from refdoc import resolver, symbols
from refdoc.types import ReferenceDict, ResolutionStatus, SymbolKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from refdoc.config.models import RepoConfig
    from refdoc.resolver import ReferenceTarget
    from refdoc.symbols import Parameter, Symbol
    from refdoc.types import (
        DocumentDict,
        ItemDict,
        ParameterDict,
        SourceDict,
        SyntaxDict,
    )

logger = logging.getLogger(__name__)

LANGS = ["typeScript"]


@dataclasses.dataclass
class FlatDocument:
    """One output file: a container entry followed by its direct leaf members."""

    uid: str
    filename: str
    items: list[ItemDict]
    references: list[ReferenceDict] = dataclasses.field(default_factory=list)

    @property
    def primary(self) -> ItemDict:
        return self.items[0]

    def to_dict(self) -> DocumentDict:
        return {"items": self.items, "references": self.references}


def derive_filename(uid: str, package: str) -> str:
    """File stem for a document: no package prefix, no overload suffix, one level."""
    name = uid.removeprefix(f"{package}.")
    name = name.split("(", 1)[0]
    return name.replace("\\", ".").replace("/", ".")


def denotes_constructor(symbol: Symbol) -> bool:
    if symbol.kind is SymbolKind.CONSTRUCTOR:
        return True
    return symbol.uid.split("(", 1)[0].rsplit(".", 1)[-1] == "constructor"


def _source(symbol: Symbol, repo: RepoConfig | None) -> SourceDict | None:
    if symbol.source is None or repo is None:
        return None
    relative = symbol.source.path.replace("\\", "/").removeprefix("./")
    remote_path = posixpath.join(repo.base_path, relative) if repo.base_path else relative
    return {
        "path": relative,
        "startLine": symbol.source.line,
        "remote": {"path": remote_path, "branch": repo.branch, "repo": repo.repo},
    }


def _parameter_dicts(
    params: list[Parameter], references: Mapping[str, ReferenceTarget]
) -> list[ParameterDict]:
    result = list[ParameterDict]()
    for param in params:
        entry: ParameterDict = {
            "id": param.name,
            "type": [resolver.substitute(param.type, references, link=True)],
            "description": param.description,
        }
        if param.optional:
            entry["optional"] = True
        result.append(entry)
    return result


def _syntax_dict(symbol: Symbol, references: Mapping[str, ReferenceTarget]) -> SyntaxDict | None:
    syntax = symbol.syntax
    if syntax is None:
        return None
    result: SyntaxDict = {"content": resolver.substitute(syntax.content, references, link=False)}
    if syntax.parameters:
        result["parameters"] = _parameter_dicts(syntax.parameters, references)
    if syntax.type_parameters:
        result["typeParameters"] = _parameter_dicts(syntax.type_parameters, references)
    if syntax.return_type is not None:
        result["return"] = {
            "type": [resolver.substitute(syntax.return_type, references, link=True)],
            "description": syntax.return_description,
        }
    return result


def to_item(
    symbol: Symbol,
    references: Mapping[str, ReferenceTarget],
    repo: RepoConfig | None = None,
) -> ItemDict:
    """Convert a symbol to an output entry, substituting reference markers."""
    item: ItemDict = {
        "uid": symbol.uid,
        "name": symbol.name,
        "fullName": symbol.full_name,
    }
    if symbol.parent is not None:
        item["parent"] = symbol.parent
    item["langs"] = list(LANGS)
    item["type"] = str(symbol.kind)
    item["summary"] = symbol.summary
    if symbol.remarks:
        item["remarks"] = symbol.remarks
    if symbol.deprecated is not None:
        item["deprecated"] = {"content": symbol.deprecated}
    if symbol.examples:
        item["example"] = list(symbol.examples)
    if (syntax := _syntax_dict(symbol, references)) is not None:
        item["syntax"] = syntax
    if symbol.extends:
        item["extends"] = [resolver.substitute(t, references, link=True) for t in symbol.extends]
    if symbol.implements:
        item["implements"] = [
            resolver.substitute(t, references, link=True) for t in symbol.implements
        ]
    if symbol.numeric_value is not None:
        item["numericValue"] = symbol.numeric_value
    if symbol.is_optional:
        item["optional"] = True
    if symbol.is_static:
        item["isStatic"] = True
    item["package"] = symbol.package
    if (source := _source(symbol, repo)) is not None:
        item["source"] = source
    return item


def _collect_references(
    members: list[Symbol], references: Mapping[str, ReferenceTarget]
) -> list[ReferenceDict]:
    """Every reference used by the document's entries, in first-use order."""
    result = list[ReferenceDict]()
    seen = set[str]()
    for symbol in members:
        for text in symbol.iter_type_texts():
            for match in symbols.REFERENCE_TOKEN.finditer(text):
                target = references.get(match.group(0))
                entry: ReferenceDict
                if target is not None and target.uid is not None:
                    key = f"uid:{target.uid}"
                    entry = {
                        "uid": target.uid,
                        "name": target.name,
                        "status": str(ResolutionStatus.RESOLVED),
                    }
                else:
                    key = f"text:{match['text']}"
                    entry = {"name": match["text"], "status": str(ResolutionStatus.UNRESOLVED)}
                if key not in seen:
                    seen.add(key)
                    result.append(entry)
    return result


def _flatten(
    container: Symbol,
    references: Mapping[str, ReferenceTarget],
    repo: RepoConfig | None,
    out: list[FlatDocument],
) -> None:
    members = [child for child in container.children if not child.is_container]
    primary = to_item(container, references, repo)
    primary["children"] = [member.uid for member in members]

    out.append(
        FlatDocument(
            uid=container.uid,
            filename=derive_filename(container.uid, container.package),
            items=[primary, *(to_item(m, references, repo) for m in members)],
            references=_collect_references([container, *members], references),
        )
    )

    for child in container.children:
        if child.is_container:
            _flatten(child, references, repo, out)


def post_transform(
    root: Symbol,
    references: Mapping[str, ReferenceTarget],
    *,
    repo: RepoConfig | None = None,
) -> list[FlatDocument]:
    """Flatten one root tree into documents, one per container, pre-order.

    Root-level constructors and root-level leaves produce no document.
    """
    if denotes_constructor(root):
        logger.debug(f"Skipping top-level constructor {root.uid}")
        return []
    if not root.is_container:
        logger.warning(f"Dropping top-level {root.kind} '{root.uid}': it has no owning container")
        return []

    documents = list[FlatDocument]()
    _flatten(root, references, repo, documents)
    return documents
