from __future__ import annotations

import dataclasses
import logging
import types
from typing import TYPE_CHECKING

from refdoc import symbols
from refdoc.types import ResolutionStatus

if TYPE_CHECKING:
    import re
    from collections.abc import Mapping

    from refdoc.symbols import Symbol, SymbolTable

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ReferenceTarget:
    """What a reference marker points at.

    ``uid`` is None when the target is not in the symbol table; ``name`` is then
    the text as written in source.
    """

    token: str
    name: str
    status: ResolutionStatus
    uid: str | None = None

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


# Read-only per-root map: marker text -> target
ReferenceMap = types.MappingProxyType[str, ReferenceTarget]


def _resolve_token(token: str, target: str, text: str, table: SymbolTable) -> ReferenceTarget:
    symbol = table.lookup(target)
    if symbol is None:
        logger.debug(f"Unresolved reference to '{text}' (target {target})")
        return ReferenceTarget(token=token, name=text, status=ResolutionStatus.UNRESOLVED)
    return ReferenceTarget(
        token=token, name=symbol.name, status=ResolutionStatus.RESOLVED, uid=symbol.uid
    )


def resolve_ids(root: Symbol, table: SymbolTable) -> ReferenceMap:
    """Resolve every reference marker in ``root``'s tree against the complete table.

    Must run after the whole model has been parsed so forward references and
    references into sibling roots resolve. A missing target is not an error.
    """
    mapping = dict[str, ReferenceTarget]()
    for symbol in root.walk():
        for text in symbol.iter_type_texts():
            for match in symbols.REFERENCE_TOKEN.finditer(text):
                token = match.group(0)
                if token not in mapping:
                    mapping[token] = _resolve_token(token, match["target"], match["text"], table)

    unresolved = sum(1 for t in mapping.values() if not t.resolved)
    logger.debug(
        f"Resolved {len(mapping) - unresolved}/{len(mapping)} references under {root.uid}"
    )
    return types.MappingProxyType(mapping)


def substitute(text: str, references: Mapping[str, ReferenceTarget], *, link: bool) -> str:
    """Replace markers in ``text``.

    Resolved markers become ``<xref:UID>`` when ``link`` is set (type fields) or
    the target's name otherwise (code content). Unresolved or unknown markers
    become their written text unchanged.
    """

    def _replace(match: re.Match[str]) -> str:
        target = references.get(match.group(0))
        if target is None or not target.resolved:
            return match["text"]
        return f"<xref:{target.uid}>" if link else target.name

    return symbols.REFERENCE_TOKEN.sub(_replace, text)
