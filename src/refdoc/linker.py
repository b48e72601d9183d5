from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pygtrie import Trie

from refdoc import writer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from refdoc.transform import FlatDocument

logger = logging.getLogger(__name__)

# Written next to the documents, so no document may take these names
_RESERVED_FILES = (writer.INDEX_FILE, writer.TOC_FILE)


def _key(filename: str) -> tuple[str, ...]:
    """Hierarchy key of a filename; case-folded so case-insensitive disks can't clash."""
    return tuple(filename.lower().split("."))


class FilenameRegistry:
    """Tracks which uids claimed which output filename.

    Documents are claimed in emission order. The first claim of a key keeps
    its filename; later claims of the same key are renamed to the first free
    ``<filename>-<kind>`` or ``<filename>-<kind>-<n>``. The package index and
    TOC filenames are claimed up front.
    """

    def __init__(self) -> None:
        self._claims: Trie[list[str]] = Trie()
        for reserved in _RESERVED_FILES:
            self._claims[_key(reserved.removesuffix(".yml"))] = [reserved]

    def claim(self, document: FlatDocument) -> str:
        """Register ``document`` and return its final filename, renaming it on collision."""
        key = _key(document.filename)
        if key not in self._claims:
            self._claims[key] = [document.uid]
            return document.filename

        claimants = self._claims[key]
        if document.uid in claimants:
            return document.filename
        claimants.append(document.uid)

        original = document.filename
        document.filename = self._free_filename(original, document.primary.get("type", "item"))
        self._claims[_key(document.filename)] = [document.uid]
        logger.warning(
            f"'{document.uid}' collides with '{claimants[0]}' on {original}.yml, "
            + f"writing it to {document.filename}.yml"
        )
        return document.filename

    def _free_filename(self, filename: str, kind: str) -> str:
        candidate = f"{filename}-{kind}"
        counter = 2
        while _key(candidate) in self._claims:
            candidate = f"{filename}-{kind}-{counter}"
            counter += 1
        return candidate

    def collisions(self) -> dict[str, list[str]]:
        """Hierarchy keys claimed by more than one uid."""
        return {
            ".".join(key): list(uids)
            for key, uids in self._claims.items()
            if len(uids) > 1
        }


def link_inner_classes(
    documents: Sequence[FlatDocument], registry: FilenameRegistry
) -> None:
    """Claim every document's filename in order so none overwrites another."""
    for document in documents:
        registry.claim(document)


def link_module_children(documents: Sequence[FlatDocument]) -> None:
    """Re-attach every flattened container to its owner's entry.

    Owners are modules and namespaces, and also classes or interfaces that hold
    nested types through declaration merging.
    """
    by_uid = {document.uid: document for document in documents}
    for document in documents:
        parent_uid = document.primary.get("parent")
        if parent_uid is None or parent_uid not in by_uid:
            continue
        parent = by_uid[parent_uid].primary
        children = parent.setdefault("children", [])
        if document.uid not in children:
            children.append(document.uid)
