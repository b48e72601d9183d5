from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from refdoc.types import TocItem

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from refdoc.symbols import Symbol

logger = logging.getLogger(__name__)

INDEX_HREF = "index.yml"


def _toc_items(
    symbols: Sequence[Symbol],
    filenames: Mapping[str, str],
    alphabetical: bool,
) -> list[TocItem]:
    items = list[TocItem]()
    for symbol in symbols:
        if not symbol.is_container:
            continue
        filename = filenames.get(symbol.uid)
        if filename is None:
            logger.debug(f"No document for {symbol.uid}, leaving it out of the TOC")
            continue
        item: TocItem = {"name": symbol.name, "uid": symbol.uid, "href": f"{filename}.yml"}
        if children := _toc_items(symbol.children, filenames, alphabetical):
            item["items"] = children
        items.append(item)

    if alphabetical:
        # Stable, so equal names keep their input order
        items.sort(key=lambda i: i["name"])
    return items


def build_toc(
    roots: Sequence[Symbol],
    package: str,
    filenames: Mapping[str, str],
    *,
    alphabetical: bool = True,
) -> list[TocItem]:
    """Build the navigation tree from the pre-flattening snapshot.

    Args:
        roots: Root symbols as they were before flattening.
        package: Name of the top node, linked to the package index.
        filenames: Final filename of every written document, by uid.
        alphabetical: Sort siblings by name at every level; otherwise keep input order.

    Returns:
        A one-element list holding the package node.
    """
    package_node: TocItem = {"name": package, "href": INDEX_HREF}
    package_node["items"] = _toc_items(roots, filenames, alphabetical)
    return [package_node]
