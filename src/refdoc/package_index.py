from __future__ import annotations

from typing import TYPE_CHECKING

from refdoc.transform import LANGS
from refdoc.types import IndexReferenceDict

if TYPE_CHECKING:
    from collections.abc import Sequence

    from refdoc.types import ItemDict, PackageIndexDict


def build_package_index(primary_items: Sequence[ItemDict], package: str) -> PackageIndexDict:
    """Landing page listing every document's primary entry, in emission order."""
    references = list[IndexReferenceDict]()
    seen = set[str]()
    for item in primary_items:
        if item["uid"] in seen:
            continue
        seen.add(item["uid"])
        references.append({"uid": item["uid"], "name": item["name"], "type": item["type"]})

    package_item: ItemDict = {
        "uid": package,
        "name": package,
        "langs": list(LANGS),
        "type": "package",
        "summary": "",
        "children": [ref["uid"] for ref in references],
    }
    return {"items": [package_item], "references": references}
