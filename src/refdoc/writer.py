"""Write converted documents to disk.

Each file is written on its own; a failure part way leaves the files written
so far in place.
"""

from __future__ import annotations

import logging
import pathlib
from typing import TYPE_CHECKING

from refdoc import exceptions, yaml_config
from refdoc.types import TocItem

if TYPE_CHECKING:
    from collections.abc import Sequence

    from refdoc.transform import FlatDocument
    from refdoc.types import PackageIndexDict

logger = logging.getLogger(__name__)

INDEX_FILE = "index.yml"
TOC_FILE = "toc.yml"


def _write(path: pathlib.Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise exceptions.OutputWriteError(f"Error writing {path}: {e}") from e


def write_output(
    documents: Sequence[FlatDocument],
    index: PackageIndexDict,
    toc: list[TocItem],
    output_dir: pathlib.Path,
) -> list[pathlib.Path]:
    """Write every document, then the package index, then the TOC.

    Returns:
        Paths written, in order.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise exceptions.OutputWriteError(f"Cannot create output folder {output_dir}: {e}") from e

    written = list[pathlib.Path]()
    logger.info("Yaml dump start.")
    for document in documents:
        path = output_dir / f"{document.filename}.yml"
        logger.debug(f"Dump {path}")
        _write(path, yaml_config.dump(document.to_dict(), header=True))
        written.append(path)
    logger.info("Yaml dump end.")

    index_path = output_dir / INDEX_FILE
    _write(index_path, yaml_config.dump(index, header=True))
    written.append(index_path)
    logger.info("Package index generated.")

    toc_path = output_dir / TOC_FILE
    _write(toc_path, yaml_config.dump(toc))
    written.append(toc_path)
    logger.info("Toc generated.")

    return written
