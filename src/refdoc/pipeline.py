from __future__ import annotations

import copy
import dataclasses
import json
import logging
from typing import TYPE_CHECKING

from refdoc import exceptions, linker, package_index, parser, resolver, toc, transform, writer
from refdoc.symbols import SymbolTable

if TYPE_CHECKING:
    import pathlib

    from refdoc.config.models import ConverterConfig
    from refdoc.transform import FlatDocument
    from refdoc.types import PackageIndexDict, TocItem

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ConversionContext:
    """State of one conversion run, threaded through every stage."""

    config: ConverterConfig
    package: str = ""
    table: SymbolTable = dataclasses.field(default_factory=SymbolTable)
    filenames: linker.FilenameRegistry = dataclasses.field(
        default_factory=linker.FilenameRegistry
    )


@dataclasses.dataclass
class ConversionResult:
    package: str
    documents: list[FlatDocument]
    index: PackageIndexDict
    toc: list[TocItem]
    collisions: dict[str, list[str]]


def load_model(path: pathlib.Path) -> object:
    """Read and decode the extractor's JSON model.

    Raises:
        InputNotFoundError: If the file is missing or unreadable.
        MalformedInputError: If the file is not valid JSON.
    """
    if not path.is_file():
        raise exceptions.InputNotFoundError(str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise exceptions.InputNotFoundError(str(path), reason=str(e)) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise exceptions.MalformedInputError(f"{path} is not valid JSON: {e}") from e


def convert(model: object, config: ConverterConfig) -> ConversionResult:
    """Run every in-memory stage over a decoded model.

    Parsing completes before any reference is resolved, so references may
    point forward or into sibling roots.

    Raises:
        MalformedInputError: If the model is not a tree of named objects.
        NoSymbolsError: If there is nothing to write.
    """
    ctx = ConversionContext(config=config, package=parser.package_name(model))

    roots = parser.parse_tree(model, ctx.table, config)
    if not roots:
        raise exceptions.NoSymbolsError(f"No symbols found in package '{ctx.package}'")

    reference_maps = [resolver.resolve_ids(root, ctx.table) for root in roots]

    # The TOC mirrors the nesting as parsed, independent of what flattening does
    snapshot = copy.deepcopy(roots)

    documents = [
        document
        for root, references in zip(roots, reference_maps, strict=True)
        for document in transform.post_transform(root, references, repo=config.repo)
    ]
    if not documents:
        raise exceptions.NoSymbolsError(
            f"Package '{ctx.package}' has {len(ctx.table)} symbols but no documentable containers"
        )

    linker.link_module_children(documents)
    linker.link_inner_classes(documents, ctx.filenames)

    index = package_index.build_package_index([d.primary for d in documents], ctx.package)
    navigation = toc.build_toc(
        snapshot,
        ctx.package,
        {d.uid: d.filename for d in documents},
        alphabetical=config.alphabetical_order,
    )
    logger.info(f"Flattened {len(roots)} root trees into {len(documents)} documents")

    return ConversionResult(
        package=ctx.package,
        documents=documents,
        index=index,
        toc=navigation,
        collisions=ctx.filenames.collisions(),
    )


def run(
    input_path: pathlib.Path, output_dir: pathlib.Path, config: ConverterConfig
) -> ConversionResult:
    """Load, convert and write; nothing is written unless every stage succeeds."""
    result = convert(load_model(input_path), config)
    writer.write_output(result.documents, result.index, result.toc, output_dir)
    return result
