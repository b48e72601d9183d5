from __future__ import annotations

import logging
import pathlib

import click

from refdoc import __version__, exceptions, pipeline
from refdoc.cli import decorators as cli_decorators
from refdoc.config import io as config_io

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging for CLI output."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s", force=True)


@click.command("refdoc")
@click.version_option(__version__, "--version", "-V", message="v%(version)s")
@click.argument("input_file", type=click.Path(dir_okay=False, path_type=pathlib.Path))
@click.argument("output_folder", type=click.Path(file_okay=False, path_type=pathlib.Path))
@click.argument(
    "repo_config_file",
    required=False,
    type=click.Path(dir_okay=False, path_type=pathlib.Path),
)
@click.option(
    "--has-module",
    "group_by_module",
    is_flag=True,
    help="Document each source module as its own page (for repositories that contain modules).",
)
@click.option(
    "--disable-alphabet-order",
    is_flag=True,
    help="Keep the model's declaration order in the TOC instead of sorting by name.",
)
@click.option("--base-path", help="Current base path to the repository.")
@click.option("--source-url", help="Address of the source repository.")
@click.option("--source-branch", help="Branch of the source repository.")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@cli_decorators.with_error_handling
def cli(
    input_file: pathlib.Path,
    output_folder: pathlib.Path,
    repo_config_file: pathlib.Path | None,
    group_by_module: bool,
    disable_alphabet_order: bool,
    base_path: str | None,
    source_url: str | None,
    source_branch: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Convert a JSON API model into YAML reference pages.

    Reads INPUT_FILE (the documentation extractor's JSON output) and writes one
    page per module, namespace, class, interface and enum to OUTPUT_FOLDER,
    plus index.yml and toc.yml.

    REPO_CONFIG_FILE optionally holds the source repository's "repo" URL and
    "branch"; together with --base-path it adds source links to every page.
    """
    if verbose and quiet:
        raise click.UsageError("--verbose and --quiet are mutually exclusive")
    _setup_logging(verbose, quiet)

    repo = config_io.resolve_repo_config(repo_config_file, base_path, source_url, source_branch)
    config = config_io.build_config(
        group_by_module=group_by_module,
        alphabetical_order=not disable_alphabet_order,
        repo=repo,
    )

    try:
        result = pipeline.run(input_file, output_folder, config)
    except exceptions.NoSymbolsError as e:
        logger.warning(e.format_user_message())
        return

    for key, uids in result.collisions.items():
        logger.info(f"Disambiguated {key}: {', '.join(uids)}")
    logger.info(f"Wrote {len(result.documents)} documents to {output_folder}")


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
