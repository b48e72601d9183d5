from __future__ import annotations

import logging
import pathlib
from typing import Any, cast

import pydantic
import yaml

from refdoc import exceptions, yaml_config
from refdoc.config import models

logger = logging.getLogger(__name__)


def _load_mapping(path: pathlib.Path) -> dict[str, Any]:
    """Load a JSON or YAML mapping with error handling (JSON is valid YAML)."""
    if not path.exists():
        raise exceptions.ConfigError(f"Repository config file path {{{path}}} doesn't exist!")

    try:
        data = yaml_config.load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise exceptions.ConfigError(f"Invalid repository config in {path}: {e}") from e
    except PermissionError:
        raise exceptions.ConfigError(f"Permission denied reading {path}") from None
    except OSError as e:
        raise exceptions.ConfigError(f"Error reading {path}: {e}") from e

    if not isinstance(data, dict):
        raise exceptions.ConfigError(f"Repository config in {path} must be a mapping")
    return cast("dict[str, Any]", data)


def _validate_repo(data: dict[str, Any], origin: str) -> models.RepoConfig:
    try:
        return models.RepoConfig.model_validate(data)
    except pydantic.ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise exceptions.ConfigError(f"Invalid repository config ({origin}): {errors}") from e


def load_repo_config(path: pathlib.Path, base_path: str) -> models.RepoConfig:
    """Read ``repo`` and ``branch`` from a config file, combined with the base path."""
    data = _load_mapping(path)
    logger.debug(f"Loaded repository config from {path}")
    return _validate_repo(
        {"repo": data.get("repo"), "branch": data.get("branch"), "base_path": base_path},
        str(path),
    )


def resolve_repo_config(
    config_path: pathlib.Path | None,
    base_path: str | None,
    source_url: str | None,
    source_branch: str | None,
) -> models.RepoConfig | None:
    """Pick repository metadata from the config file or from explicit options.

    A config file must exist when given, but is only consulted together with a
    base path. Otherwise the URL, branch and base path options must all be
    present; anything less means no source links.
    """
    if config_path is not None:
        if not config_path.exists():
            raise exceptions.ConfigError(
                f"Repository config file path {{{config_path}}} doesn't exist!"
            )
        if base_path:
            return load_repo_config(config_path, base_path)

    if source_url and source_branch and base_path:
        return _validate_repo(
            {"repo": source_url, "branch": source_branch, "base_path": base_path},
            "command line",
        )

    if config_path is not None or source_url or source_branch:
        logger.warning("Incomplete repository metadata, source links are disabled")
    return None


def build_config(
    *,
    group_by_module: bool = False,
    alphabetical_order: bool = True,
    repo: models.RepoConfig | None = None,
) -> models.ConverterConfig:
    """Construct a validated run configuration."""
    try:
        return models.ConverterConfig(
            group_by_module=group_by_module,
            alphabetical_order=alphabetical_order,
            repo=repo,
        )
    except pydantic.ValidationError as e:
        raise exceptions.ConfigError(f"Invalid configuration: {e}") from e
