"""YAML reading and writing for reference documents and repository config.

Owns the UniversalReference header line and the block-style dump used for every
output file. Dumps and loads go through libyaml's CSafeDumper/CSafeLoader when
the extension is built, and the pure Python safe classes otherwise.
"""

from __future__ import annotations

from typing import Any

import yaml

# First line of every reference document, read by the site generator to pick a schema
YAML_HEADER = "### YamlMime:UniversalReference"

# Use union types to avoid type: ignore on fallback assignment
Loader: type[yaml.SafeLoader] | type[yaml.CSafeLoader]
Dumper: type[yaml.SafeDumper] | type[yaml.CSafeDumper]

try:
    Loader = yaml.CSafeLoader
    Dumper = yaml.CSafeDumper
except AttributeError:
    # CSafeLoader unavailable (no libyaml); SafeLoader is API-compatible
    Loader = yaml.SafeLoader
    Dumper = yaml.SafeDumper


def dump(data: Any, *, header: bool = False) -> str:
    """Serialize to block-style YAML, keeping key insertion order."""
    text = yaml.dump(
        data,
        Dumper=Dumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=4096,
    )
    if header:
        return f"{YAML_HEADER}\n{text}"
    return text


def load(text: str) -> Any:
    return yaml.load(text, Loader=Loader)
