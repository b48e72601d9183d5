from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

# Public API - the in-memory pipeline and its configuration. Stage modules
# (refdoc.parser, refdoc.transform, ...) are accessible via their full paths

if TYPE_CHECKING:
    from refdoc.config.models import ConverterConfig as ConverterConfig
    from refdoc.config.models import RepoConfig as RepoConfig
    from refdoc.pipeline import ConversionResult as ConversionResult
    from refdoc.pipeline import convert as convert
    from refdoc.pipeline import run as run

# Lazy import mapping for runtime
_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ConverterConfig": ("refdoc.config.models", "ConverterConfig"),
    "RepoConfig": ("refdoc.config.models", "RepoConfig"),
    "ConversionResult": ("refdoc.pipeline", "ConversionResult"),
    "convert": ("refdoc.pipeline", "convert"),
    "run": ("refdoc.pipeline", "run"),
}


def __getattr__(name: str) -> object:
    """Lazily import public API members on first access."""
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        import importlib

        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        # Cache in module globals for subsequent access
        globals()[name] = value
        return value
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


def __dir__() -> list[str]:
    """List available attributes including lazy imports."""
    return list(globals().keys()) + list(_LAZY_IMPORTS.keys())
