from __future__ import annotations

from typing_extensions import override


class RefdocError(Exception):
    """Base exception for refdoc errors."""

    def format_user_message(self) -> str:
        """Format a user-friendly error message."""
        return str(self)

    def get_suggestion(self) -> str | None:
        """Return actionable suggestion for resolving the error."""
        return None


class InputNotFoundError(RefdocError):
    """Raised when the API model file does not exist or cannot be read."""

    path: str

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        msg = f"API doc file {path} doesn't exist."
        if reason:
            msg = f"Cannot read API doc file {path}: {reason}"
        super().__init__(msg)

    @override
    def get_suggestion(self) -> str:
        return "Check the input path points at the JSON model produced by the extractor"

    @override
    def __reduce__(self) -> tuple[type, tuple[str]]:
        return (self.__class__, (self.path,))


class ConfigError(RefdocError):
    """Raised when the repository config file is missing or configuration is invalid."""

    pass


class MalformedInputError(RefdocError):
    """Raised when the input cannot be parsed as an API model tree."""

    @override
    def get_suggestion(self) -> str:
        return "Regenerate the model with the extractor's JSON output option"


class DuplicateSymbolError(RefdocError):
    """Raised when a symbol is registered under a uid that is already taken."""

    uid: str

    def __init__(self, uid: str) -> None:
        self.uid = uid
        super().__init__(f"Symbol uid '{uid}' is declared more than once")

    @override
    def __reduce__(self) -> tuple[type, tuple[str]]:
        return (self.__class__, (self.uid,))


class NoSymbolsError(RefdocError):
    """Raised when a run produces nothing to write."""

    @override
    def format_user_message(self) -> str:
        return f"Warning: nothing generated. {self}"


class OutputWriteError(RefdocError):
    """Raised when an output file cannot be written."""

    pass
