import re
from typing import Annotated

import pydantic

_URL_PATTERN = re.compile(r"^(https?|git|ssh)://\S+$|^git@\S+:\S+$")


class RepoConfig(pydantic.BaseModel):
    """Hosted source repository used to link items back to their source."""

    model_config = pydantic.ConfigDict(extra="forbid", frozen=True)  # pyright: ignore[reportUnannotatedClassAttribute]

    repo: str
    branch: Annotated[str, pydantic.Field(min_length=1)]
    base_path: str = ""

    @pydantic.field_validator("repo")
    @classmethod
    def validate_repo(cls, v: str) -> str:
        """Ensure repo looks like a clonable URL."""
        v = v.strip()
        if not _URL_PATTERN.match(v):
            raise ValueError(f"must be a repository URL, got: {v!r}")
        return v.removesuffix("/")

    @pydantic.field_validator("base_path")
    @classmethod
    def normalize_base_path(cls, v: str) -> str:
        """Use forward slashes and drop trailing separators."""
        return v.replace("\\", "/").rstrip("/")


class ConverterConfig(pydantic.BaseModel):
    """Run-scoped options for one conversion.

    ``group_by_module``: when False (default), module nodes of the model are
    transparent and their members are treated as declared in the module's parent.
    When True, every module becomes a symbol with its own document.

    ``alphabetical_order``: sort TOC siblings by name at every level (default). When
    False, the TOC keeps the order of the input model.
    """

    model_config = pydantic.ConfigDict(extra="forbid", frozen=True)  # pyright: ignore[reportUnannotatedClassAttribute]

    group_by_module: bool = False
    alphabetical_order: bool = True
    repo: RepoConfig | None = None

