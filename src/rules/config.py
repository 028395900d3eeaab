from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "phpimpl.toml"

SupplierName = Literal["treesitter", "text"]


class ReferencesConfig(BaseModel):
    """Selection of the find-references capability."""

    model_config = ConfigDict(extra="forbid")

    supplier: SupplierName = Field(
        default="treesitter",
        description="Reference supplier: tree-sitter name nodes or whole-word text",
    )


class PhpImplConfig(BaseModel):
    """Configuration for phpimpl-core workspace scanning."""

    model_config = ConfigDict(extra="forbid")

    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all PHP files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".php"],
        description="File suffixes treated as PHP sources",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding used to read source files",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    references: ReferencesConfig = Field(
        default_factory=ReferencesConfig,
        description="Reference supplier settings",
    )

    @field_validator("extensions", mode="before")
    @classmethod
    def validate_extensions(cls, v: Any) -> Any:
        """Require a non-empty list of dotted suffixes such as ``.php``."""
        if not isinstance(v, list) or not v:
            msg = "extensions must be a non-empty list of suffixes"
            raise ValueError(msg)

        for suffix in v:
            if not isinstance(suffix, str) or not suffix.startswith("."):
                msg = f"Invalid extension {suffix!r}: suffixes must start with '.'"
                raise ValueError(msg)

        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> PhpImplConfig:
    """Load configuration from phpimpl.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return PhpImplConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return PhpImplConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
