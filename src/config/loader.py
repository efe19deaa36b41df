"""Configuration loaded from ``analyzer.toml``."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from errors import ConfigError

CONFIG_FILENAME = "analyzer.toml"

DEFAULT_PATHS = ["app", "tests"]

DEFAULT_IGNORE = ["Illuminate\\*", "Laravel\\*", "Symfony\\*"]

ProcessorKind = Literal["parallel", "serial"]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ClassesConfig(_Section):
    """Where class declarations are looked up."""

    sources: list[str] = Field(
        default_factory=lambda: ["app", "database", "tests"],
        description="Directories whose declared classes count as existing",
    )
    composer: str | None = Field(
        default="composer.json",
        description="composer.json whose PSR-4 autoload map is consulted",
    )


class RoutesConfig(_Section):
    """Route-name analysis options."""

    path: str = Field(default="routes", description="Route-definition directory")
    cache: bool = Field(default=True, description="Reuse the route registry")
    cache_ttl: int = Field(
        default=3600, ge=0, description="Route registry lifetime in seconds"
    )
    report_dynamic: bool = Field(
        default=True, description="Warn about route names built at runtime"
    )
    include_patterns: list[str] | None = Field(
        default=None, description="Only route names matching these are checked"
    )
    ignore_patterns: list[str] | None = Field(
        default=None, description="Route names matching these are never missing"
    )


class TranslationsConfig(_Section):
    """Translation-key analysis options."""

    path: str = Field(default="lang", description="Translation catalog directory")
    locales: list[str] = Field(
        default_factory=lambda: ["en"], description="Locales a key may live in"
    )
    report_dynamic: bool = Field(
        default=True, description="Warn about keys built at runtime"
    )
    vendor_path: str | None = Field(
        default=None, description="Directory of vendor packages with lang catalogs"
    )
    ignore: list[str] = Field(
        default_factory=list, description="Keys matching these are never missing"
    )
    include_patterns: list[str] | None = Field(
        default=None, description="Only keys matching these are checked"
    )

    @field_validator("locales")
    @classmethod
    def validate_locales(cls, v: list[str]) -> list[str]:
        if not v:
            msg = "locales must name at least one locale"
            raise ValueError(msg)
        return v


class AnalyzerConfig(_Section):
    """Configuration for a refcheck run.

    Instances are immutable. The ``with_*`` methods return a modified copy.
    """

    paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PATHS),
        description="Files or directories to analyze, relative to the root",
    )
    workers: int = Field(
        default=0, ge=0, description="Worker threads (0 = one per CPU)"
    )
    processor: ProcessorKind = Field(
        default="parallel", description="Work distribution strategy"
    )
    ignore: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE),
        description="Class-name patterns never reported missing",
    )
    exclude: list[str] = Field(
        default_factory=list, description="Path patterns never analyzed"
    )
    respect_gitignore: bool = Field(
        default=False, description="Skip files ignored by .gitignore"
    )
    nested_gitignore: bool = Field(
        default=False, description="Also honour .gitignore files below the root"
    )
    fail_on_error: bool = Field(
        default=False, description="Files that fail to parse fail the run"
    )
    classes: ClassesConfig = Field(default_factory=ClassesConfig)
    routes: RoutesConfig = Field(default_factory=RoutesConfig)
    translations: TranslationsConfig = Field(default_factory=TranslationsConfig)

    def with_paths(self, paths: list[str]) -> AnalyzerConfig:
        return self.model_copy(update={"paths": list(paths)})

    def with_workers(self, workers: int) -> AnalyzerConfig:
        if workers < 0:
            msg = f"workers must be 0 (auto) or positive, got {workers}"
            raise ConfigError(msg)
        return self.model_copy(update={"workers": workers})

    def with_ignore(self, ignore: list[str]) -> AnalyzerConfig:
        return self.model_copy(update={"ignore": list(ignore)})

    def with_exclude(self, exclude: list[str]) -> AnalyzerConfig:
        return self.model_copy(update={"exclude": list(exclude)})

    def serial(self) -> AnalyzerConfig:
        return self.model_copy(update={"processor": "serial"})

    def parallel(self) -> AnalyzerConfig:
        return self.model_copy(update={"processor": "parallel"})


def parse_config(
    data: dict[str, Any], source: str = CONFIG_FILENAME
) -> AnalyzerConfig:
    try:
        return AnalyzerConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid config in {source}: {e}"
        raise ConfigError(msg) from e


def load_config(root: Path, config_path: Path | None = None) -> AnalyzerConfig:
    """Load configuration from ``analyzer.toml`` if it exists.

    Args:
        root: Project root; ``analyzer.toml`` is looked up here.
        config_path: Explicit config file. Unlike the default location it
            must exist.

    Raises:
        ConfigError: If the file is not valid TOML or fails validation.
    """
    path = config_path if config_path is not None else Path(root) / CONFIG_FILENAME

    if not path.is_file():
        if config_path is not None:
            msg = f"Config file not found: {config_path}"
            raise ConfigError(msg)
        return AnalyzerConfig()

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e

    return parse_config(data, str(path))


__all__ = [
    "CONFIG_FILENAME",
    "AnalyzerConfig",
    "ClassesConfig",
    "RoutesConfig",
    "TranslationsConfig",
    "load_config",
    "parse_config",
]
