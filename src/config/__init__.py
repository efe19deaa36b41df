"""Configuration loading and analyzer wiring."""

from config.loader import (
    CONFIG_FILENAME,
    AnalyzerConfig,
    ClassesConfig,
    RoutesConfig,
    TranslationsConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "AnalyzerConfig",
    "ClassesConfig",
    "RoutesConfig",
    "TranslationsConfig",
    "load_config",
]
