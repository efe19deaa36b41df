"""Registries of names that references are checked against."""

from registry.classes import (
    ClassRegistry,
    DeclaredClassRegistry,
    StaticClassRegistry,
)
from registry.routes import CacheEntry, RouteRegistry
from registry.translations import TranslationCatalog

__all__ = [
    "CacheEntry",
    "ClassRegistry",
    "DeclaredClassRegistry",
    "RouteRegistry",
    "StaticClassRegistry",
    "TranslationCatalog",
]
