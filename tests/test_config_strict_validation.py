from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.loader import AnalyzerConfig, load_config
from errors import ConfigError


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "analyzer.toml").write_text(toml_content, encoding="utf-8")


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_nested_routes_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[routes]
path = "routes"
cache_routes = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_locales_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[translations]\nlocales = []")

    with pytest.raises(ConfigError, match="locales"):
        load_config(tmp_path)


def test_negative_workers_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "workers = -2")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "paths = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_explicit_missing_config_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path, tmp_path / "other.toml")


def test_missing_default_config_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == AnalyzerConfig()
    assert config.paths == ["app", "tests"]
    assert config.workers == 0
    assert config.processor == "parallel"
    assert config.ignore == ["Illuminate\\*", "Laravel\\*", "Symfony\\*"]
    assert config.routes.cache is True
    assert config.routes.cache_ttl == 3600
    assert config.translations.locales == ["en"]


def test_valid_nested_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
paths = ["app", "resources/views"]
workers = 3
processor = "serial"
exclude = ["vendor", "*.stub.php"]
fail_on_error = true

[classes]
sources = ["app", "src"]
composer = "composer.json"

[routes]
cache = false
include_patterns = ["admin.*"]

[translations]
locales = ["en", "fr"]
vendor_path = "vendor"
ignore = ["validation.*"]
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.paths == ["app", "resources/views"]
    assert config.workers == 3
    assert config.processor == "serial"
    assert config.exclude == ["vendor", "*.stub.php"]
    assert config.fail_on_error
    assert config.classes.sources == ["app", "src"]
    assert config.routes.cache is False
    assert config.routes.include_patterns == ["admin.*"]
    assert config.routes.ignore_patterns is None
    assert config.translations.locales == ["en", "fr"]
    assert config.translations.vendor_path == "vendor"
    assert config.translations.ignore == ["validation.*"]


def test_fluent_methods_return_new_instances() -> None:
    base = AnalyzerConfig()

    changed = (
        base.with_paths(["src"])
        .with_workers(2)
        .with_ignore(["Vendor\\*"])
        .with_exclude(["legacy"])
        .serial()
    )

    assert changed.paths == ["src"]
    assert changed.workers == 2
    assert changed.ignore == ["Vendor\\*"]
    assert changed.exclude == ["legacy"]
    assert changed.processor == "serial"
    assert changed.parallel().processor == "parallel"
    assert base == AnalyzerConfig()


def test_with_workers_rejects_negative() -> None:
    with pytest.raises(ConfigError, match="got -1"):
        AnalyzerConfig().with_workers(-1)


def test_config_is_frozen() -> None:
    config = AnalyzerConfig()

    with pytest.raises(ValidationError):
        config.workers = 4  # type: ignore[misc]
