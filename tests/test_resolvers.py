from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from analysis.class_resolver import ClassAnalysisResolver
from analysis.resolver import AnalysisResolver
from analysis.route_resolver import RouteAnalysisResolver
from analysis.translation_resolver import TranslationAnalysisResolver
from contract.models import AnalysisTarget
from errors import EmptyClassNameError
from registry.classes import StaticClassRegistry
from registry.routes import RouteRegistry
from registry.translations import TranslationCatalog

if TYPE_CHECKING:
    from pathlib import Path


def _target(path: Path, content: str) -> AnalysisTarget:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return AnalysisTarget(path)


def _route_resolver(
    tmp_path: Path,
    *,
    report_dynamic: bool = True,
    include_patterns: list[str] | None = None,
    ignore_patterns: list[str] | None = None,
) -> RouteAnalysisResolver:
    routes = tmp_path / "routes"
    routes.mkdir(exist_ok=True)
    (routes / "web.php").write_text(
        r"""<?php

Route::name('api.v1.')->group(function () {
    Route::get('/users', [UserController::class, 'index'])->name('users.index');
});
Route::get('/admin', fn () => 1)->name('admin.dashboard');
""",
        encoding="utf-8",
    )
    resolver = RouteAnalysisResolver(
        RouteRegistry(routes),
        report_dynamic=report_dynamic,
        include_patterns=include_patterns,
        ignore_patterns=ignore_patterns,
    )
    resolver.prepare()
    return resolver


def _lang(tmp_path: Path) -> Path:
    lang = tmp_path / "lang"
    for locale, body in (
        ("en", "'welcome' => 'Welcome'"),
        ("es", "'welcome' => 'Bienvenido'"),
        ("fr", "'welcome' => 'Bienvenue', 'only_in_fr' => 'Oui'"),
    ):
        (lang / locale).mkdir(parents=True)
        (lang / locale / "messages.php").write_text(
            f"<?php\n\nreturn [{body}];\n", encoding="utf-8"
        )
    return lang


def test_resolvers_implement_protocol(tmp_path: Path) -> None:
    resolvers = [
        ClassAnalysisResolver(StaticClassRegistry()),
        RouteAnalysisResolver(RouteRegistry(tmp_path)),
        TranslationAnalysisResolver(TranslationCatalog(tmp_path)),
    ]

    assert all(isinstance(resolver, AnalysisResolver) for resolver in resolvers)


def test_unresolvable_imports_are_missing(tmp_path: Path) -> None:
    target = _target(
        tmp_path / "Thing.php",
        "<?php\n\nuse Another\\MissingClass;\nuse NonExistent\\FakeClass;\n",
    )
    resolver = ClassAnalysisResolver(StaticClassRegistry())

    result = resolver.analyze(target)

    assert not result.success
    assert result.missing_names == ["Another\\MissingClass", "NonExistent\\FakeClass"]
    assert [ref.line for ref in result.missing] == [3, 4]


def test_present_classes_pass(tmp_path: Path) -> None:
    target = _target(
        tmp_path / "Thing.php",
        "<?php\n\nuse App\\Models\\User;\n\n$user = new User();\n",
    )
    resolver = ClassAnalysisResolver(StaticClassRegistry({"App\\Models\\User"}))

    result = resolver.analyze(target)

    assert result.success
    assert result.missing == ()
    assert result.reference_names == ["App\\Models\\User", "App\\Models\\User"]


def test_ignored_classes_stay_in_references(tmp_path: Path) -> None:
    target = _target(
        tmp_path / "Controller.php",
        "<?php\n\nuse Illuminate\\Http\\Request;\nuse App\\Gone;\n",
    )
    resolver = ClassAnalysisResolver(StaticClassRegistry(), ignore=["Illuminate\\*"])

    result = resolver.analyze(target)

    assert "Illuminate\\Http\\Request" in result.reference_names
    assert result.missing_names == ["App\\Gone"]


def test_class_exists_rejects_empty_names() -> None:
    resolver = ClassAnalysisResolver(StaticClassRegistry())

    with pytest.raises(EmptyClassNameError, match="must be non-empty"):
        resolver.class_exists("")
    with pytest.raises(EmptyClassNameError):
        resolver.class_exists("\\")


def test_class_parse_error_becomes_error_result(tmp_path: Path) -> None:
    target = _target(tmp_path / "Broken.php", "<?php\n\nclass {\n")

    result = ClassAnalysisResolver(StaticClassRegistry()).analyze(target)

    assert result.is_error
    assert not result.success
    assert result.references == ()
    assert result.missing == ()


def test_group_prefixed_route_resolves_and_bare_name_does_not(tmp_path: Path) -> None:
    resolver = _route_resolver(tmp_path)
    target = _target(
        tmp_path / "app" / "Nav.php",
        "<?php\n\nroute('api.v1.users.index');\nroute('users.index');\n",
    )

    result = resolver.analyze(target)

    assert result.missing_names == ["users.index"]
    assert resolver.route_exists("api.v1.users.index")
    assert resolver.loaded_routes() == ["admin.dashboard", "api.v1.users.index"]


def test_dynamic_route_reported_only_as_warning(tmp_path: Path) -> None:
    content = "<?php\n\nreturn route('posts.' . $action);\n"

    reporting = _route_resolver(tmp_path, report_dynamic=True)
    result = reporting.analyze(_target(tmp_path / "a.php", content))

    assert result.success
    assert result.references == ()
    assert result.missing == ()
    assert [(w.type, w.line, w.message, w.call) for w in result.warnings] == [
        ("dynamic_route", 3, "String concatenation", "route")
    ]

    silent = _route_resolver(tmp_path, report_dynamic=False)
    result = silent.analyze(_target(tmp_path / "b.php", content))

    assert result.success
    assert result.references == ()
    assert result.warnings == ()


def test_route_include_and_ignore_patterns(tmp_path: Path) -> None:
    resolver = _route_resolver(
        tmp_path, include_patterns=["admin.*", "legacy.*"], ignore_patterns=["legacy.*"]
    )
    target = _target(
        tmp_path / "a.php",
        "<?php\n\nroute('admin.dashboard');\nroute('admin.gone');\n"
        "route('legacy.old');\nroute('other.gone');\n",
    )

    result = resolver.analyze(target)

    assert result.reference_names == ["admin.dashboard", "admin.gone", "legacy.old"]
    assert result.missing_names == ["admin.gone"]


def test_empty_route_name_is_missing_with_warning(tmp_path: Path) -> None:
    resolver = _route_resolver(tmp_path)

    result = resolver.analyze(_target(tmp_path / "a.php", "<?php\n\nroute('');\n"))

    assert result.missing_names == [""]
    assert [warning.type for warning in result.warnings] == ["empty_route"]


def test_routes_in_blade_templates(tmp_path: Path) -> None:
    resolver = _route_resolver(tmp_path)
    target = _target(
        tmp_path / "views" / "nav.blade.php",
        "<nav>\n  <a href=\"{{ route('admin.dashboard') }}\">A</a>\n"
        "  <a href=\"{{ route('admin.missing') }}\">B</a>\n</nav>\n",
    )

    result = resolver.analyze(target)

    assert [(ref.name, ref.line) for ref in result.missing] == [("admin.missing", 3)]


def test_translation_key_only_in_unconfigured_locale_is_missing(tmp_path: Path) -> None:
    lang = _lang(tmp_path)
    target = _target(tmp_path / "a.php", "<?php\n\n__('messages.only_in_fr');\n")

    without_fr = TranslationAnalysisResolver(TranslationCatalog(lang, ["en", "es"]))
    with_fr = TranslationAnalysisResolver(TranslationCatalog(lang, ["en", "es", "fr"]))

    assert without_fr.analyze(target).missing_names == ["messages.only_in_fr"]
    assert with_fr.analyze(target).success


def test_translation_warnings(tmp_path: Path) -> None:
    lang = _lang(tmp_path)
    vendor = tmp_path / "vendor"
    (vendor / "courier" / "lang" / "en").mkdir(parents=True)
    (vendor / "courier" / "lang" / "en" / "mail.php").write_text(
        "<?php\n\nreturn ['sent' => 'Sent'];\n", encoding="utf-8"
    )
    resolver = TranslationAnalysisResolver(
        TranslationCatalog(lang, ["en"], vendor_path=vendor)
    )
    resolver.prepare()
    target = _target(
        tmp_path / "a.php",
        "<?php\n\n__('courier::mail.sent');\n__('ghost::mail.sent');\n"
        "__('');\n__($key);\n",
    )

    result = resolver.analyze(target)

    assert result.missing_names == ["ghost::mail.sent", ""]
    assert [(w.type, w.line) for w in result.warnings] == [
        ("missing_vendor_package", 4),
        ("empty_key", 5),
        ("dynamic_key", 6),
    ]
    assert result.warnings[0].package == "ghost"
    assert resolver.translation_exists("courier::mail.sent")
    assert "messages.welcome" in resolver.loaded_keys()


def test_translation_ignore_and_include(tmp_path: Path) -> None:
    resolver = TranslationAnalysisResolver(
        TranslationCatalog(_lang(tmp_path), ["en"]),
        ignore=["validation.*"],
        include_patterns=["messages.*", "validation.*"],
    )
    target = _target(
        tmp_path / "a.php",
        "<?php\n\n__('validation.required');\n"
        "__('auth.failed');\n__('messages.nope');\n",
    )

    result = resolver.analyze(target)

    assert result.reference_names == ["validation.required", "messages.nope"]
    assert result.missing_names == ["messages.nope"]


def test_route_and_translation_resolvers_accept_any_class(tmp_path: Path) -> None:
    routes = RouteAnalysisResolver(RouteRegistry(tmp_path))
    translations = TranslationAnalysisResolver(TranslationCatalog(tmp_path))

    assert routes.class_exists("Anything")
    assert translations.class_exists("Anything")


def test_computed_translation_values_still_define_keys(tmp_path: Path) -> None:
    lang = tmp_path / "lang"
    (lang / "en").mkdir(parents=True)
    (lang / "en" / "messages.php").write_text(
        r"""<?php

return [
    'title' => config('app.name') . ' Home',
    'eol' => 'a' . PHP_EOL,
    'upper' => strtoupper('x'),
];
""",
        encoding="utf-8",
    )
    target = _target(
        tmp_path / "a.php",
        "<?php\n\n__('messages.title');\n__('messages.eol');\n__('messages.upper');\n",
    )

    resolver = TranslationAnalysisResolver(TranslationCatalog(lang, ["en"]))

    assert resolver.analyze(target).success


def test_resources_registration_defines_routes(tmp_path: Path) -> None:
    routes = tmp_path / "routes"
    routes.mkdir()
    (routes / "web.php").write_text(
        "<?php\n\nRoute::resources(['albums' => AlbumController::class]);\n",
        encoding="utf-8",
    )
    resolver = RouteAnalysisResolver(RouteRegistry(routes))
    resolver.prepare()
    target = _target(tmp_path / "a.php", "<?php\n\nroute('albums.index');\n")

    assert resolver.analyze(target).success
    assert "albums.destroy" in resolver.loaded_routes()
