from __future__ import annotations

import pytest

from errors import ParseError
from parse.route_definitions import (
    API_RESOURCE_METHODS,
    RESOURCE_METHODS,
    extract_route_definitions,
)


def _names(content: str) -> list[str]:
    return [definition.name for definition in extract_route_definitions(content)]


def test_named_routes_and_action_arrays() -> None:
    content = r"""<?php

use Illuminate\Support\Facades\Route;

Route::get('/', fn () => view('welcome'))->name('home');
Route::post('/login', [LoginController::class, 'store'])->name('login.store');
Route::get('/legacy', ['as' => 'legacy', 'uses' => 'LegacyController@index']);
Route::get('/export', [ReportController::class, 'export'])->name('reports.' . 'export');
Route::get('/dynamic', [DynamicController::class, 'index'])->name($name);
Route::get('/unnamed', [UnnamedController::class, 'index']);
Route::view('/about', 'about')->name('about');
"""

    definitions = extract_route_definitions(content)

    assert [(d.name, d.line) for d in definitions] == [
        ("home", 5),
        ("login.store", 6),
        ("legacy", 7),
        ("reports.export", 8),
        ("about", 11),
    ]


def test_group_prefixes_nest() -> None:
    content = r"""<?php

Route::prefix('admin')->name('admin.')->group(function () {
    Route::name('users.')->group(function () {
        Route::get('/', [UserController::class, 'index'])->name('index');
    });
    Route::name('settings.')->group(fn () => Route::get('/s', fn () => 1)->name('x'));
});

Route::group(['as' => 'legacy.', 'prefix' => 'old'], function () {
    Route::get('/a', ['as' => 'a', 'uses' => 'OldController@a']);
});

Route::middleware('auth')->group(function () {
    Route::get('/me', [ProfileController::class, 'show'])->name('profile');
});
"""

    assert _names(content) == [
        "admin.users.index",
        "admin.settings.x",
        "legacy.a",
        "profile",
    ]


def test_resource_routes() -> None:
    content = r"""<?php

Route::resource('photos', PhotoController::class);
Route::resource('videos', VideoController::class)->only(['index', 'show']);
Route::resource('songs', SongController::class)->except('destroy');
Route::apiResource('tracks', TrackController::class)->names(['index' => 'tracks.all']);
Route::resource('pictures', PictureController::class)->names('pics')->only('index');
Route::resources(['albums' => AlbumController::class]);
Route::resource('admin/posts', PostController::class)->only(['index']);
Route::resource('tags', TagController::class, ['only' => ['show'], 'as' => 'blog']);
Route::apiResource('users', UserController::class)->name('index', 'people');
"""

    expected = (
        [f"photos.{method}" for method in RESOURCE_METHODS]
        + ["videos.index", "videos.show"]
        + [f"songs.{method}" for method in RESOURCE_METHODS if method != "destroy"]
        + ["tracks.all"]
        + [f"tracks.{method}" for method in API_RESOURCE_METHODS[1:]]
        + ["pics.index"]
        + [f"albums.{method}" for method in RESOURCE_METHODS]
        + ["posts.index"]
        + ["blog.tags.show"]
        + ["people"]
        + [f"users.{method}" for method in API_RESOURCE_METHODS[1:]]
    )

    assert _names(content) == expected


def test_resources_inherit_group_prefix() -> None:
    content = r"""<?php

Route::name('api.')->group(function () {
    Route::apiResource('orders', OrderController::class)->only(['index']);
});
"""

    assert _names(content) == ["api.orders.index"]


def test_syntax_error_raises_parse_error() -> None:
    with pytest.raises(ParseError):
        extract_route_definitions("<?php\n\nRoute::get('/', function () {\n")
