from __future__ import annotations

from parse.route_calls import extract_route_calls


def test_static_call_shapes() -> None:
    content = r"""<?php

return [
    route('users.index'),
    to_route('home'),
    Route::has('admin.dashboard'),
    URL::route('profile'),
    redirect()->route('login'),
    $url->route('posts.show'),
    $this->redirector()->route('settings'),
    \Illuminate\Support\Facades\URL::route('fq.facade'),
];
"""

    references = extract_route_calls(content)

    assert [(ref.name, ref.call, ref.line) for ref in references] == [
        ("users.index", "route", 4),
        ("home", "to_route", 5),
        ("admin.dashboard", "Route::has", 6),
        ("profile", "URL::route", 7),
        ("login", "redirect()->route", 8),
        ("posts.show", "$url->route", 9),
        ("settings", "method()->route", 10),
        ("fq.facade", "URL::route", 11),
    ]
    assert all(ref.kind == "route" and not ref.dynamic for ref in references)


def test_dynamic_arguments_carry_expression_and_reason() -> None:
    content = r"""<?php

route('posts.' . $action);
route($name);
route($cond ? 'a' : 'b');
route($name ?? 'home');
route(currentRoute());
route("users.{$id}");
route('posts' . '.index');
"""

    references = extract_route_calls(content)

    assert all(ref.dynamic for ref in references)
    assert [(ref.name, ref.reason) for ref in references] == [
        ("'posts.' . $action", "String concatenation"),
        ("$name", "Variable used as route name"),
        ("$cond ? 'a' : 'b'", "Ternary operator"),
        ("$name ?? 'home'", "Null coalescing operator"),
        ("currentRoute()", "Function call used as route name"),
        ('"users.{$id}"', "String interpolation"),
        ("'posts' . '.index'", "String concatenation"),
    ]


def test_escapes_and_double_quoted_literals() -> None:
    content = r"""<?php

route("admin.users");
route('it\'s.fine');
"""

    assert [ref.name for ref in extract_route_calls(content)] == [
        "admin.users",
        "it's.fine",
    ]


def test_unrelated_calls_are_ignored() -> None:
    content = r"""<?php

Route::get('/users', 'UserController@index');
$router->get('route');
Str::route('not.a.route');
route();
"""

    assert extract_route_calls(content) == []
