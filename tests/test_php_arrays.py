from __future__ import annotations

from parse.php_arrays import UNKNOWN, flatten_keys, returned_array


def test_returned_array_keeps_keys_of_computed_values() -> None:
    content = r"""<?php

$helper = function () {
    return ['inner' => 'no'];
};

return [
    'title' => 'Title',
    'count' => -3,
    'flags' => [true, null],
    'nested' => ['deep' => ['key' => "v"]],
    'computed' => strtoupper('x'),
    'joined' => 'a' . 'b',
    'eol' => 'a' . PHP_EOL,
    'heading' => config('app.name') . ' Home',
    $key => 'skipped',
];
"""

    assert returned_array(content) == {
        "title": "Title",
        "count": -3,
        "flags": {0: True, 1: None},
        "nested": {"deep": {"key": "v"}},
        "computed": UNKNOWN,
        "joined": "ab",
        "eol": UNKNOWN,
        "heading": UNKNOWN,
    }


def test_returned_array_without_return_is_empty() -> None:
    assert returned_array("<?php\n\n$x = ['a' => 1];\n") == {}
    assert returned_array("<?php\n\nreturn 'not an array';\n") == {}


def test_flatten_keys_joins_leaf_paths() -> None:
    values = {"nav": {"home": "Home", "items": {0: "a"}}, "title": "T"}

    assert flatten_keys(values, "messages") == [
        "messages.nav.home",
        "messages.nav.items.0",
        "messages.title",
    ]
