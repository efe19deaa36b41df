"""Minimal Blade template compiler for static reference extraction.

Only the constructs that can carry PHP expressions are compiled: echo tags,
``@php`` blocks, raw ``<?php`` blocks and built-in directives with
arguments. Everything else collapses to whitespace. Newlines are preserved,
so line numbers in the compiled PHP match the template.
"""

from __future__ import annotations

import re

BLADE_SUFFIX = ".blade.php"

_DIRECTIVE = re.compile(r"@([A-Za-z_]\w*)")
_ARGS_START = re.compile(r"[ \t]*\(")

_LOOP_DIRECTIVES = {
    "foreach": "foreach",
    "forelse": "foreach",
    "for": "for",
    "while": "while",
}

# Built-in directives that take PHP arguments. Anything else, such as a CSS
# `@media (...)` rule, is template text.
_ARGUMENT_DIRECTIVES = frozenset(
    {
        "aware", "break", "can", "canany", "cannot", "case", "checked",
        "choice", "class", "component", "continue", "disabled", "dd", "dump",
        "each", "elsecan", "elsecanany", "elsecannot", "elseif", "empty",
        "env", "error", "extends", "extendsFirst", "for", "foreach",
        "forelse", "fragment", "hasSection", "if", "include", "includeFirst",
        "includeIf", "includeUnless", "includeWhen", "inject", "isset", "js",
        "json", "lang", "method", "once", "php", "prepend", "prependOnce",
        "props", "push", "pushIf", "pushOnce", "readonly", "required",
        "section", "sectionMissing", "selected", "session", "slot", "stack",
        "style", "switch", "unless", "unset", "use", "while", "yield",
    }
)


def is_blade_file(path: str) -> bool:
    return path.endswith(BLADE_SUFFIX)


def _blank(text: str) -> str:
    return "\n" * text.count("\n")


def _match_paren(content: str, start: int) -> int:
    """Return the index just past the parenthesis closing ``content[start]``."""
    depth = 0
    quote: str | None = None
    index = start
    while index < len(content):
        char = content[index]
        if quote is not None:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in {"'", '"'}:
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return -1


def _compile_directive(name: str, args: str) -> str:
    if name == "lang":
        return f"<?php echo app('translator')->get({args}); ?>"
    if name == "choice":
        return f"<?php echo trans_choice({args}); ?>"
    if name == "php":
        return f"<?php {args}; ?>"
    if name in _LOOP_DIRECTIVES:
        return f"<?php {_LOOP_DIRECTIVES[name]} ({args}) {{}} ?>"
    return f"<?php [{args}]; ?>"


def compile_blade(content: str) -> str:
    """Compile a Blade template into PHP suitable for the extractors."""
    out: list[str] = []
    index = 0
    length = len(content)

    while index < length:
        if content.startswith("{{--", index):
            end = content.find("--}}", index + 4)
            end = length if end == -1 else end + 4
            out.append(_blank(content[index:end]))
            index = end
            continue

        if content.startswith("@{{", index):
            end = content.find("}}", index + 3)
            end = length if end == -1 else end + 2
            out.append(_blank(content[index:end]))
            index = end
            continue

        if content.startswith("{!!", index) or content.startswith("{{", index):
            raw = content.startswith("{!!", index)
            opener, closer = ("{!!", "!!}") if raw else ("{{", "}}")
            end = content.find(closer, index + len(opener))
            if end == -1:
                out.append(_blank(content[index:]))
                break
            expr = content[index + len(opener) : end]
            if expr.strip():
                out.append(f"<?php echo {expr}; ?>")
            else:
                out.append("<?php echo null; ?>" + _blank(expr))
            index = end + len(closer)
            continue

        if content.startswith("<?php", index) or content.startswith("<?=", index):
            end = content.find("?>", index)
            end = length if end == -1 else end + 2
            out.append(content[index:end])
            index = end
            continue

        if content.startswith("@@", index):
            index += 2
            continue

        if content[index] == "@" and (index == 0 or not content[index - 1].isalnum()):
            match = _DIRECTIVE.match(content, index)
            if match is not None:
                name = match.group(1)
                if name == "verbatim":
                    end = content.find("@endverbatim", match.end())
                    end = length if end == -1 else end + len("@endverbatim")
                    out.append(_blank(content[index:end]))
                    index = end
                    continue
                has_args = _ARGS_START.match(content, match.end()) is not None
                if name == "php" and not has_args:
                    end = content.find("@endphp", match.end())
                    end = length if end == -1 else end
                    out.append(f"<?php {content[match.end():end]} ?>")
                    index = min(length, end + len("@endphp"))
                    continue

                if name not in _ARGUMENT_DIRECTIVES:
                    index = match.end()
                    continue

                cursor = match.end()
                while cursor < length and content[cursor] in " \t":
                    cursor += 1
                if cursor < length and content[cursor] == "(":
                    close = _match_paren(content, cursor)
                    if close != -1:
                        args = content[cursor + 1 : close - 1]
                        out.append(_compile_directive(name, args))
                        index = close
                        continue
                index = match.end()
                continue

        out.append("\n" if content[index] == "\n" else "")
        index += 1

    return "".join(out)


__all__ = ["BLADE_SUFFIX", "compile_blade", "is_blade_file"]
