"""
Parsing of field tags.

A tag is a space separated sequence of ``key:"quoted value"`` pairs, for
example ``inject:"db" json:"database"``. Quoted values use backslash
escaping.
"""

from __future__ import annotations

import re

from .errors import MalformedDirectiveError

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}

_ESCAPE = re.compile(r"\\(?:x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|.)", re.S)


def extract(name: str, tag: str) -> tuple[bool, str]:
    """
    Find the quoted value stored under ``name`` in ``tag``.

    The found flag separates a key that is present with an empty value from a
    key that is absent altogether.

    Args:
        name: The key to look for
        tag: The raw tag string

    Returns:
        A ``(found, value)`` pair

    Raises:
        MalformedDirectiveError: If the tag is not a sequence of quoted pairs
    """
    raw = tag
    while tag:
        tag = tag.lstrip(" ")
        if not tag:
            break

        # A space or quote before the colon is a syntax error.
        i = 0
        while i < len(tag) and tag[i] not in ' :"':
            i += 1
        if i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
            raise MalformedDirectiveError(raw, "expected key followed by :\"")
        found_name = tag[:i]
        tag = tag[i + 1 :]

        i = 1
        while i < len(tag) and tag[i] != '"':
            if tag[i] == "\\":
                i += 1
            i += 1
        if i >= len(tag):
            raise MalformedDirectiveError(raw, "unterminated quoted value")
        quoted = tag[: i + 1]
        tag = tag[i + 1 :]

        if found_name == name:
            return True, unquote(quoted, raw)
    return False, ""


def unquote(quoted: str, tag: str | None = None) -> str:
    """Interpret a double-quoted string literal, rejecting unknown escapes."""
    tag = quoted if tag is None else tag
    if len(quoted) < 2 or quoted[0] != '"' or quoted[-1] != '"':
        raise MalformedDirectiveError(tag, "value is not double-quoted")
    body = quoted[1:-1]
    if "\n" in body:
        raise MalformedDirectiveError(tag, "newline in quoted value")

    def replace(match: re.Match[str]) -> str:
        escape = match.group(0)[1:]
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        if escape[0] in "xuU" and len(escape) > 1:
            code = int(escape[1:], 16)
        elif escape[0] in "01234567" and len(escape) == 3:
            code = int(escape, 8)
            if code > 0o377:
                raise MalformedDirectiveError(tag, f"octal escape \\{escape} out of range")
        else:
            raise MalformedDirectiveError(tag, f"invalid escape sequence \\{escape}")
        if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
            raise MalformedDirectiveError(tag, f"invalid code point in \\{escape}")
        return chr(code)

    pos = 0
    for match in _ESCAPE.finditer(body):
        if '"' in body[pos : match.start()]:
            raise MalformedDirectiveError(tag, "unescaped quote in quoted value")
        pos = match.end()
    if '"' in body[pos:]:
        raise MalformedDirectiveError(tag, "unescaped quote in quoted value")
    return _ESCAPE.sub(replace, body)


def quote(value: str) -> str:
    """Render ``value`` as a double-quoted literal that :func:`unquote` accepts."""
    out = ['"']
    reverse = {v: k for k, v in _SIMPLE_ESCAPES.items()}
    for char in value:
        if char in reverse:
            out.append("\\" + reverse[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\x{ord(char):02x}")
        else:
            out.append(char)
    out.append('"')
    return "".join(out)
