"""Parser for the Valve KeyValues text format used by `workshop_maps.txt`.

The mapping file written by the workshop manager looks like::

    "WorkshopMaps"
    {
        "testmap"       "1480550740"
    }

`loads` turns such a document into nested dicts. Values are strings, sections
are dicts. Duplicate keys keep the first occurrence, matching how the game
server's own KeyValues lookup resolves them.
"""
from __future__ import annotations

from typing import Iterator, Tuple, Union

KeyValues = dict[str, Union[str, "KeyValues"]]

_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}
_TERMINATORS = set('{}"') | {" ", "\t", "\r", "\n"}

# Token kinds
STRING = "string"
OPEN = "{"
CLOSE = "}"
CONDITION = "condition"

# Deeper nesting is rejected as malformed
MAX_DEPTH = 64


class KeyValuesError(ValueError):
    """Raised when a KeyValues document is malformed."""

    def __init__(self, message: str, line: int):
        super().__init__(f"line {line}: {message}")
        self.line = line


def _tokenize(text: str) -> Iterator[Tuple[str, str, int]]:
    i = 0
    line = 1
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\n":
            line += 1
            i += 1
        elif ch in " \t\r\ufeff":
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = length if end == -1 else end
        elif ch == "{":
            yield OPEN, ch, line
            i += 1
        elif ch == "}":
            yield CLOSE, ch, line
            i += 1
        elif ch == '"':
            start_line = line
            i += 1
            chars = []
            while True:
                if i >= length:
                    raise KeyValuesError("unterminated quoted string", start_line)
                ch = text[i]
                if ch == '"':
                    i += 1
                    break
                if ch == "\\" and i + 1 < length and text[i + 1] in _ESCAPES:
                    chars.append(_ESCAPES[text[i + 1]])
                    i += 2
                    continue
                if ch == "\n":
                    line += 1
                chars.append(ch)
                i += 1
            yield STRING, "".join(chars), start_line
        elif ch == "[":
            end = text.find("]", i)
            if end == -1 or "\n" in text[i:end]:
                raise KeyValuesError("unterminated conditional", line)
            yield CONDITION, text[i + 1:end], line
            i = end + 1
        else:
            start = i
            while i < length and text[i] not in _TERMINATORS and not text.startswith("//", i):
                i += 1
            yield STRING, text[start:i], line


def _skip_condition(tokens: list, pos: int) -> int:
    if pos < len(tokens) and tokens[pos][0] == CONDITION:
        return pos + 1
    return pos


def _parse_section(tokens: list, pos: int, nested: bool, depth: int = 0) -> Tuple[KeyValues, int]:
    section: KeyValues = {}
    while pos < len(tokens):
        kind, value, line = tokens[pos]
        if kind == CLOSE:
            if not nested:
                raise KeyValuesError("unexpected '}'", line)
            return section, pos + 1
        if kind != STRING:
            raise KeyValuesError(f"expected a key, found {value!r}", line)
        key = value
        pos += 1

        # #include and #base name another file; they are not resolved here
        if key in ("#include", "#base"):
            if pos < len(tokens) and tokens[pos][0] == STRING:
                pos += 1
            continue

        if pos >= len(tokens):
            raise KeyValuesError(f"key {key!r} has no value", line)
        kind, value, value_line = tokens[pos]
        if kind == STRING:
            item: Union[str, KeyValues] = value
            pos += 1
        elif kind == OPEN:
            if depth >= MAX_DEPTH:
                raise KeyValuesError(f"sections nested deeper than {MAX_DEPTH} levels", value_line)
            item, pos = _parse_section(tokens, pos + 1, nested=True, depth=depth + 1)
        else:
            raise KeyValuesError(f"key {key!r} has no value", value_line)
        pos = _skip_condition(tokens, pos)

        if key not in section:
            section[key] = item
    if nested:
        raise KeyValuesError("missing '}' at end of document", tokens[-1][2] if tokens else 1)
    return section, pos


def loads(text: str) -> KeyValues:
    """Parse a KeyValues document and return its top level as a dict."""
    tokens = list(_tokenize(text))
    document, _ = _parse_section(tokens, 0, nested=False)
    return document


def load(fp) -> KeyValues:
    """Parse a KeyValues document from an open text file."""
    return loads(fp.read())


def entries(document: KeyValues) -> dict[str, str]:
    """Return the flat string entries of a document.

    A document made of a single top-level section (the usual `"WorkshopMaps" { ... }`
    layout) yields that section's string children. Otherwise the top-level string
    pairs are returned. Nested sections are never entries.
    """
    body = document
    if len(document) == 1:
        only = next(iter(document.values()))
        if isinstance(only, dict):
            body = only
    return {key: value for key, value in body.items() if isinstance(value, str)}
