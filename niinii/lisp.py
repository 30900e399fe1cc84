"""Reading Lisp values printed by ichiran, and quoting strings for it."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import LispError

_WHITESPACE = " \t\r\n\f\v"
_DELIMITERS = frozenset(_WHITESPACE + "()\"';")
_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}
_INT = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX2 = re.compile(r"[0-9a-fA-F]{2}")
_UNICODE = re.compile(r"\{([0-9a-fA-F]{1,6})\}")


class _Symbol(str):
    """A bare symbol, kept apart from string literals."""


@dataclass(frozen=True)
class _Quote:
    datum: object


class _Reader:
    def __init__(self, source: str) -> None:
        self._src = source
        self._pos = 0

    def at_end(self) -> bool:
        self._skip()
        return self._pos >= len(self._src)

    def _skip(self) -> None:
        src = self._src
        while self._pos < len(src):
            ch = src[self._pos]
            if ch in _WHITESPACE:
                self._pos += 1
            elif ch == ";":
                newline = src.find("\n", self._pos)
                self._pos = len(src) if newline < 0 else newline + 1
            else:
                break

    def read(self) -> object:
        self._skip()
        src = self._src
        if self._pos >= len(src):
            raise LispError("unexpected end of input")
        ch = src[self._pos]
        if ch == "(":
            self._pos += 1
            items = []
            while True:
                self._skip()
                if self._pos >= len(src):
                    raise LispError("unterminated list")
                if src[self._pos] == ")":
                    self._pos += 1
                    return items
                items.append(self.read())
        if ch == ")":
            raise LispError(f"unexpected ')' at offset {self._pos}")
        if ch == "'":
            self._pos += 1
            return _Quote(self.read())
        if ch == '"':
            return self._read_string()
        return self._read_atom()

    def _read_string(self) -> str:
        src = self._src
        pos = self._pos + 1
        out: list[str] = []
        while pos < len(src):
            ch = src[pos]
            if ch == '"':
                self._pos = pos + 1
                return "".join(out)
            if ch != "\\":
                out.append(ch)
                pos += 1
                continue
            pos += 1
            if pos >= len(src):
                break
            esc = src[pos]
            if esc in _ESCAPES:
                out.append(_ESCAPES[esc])
                pos += 1
            elif esc == "x":
                digits = _HEX2.match(src, pos + 1)
                if digits is None:
                    raise LispError(f"invalid \\x escape at offset {pos}")
                out.append(chr(int(digits.group(), 16)))
                pos = digits.end()
            elif esc == "u":
                digits = _UNICODE.match(src, pos + 1)
                if digits is None:
                    raise LispError(f"invalid \\u escape at offset {pos}")
                try:
                    out.append(chr(int(digits.group(1), 16)))
                except ValueError:
                    raise LispError(f"invalid code point at offset {pos}") from None
                pos = digits.end()
            else:
                raise LispError(f"unknown escape \\{esc} at offset {pos}")
        raise LispError("unterminated string")

    def _read_atom(self) -> object:
        src = self._src
        start = self._pos
        while self._pos < len(src) and src[self._pos] not in _DELIMITERS:
            self._pos += 1
        token = src[start : self._pos]
        if _INT.fullmatch(token):
            return int(token)
        if _FLOAT.fullmatch(token):
            return float(token)
        return _Symbol(token)


def _unquote(datum: object) -> object:
    if isinstance(datum, _Quote):
        return ["quote", _unquote(datum.datum)]
    if isinstance(datum, list):
        return [_unquote(item) for item in datum]
    if isinstance(datum, _Symbol):
        return str(datum)
    return datum


def _evaluate(datum: object) -> object:
    if isinstance(datum, _Quote):
        return _unquote(datum.datum)
    if isinstance(datum, _Symbol):
        if datum == "true":
            return True
        if datum == "false":
            return False
        raise LispError(f"unbound symbol: {datum}")
    if isinstance(datum, list):
        if not datum:
            return []
        raise LispError("function calls cannot be evaluated")
    return datum


def lisp_interpret(expr: str) -> object:
    """Evaluate a single literal Lisp expression into a Python value.

    Strings, numbers, ``true``/``false``, ``()`` and quoted data are
    understood; quoted lists become Python lists.
    """
    reader = _Reader(expr)
    datum = reader.read()
    if not reader.at_end():
        raise LispError("trailing input after expression")
    return _evaluate(datum)


def lisp_escape_string(text: str) -> str:
    """Escape double quotes and backslashes for a Lisp string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')