"""Coercions for the irregular shapes found in ichiran's JSON output."""

from __future__ import annotations

from typing import Any

_ZWNJ = "\u200c"


def bool_seq(value: Any) -> bool:
    """Read a flag that is written either as a bool or as an empty list."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple)):
        if value:
            raise ValueError("invalid length 0, expected [] or bool")
        return False
    raise ValueError(f"invalid type {type(value).__name__}, expected [] or bool")


def no_zwnj(value: Any) -> str:
    """Read a string, dropping zero-width non-joiner characters."""
    if not isinstance(value, str):
        raise ValueError(f"invalid type {type(value).__name__}, expected str")
    return value.replace(_ZWNJ, "")


def option_seq(value: Any) -> Any:
    """Read an optional value written as a list of zero or one items."""
    if not isinstance(value, (list, tuple)):
        raise ValueError(
            f"invalid type {type(value).__name__}, expected seq of len 0 or 1"
        )
    if len(value) > 1:
        raise ValueError("invalid length 1, expected seq of len 0 or 1")
    return value[0] if value else None


def option_seq_dump(value: Any) -> list:
    """Write an optional value as a list of zero or one items."""
    return [] if value is None else [value]