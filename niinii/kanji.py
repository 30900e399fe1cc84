"""Kanji information as reported by ichiran (KANJIDIC data)."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

_U32_MAX = 0xFFFFFFFF


class ReadingType(Enum):
    """Kind of a kanji reading."""

    JA_ON = "ja_on"
    JA_KUN = "ja_kun"
    JA_ONKUN = "ja_onkun"

    def __str__(self) -> str:
        return _READING_TYPE_LABELS[self]


_READING_TYPE_LABELS = {
    ReadingType.JA_ON: "On",
    ReadingType.JA_KUN: "Kun",
    ReadingType.JA_ONKUN: "On/Kun",
}

_READING_FIELDS = frozenset(
    {"text", "rtext", "type", "okuri", "sample", "perc", "prefixp", "suffixp"}
)
_KANJI_FIELDS = frozenset(
    {
        "text", "rc", "rn", "strokes", "total", "irr", "irr_perc",
        "readings", "meanings", "freq", "grade",
    }
)


def _object(data: Any, allowed: frozenset, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected {what} object, got {type(data).__name__}")
    unknown = sorted(str(key) for key in set(data) - allowed)
    if unknown:
        raise ValueError(f"unknown field(s) in {what}: {', '.join(unknown)}")
    return data


def _get(data: Mapping, key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r} in {what}") from None


def _uint(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U32_MAX:
        raise ValueError(f"field {key!r}: expected an unsigned integer, got {value!r}")
    return value


def _opt_uint(value: Any, key: str) -> int | None:
    return None if value is None else _uint(value, key)


def _text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r}: expected a string, got {value!r}")
    return value


def _texts(value: Any, key: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"field {key!r}: expected a list, got {value!r}")
    return tuple(_text(item, key) for item in value)


def _opt_bool(value: Any, key: str) -> bool | None:
    if value is not None and not isinstance(value, bool):
        raise ValueError(f"field {key!r}: expected a bool, got {value!r}")
    return value


@dataclass(frozen=True)
class Reading:
    """One reading of a kanji."""

    kana: str
    romaji: str
    rtype: ReadingType
    okuri: tuple[str, ...]
    usage_count: int
    usage_percentage: str
    prefixp: bool | None = None
    suffixp: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Reading:
        """Build a reading from its JSON object."""
        what = "reading"
        _object(data, _READING_FIELDS, what)
        raw_type = _text(_get(data, "type", what), "type")
        try:
            rtype = ReadingType(raw_type)
        except ValueError:
            raise ValueError(f"unknown reading type {raw_type!r}") from None
        return cls(
            kana=_text(_get(data, "text", what), "text"),
            romaji=_text(_get(data, "rtext", what), "rtext"),
            rtype=rtype,
            okuri=_texts(_get(data, "okuri", what), "okuri"),
            usage_count=_uint(_get(data, "sample", what), "sample"),
            usage_percentage=_text(_get(data, "perc", what), "perc"),
            prefixp=_opt_bool(data.get("prefixp"), "prefixp"),
            suffixp=_opt_bool(data.get("suffixp"), "suffixp"),
        )

    @property
    def prefix(self) -> bool:
        """Whether this reading is used as a prefix."""
        return bool(self.prefixp)

    @property
    def suffix(self) -> bool:
        """Whether this reading is used as a suffix."""
        return bool(self.suffixp)


@dataclass(frozen=True)
class Kanji:
    """A kanji with its dictionary and usage data."""

    text: str = ""
    radical_code: int = 0
    nelson_radical_code: int = 0
    stroke_count: int = 0
    total_usage_count: int = 0
    irregular_usage_count: int = 0
    irregular_percentage: str = ""
    readings: tuple[Reading, ...] = ()
    meanings: tuple[str, ...] = ()
    freq: int | None = None
    grade: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Kanji:
        """Build a kanji from its JSON object."""
        what = "kanji"
        _object(data, _KANJI_FIELDS, what)
        readings = _get(data, "readings", what)
        if not isinstance(readings, list):
            raise ValueError(f"field 'readings': expected a list, got {readings!r}")
        return cls(
            text=_text(_get(data, "text", what), "text"),
            radical_code=_uint(_get(data, "rc", what), "rc"),
            nelson_radical_code=_uint(_get(data, "rn", what), "rn"),
            stroke_count=_uint(_get(data, "strokes", what), "strokes"),
            total_usage_count=_uint(_get(data, "total", what), "total"),
            irregular_usage_count=_uint(_get(data, "irr", what), "irr"),
            irregular_percentage=_text(_get(data, "irr_perc", what), "irr_perc"),
            readings=tuple(Reading.from_dict(item) for item in readings),
            meanings=_texts(_get(data, "meanings", what), "meanings"),
            freq=_opt_uint(data.get("freq"), "freq"),
            grade=_opt_uint(data.get("grade"), "grade"),
        )

    @classmethod
    def from_json(cls, text: str) -> Kanji:
        """Build a kanji from a JSON document."""
        return cls.from_dict(json.loads(text))

    def grade_desc(self) -> str:
        """Describe the school grade of this kanji."""
        grade = self.grade
        if grade is not None and 1 <= grade <= 6:
            return f"Grade {grade} (elementary) kyōiku, jōyō kanji"
        if grade == 8:
            return f"Grade {grade} (secondary) jōyō kanji"
        if grade == 9:
            return f"Grade {grade} jinmeiyō, regular name kanji"
        if grade == 10:
            return f"Grade {grade} jinmeiyō, jōyō variant kanji"
        return "hyōgai kanji"