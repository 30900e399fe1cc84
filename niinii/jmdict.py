"""Part-of-speech keyword data read from the JMdict database dump."""

from __future__ import annotations

import csv
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

_KWPOS_FIELDS = ("id", "kw", "descr", "ents")
_UNSIGNED = re.compile(r"\+?[0-9]+")
_U32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class KwPos:
    """A part-of-speech keyword."""

    id: int
    kw: str
    descr: str
    ents: str


def _kwpos_from_row(row: Mapping, number: int) -> KwPos:
    if None in row or any(value is None for value in row.values()):
        raise ValueError(f"kwpos row {number}: wrong number of fields")
    missing = [name for name in _KWPOS_FIELDS if name not in row]
    if missing:
        raise ValueError(f"kwpos row {number}: missing field(s) {', '.join(missing)}")
    raw_id = row["id"]
    if not isinstance(raw_id, int) or isinstance(raw_id, bool):
        if not isinstance(raw_id, str) or not _UNSIGNED.fullmatch(raw_id):
            raise ValueError(f"kwpos row {number}: invalid id {raw_id!r}")
        raw_id = int(raw_id)
    if not 0 <= raw_id <= _U32_MAX:
        raise ValueError(f"kwpos row {number}: id {raw_id} out of range")
    return KwPos(id=raw_id, kw=str(row["kw"]), descr=str(row["descr"]), ents=str(row["ents"]))


@dataclass
class JmDictData:
    """Part-of-speech keywords indexed by keyword."""

    kwpos_by_kw: dict[str, KwPos] = field(default_factory=dict)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping]) -> JmDictData:
        """Build the index from rows keyed by column name."""
        kwpos_by_kw: dict[str, KwPos] = {}
        for number, row in enumerate(rows, start=1):
            record = _kwpos_from_row(row, number)
            kwpos_by_kw[record.kw] = record
        # "cop-da" was renamed "cop", but the old keyword is still in use.
        if "cop" in kwpos_by_kw:
            kwpos_by_kw["cop-da"] = kwpos_by_kw["cop"]
        return cls(kwpos_by_kw)

    @classmethod
    def load(cls, jmdict_path: str | PathLike) -> JmDictData:
        """Read kwpos.csv (tab separated, with a header) from the data directory."""
        with open(Path(jmdict_path) / "kwpos.csv", newline="", encoding="utf-8") as f:
            return cls.from_rows(csv.DictReader(f, delimiter="\t"))