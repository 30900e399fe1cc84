"""Splitting text into runs that ichiran can segment and runs it skips."""

from __future__ import annotations

import re
from enum import Enum

_NUM_WORD = "[0-9０-９〇々ヶ〆一-龯ァ-ヺヽヾぁ-ゔゝゞー]"
_WORD = "[々ヶ〆一-龯ァ-ヺヽヾぁ-ゔゝゞー〇]"
_DIGIT = "[0-9０-９〇]"
_DECIMAL_POINT = "[.,]"

_BASIC_SPLIT = re.compile(
    f"((?:(?<!{_DECIMAL_POINT}|{_DIGIT}){_DIGIT}+|{_WORD}){_NUM_WORD}*{_WORD}|{_WORD})"
)


class Split(Enum):
    """Kind of a run of text."""

    TEXT = "text"
    SKIP = "skip"


def basic_split(text: str) -> list[tuple[Split, str]]:
    """Split text into alternating text and skip runs, as ichiran does."""
    runs: list[tuple[Split, str]] = []
    last = 0
    for match in _BASIC_SPLIT.finditer(text):
        if match.start() != last:
            runs.append((Split.SKIP, text[last : match.start()]))
        runs.append((Split.TEXT, match.group()))
        last = match.end()
    if last < len(text):
        runs.append((Split.SKIP, text[last:]))
    return runs