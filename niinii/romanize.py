"""Parse trees returned by ichiran's romanizer."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .coerce import bool_seq, no_zwnj

_U32_MAX = 0xFFFFFFFF
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_POS_WORD_RE = re.compile(r"[\w-]+")

_META_FIELDS = frozenset({"reading", "text", "kana", "score"})
_PLAIN_FIELDS = _META_FIELDS | {"seq", "gloss", "conj", "counter", "suffix"}
_COMPOUND_FIELDS = _META_FIELDS | {"compound", "components"}
_GLOSS_FIELDS = frozenset({"pos", "gloss", "info", "field"})
_CONJ_FIELDS = frozenset({"prop", "reading", "gloss", "via", "readok"})
_PROP_FIELDS = frozenset({"pos", "type", "neg", "fml"})
_COUNTER_FIELDS = frozenset({"value", "ordinal"})


def _object(data: Any, allowed: frozenset | None, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected {what} object, got {type(data).__name__}")
    if allowed is not None:
        unknown = sorted(str(key) for key in set(data) - allowed)
        if unknown:
            raise ValueError(f"unknown field(s) in {what}: {', '.join(unknown)}")
    return data


def _get(data: Mapping, key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r} in {what}") from None


def _int(value: Any, key: str, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValueError(f"field {key!r}: expected an integer in [{low}, {high}], got {value!r}")
    return value


def _text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r}: expected a string, got {value!r}")
    return value


def _opt_text(value: Any, key: str) -> str | None:
    return None if value is None else _text(value, key)


def _seq(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"field {key!r}: expected a list, got {value!r}")
    return value


def _flag(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r}: expected a bool, got {value!r}")
    return value


@dataclass(frozen=True)
class Meta:
    """Metadata common to every word."""

    reading: str
    text: str
    kana: str
    score: int


@dataclass(frozen=True)
class Gloss:
    """A dictionary gloss of a word."""

    pos: str
    gloss: str
    info: str | None = None
    field: str | None = None

    def pos_split(self) -> list[str]:
        """The individual part-of-speech tags."""
        return _POS_WORD_RE.findall(self.pos)


@dataclass(frozen=True)
class Property:
    """A property of a conjugation."""

    pos: str
    kind: str
    neg: bool = False
    fml: bool = False


@dataclass(frozen=True)
class Conjugation:
    """A conjugation of a word, possibly reached through other conjugations."""

    prop: tuple[Property, ...]
    readok: bool
    reading: str | None = None
    gloss: tuple[Gloss, ...] = ()
    via: tuple[Conjugation, ...] = ()

    def flatten(self) -> list[list[Conjugation]]:
        """Every leaf-to-root path through the via tree ending at this conjugation."""

        def chain(head: list[Conjugation], tail: Conjugation) -> list[list[Conjugation]]:
            head = [tail, *head]
            if not tail.via:
                return [head]
            paths: list[list[Conjugation]] = []
            for via in tail.via:
                paths.extend(chain(head, via))
            return paths

        return chain([], self)


@dataclass(frozen=True)
class Counter:
    """Counter information of a word."""

    value: str
    ordinal: bool


@dataclass(frozen=True)
class Plain:
    """A plain dictionary word."""

    meta: Meta
    seq: int | None = None
    gloss: tuple[Gloss, ...] = ()
    conj: tuple[Conjugation, ...] = ()
    counter: Counter | None = None
    suffix: str | None = None

    def best(self) -> Plain:
        """The word itself."""
        return self


@dataclass(frozen=True)
class Compound:
    """A word made of several components."""

    meta: Meta
    compound: tuple[str, ...]
    components: tuple[Term, ...]

    def best(self) -> Compound:
        """The word itself."""
        return self


Word = Union[Plain, Compound]


@dataclass(frozen=True)
class Alternative:
    """Several candidate words for the same text."""

    alternative: tuple[Word, ...]

    def best(self) -> Word:
        """The highest-scoring candidate; the last one wins a tie."""
        best: Word | None = None
        for word in self.alternative:
            if best is None or word.meta.score >= best.meta.score:
                best = word
        if best is None:
            raise ValueError("alternative has no candidates")
        return best


Term = Union[Plain, Compound, Alternative]


@dataclass(frozen=True)
class Romanized:
    """A romanized term."""

    romaji: str
    term: Term
    extra: tuple[int, ...] = ()


@dataclass(frozen=True)
class Clause:
    """One segmentation of a run of text, with its cumulative score."""

    romanized: tuple[Romanized, ...]
    score: int

    def text(self) -> str:
        """The original text covered by this clause."""
        return "".join(term_text(item.term) for item in self.romanized)


@dataclass(frozen=True)
class Skipped:
    """Text that was not segmented."""

    text: str


Segment = Union[Skipped, tuple[Clause, ...]]


@dataclass(frozen=True)
class Root:
    """The root of a parse tree."""

    segments: tuple[Segment, ...] = ()

    def is_flat(self) -> bool:
        """Whether every segment was skipped, e.g. for non-Japanese text."""
        return all(isinstance(segment, Skipped) for segment in self.segments)

    @classmethod
    def from_json(cls, text: str) -> Root:
        """Parse a root from a JSON document."""
        return parse_root(json.loads(text))


def term_text(term: Term) -> str:
    """The original text of a term."""
    return term.best().meta.text


def term_kana(term: Term) -> str:
    """The kana of a term."""
    return term.best().meta.kana


def term_reading(term: Term) -> str:
    """The reading of a term."""
    return term.best().meta.reading


def _parse_meta(data: Mapping, what: str) -> Meta:
    return Meta(
        reading=_text(_get(data, "reading", what), "reading"),
        text=_text(_get(data, "text", what), "text"),
        kana=no_zwnj(_get(data, "kana", what)),
        score=_int(_get(data, "score", what), "score", 0, _U32_MAX),
    )


def _parse_gloss(data: Any) -> Gloss:
    what = "gloss"
    _object(data, _GLOSS_FIELDS, what)
    return Gloss(
        pos=_text(_get(data, "pos", what), "pos"),
        gloss=_text(_get(data, "gloss", what), "gloss"),
        info=_opt_text(data.get("info"), "info"),
        field=_opt_text(data.get("field"), "field"),
    )


def _parse_property(data: Any) -> Property:
    what = "property"
    _object(data, _PROP_FIELDS, what)
    return Property(
        pos=_text(_get(data, "pos", what), "pos"),
        kind=_text(_get(data, "type", what), "type"),
        neg=_flag(data.get("neg", False), "neg"),
        fml=_flag(data.get("fml", False), "fml"),
    )


def _parse_conjugation(data: Any) -> Conjugation:
    what = "conjugation"
    _object(data, _CONJ_FIELDS, what)
    return Conjugation(
        prop=tuple(_parse_property(p) for p in _seq(_get(data, "prop", what), "prop")),
        readok=bool_seq(_get(data, "readok", what)),
        reading=_opt_text(data.get("reading"), "reading"),
        gloss=tuple(_parse_gloss(g) for g in _seq(data.get("gloss", []), "gloss")),
        via=tuple(_parse_conjugation(v) for v in _seq(data.get("via", []), "via")),
    )


def _parse_counter(data: Any) -> Counter:
    what = "counter"
    _object(data, _COUNTER_FIELDS, what)
    return Counter(
        value=_text(_get(data, "value", what), "value"),
        ordinal=bool_seq(_get(data, "ordinal", what)),
    )


def _parse_plain(data: Any) -> Plain:
    what = "plain word"
    _object(data, _PLAIN_FIELDS, what)
    seq = data.get("seq")
    counter = data.get("counter")
    return Plain(
        meta=_parse_meta(data, what),
        seq=None if seq is None else _int(seq, "seq", 0, _U32_MAX),
        gloss=tuple(_parse_gloss(g) for g in _seq(data.get("gloss", []), "gloss")),
        conj=tuple(_parse_conjugation(c) for c in _seq(data.get("conj", []), "conj")),
        counter=None if counter is None else _parse_counter(counter),
        suffix=_opt_text(data.get("suffix"), "suffix"),
    )


def _parse_compound(data: Any) -> Compound:
    what = "compound word"
    _object(data, _COMPOUND_FIELDS, what)
    return Compound(
        meta=_parse_meta(data, what),
        compound=tuple(
            _text(part, "compound") for part in _seq(_get(data, "compound", what), "compound")
        ),
        components=tuple(
            parse_term(c) for c in _seq(_get(data, "components", what), "components")
        ),
    )


def parse_word(data: Any) -> Word:
    """Parse a plain or compound word from its JSON value."""
    try:
        return _parse_plain(data)
    except ValueError as plain_error:
        try:
            return _parse_compound(data)
        except ValueError as compound_error:
            raise ValueError(
                f"data did not match any word variant: {plain_error}; {compound_error}"
            ) from None


def parse_term(data: Any) -> Term:
    """Parse a word or a list of alternatives from its JSON value."""
    try:
        return parse_word(data)
    except ValueError as word_error:
        try:
            obj = _object(data, None, "alternative")
            alts = _seq(_get(obj, "alternative", "alternative"), "alternative")
            return Alternative(tuple(parse_word(w) for w in alts))
        except ValueError:
            raise ValueError(f"data did not match any term variant: {word_error}") from None


def _parse_romanized(data: Any) -> Romanized:
    if not isinstance(data, list) or len(data) != 3:
        raise ValueError(f"expected a romanized triple, got {data!r}")
    romaji, term, extra = data
    return Romanized(
        romaji=_text(romaji, "romaji"),
        term=parse_term(term),
        extra=tuple(_int(b, "extra", 0, 255) for b in _seq(extra, "extra")),
    )


def _parse_clause(data: Any) -> Clause:
    if not isinstance(data, list) or len(data) != 2:
        raise ValueError(f"expected a clause pair, got {data!r}")
    items, score = data
    return Clause(
        romanized=tuple(_parse_romanized(item) for item in _seq(items, "romanized")),
        score=_int(score, "score", _I32_MIN, _I32_MAX),
    )


def parse_segment(data: Any) -> Segment:
    """Parse a skipped string or a list of candidate clauses."""
    if isinstance(data, str):
        return Skipped(data)
    if isinstance(data, list):
        return tuple(_parse_clause(clause) for clause in data)
    raise ValueError(f"expected a string or a list of clauses, got {data!r}")


def parse_root(data: Any) -> Root:
    """Parse a root from its JSON value."""
    if not isinstance(data, list):
        raise ValueError(f"expected a list of segments, got {type(data).__name__}")
    return Root(tuple(parse_segment(segment) for segment in data))