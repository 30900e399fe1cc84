"""Tracking of the glyphs a font atlas has to hold."""

from __future__ import annotations

from enum import Enum, Flag

from .charset import is_kanji
from .ranges import FONT_BASIC_RANGES, default_japanese_glyphs
from .romanize import Alternative, Compound, Plain, Root, Skipped

GLYPH_RANGE_CAPACITY = 16384


class TextStyle(Enum):
    """Style a font is used for."""

    KANJI = "kanji"
    BODY = "body"


class ContextFlags(Flag):
    """Capabilities of the rendering context."""

    NONE = 0
    SUPPORTS_ATLAS_UPDATE = 1 << 0
    SHARED_RENDER_CONTEXT = 1 << 1


class GlyphAtlas:
    """The set of glyph ranges a font atlas is built from.

    Starts with the basic ranges and common kanji; kanji met in text are
    added as single-glyph ranges, marking the atlas as needing a rebuild.
    """

    def __init__(self, flags: ContextFlags = ContextFlags.NONE) -> None:
        self.flags = flags
        self._added: set[int] = set()
        self._ranges: list[int] = list(FONT_BASIC_RANGES)
        self._dirty = True
        for code in default_japanese_glyphs():
            self._add_glyph(code)

    @property
    def dirty(self) -> bool:
        """Whether the atlas must be rebuilt."""
        return self._dirty

    def _add_glyph(self, code: int) -> None:
        # Two slots for the range and one for the terminator.
        if len(self._ranges) + 3 > GLYPH_RANGE_CAPACITY:
            raise OverflowError("glyph range buffer is full")
        self._added.add(code)
        self._ranges.extend((code, code))
        self._dirty = True

    def has_glyph(self, code: int) -> bool:
        """Whether the glyph was added beyond the basic ranges."""
        return code in self._added

    def add_unknown_glyphs(self, text: str) -> None:
        """Add every kanji of the text that is not yet in the atlas."""
        for c in text:
            if is_kanji(c):
                code = ord(c)
                if not self.has_glyph(code):
                    self._add_glyph(code)

    def add_unknown_glyphs_from_root(self, root: Root) -> None:
        """Add the kanji found anywhere in a parse tree."""
        for segment in root.segments:
            if isinstance(segment, Skipped):
                continue
            for clause in segment:
                for item in clause.romanized:
                    self._visit_term(item.term)

    def _visit_term(self, term) -> None:
        if isinstance(term, Alternative):
            for word in term.alternative:
                self._visit_word(word)
        else:
            self._visit_word(term)

    def _visit_word(self, word) -> None:
        self.add_unknown_glyphs(word.meta.text)
        if isinstance(word, Plain):
            for conj in word.conj:
                if conj.reading is not None:
                    self.add_unknown_glyphs(conj.reading)
        elif isinstance(word, Compound):
            for component in word.components:
                self._visit_term(component)

    def glyph_ranges(self) -> list[int]:
        """Inclusive (first, last) pairs, terminated by a zero."""
        return [*self._ranges, 0]

    def mark_clean(self) -> None:
        """Record that the atlas has been rebuilt."""
        self._dirty = False