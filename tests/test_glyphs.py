import pytest

from niinii.glyphs import ContextFlags, GlyphAtlas
from niinii.ranges import FONT_BASIC_RANGES, JA_GLYPH_BASE, default_japanese_glyphs
from niinii.romanize import (
    Alternative,
    Clause,
    Compound,
    Conjugation,
    Meta,
    Plain,
    Romanized,
    Root,
    Skipped,
)


def _plain(text, conj=()):
    return Plain(meta=Meta(reading=text, text=text, kana="", score=1), conj=conj)


def test_new_atlas_is_dirty():
    assert GlyphAtlas().dirty is True


def test_mark_clean():
    atlas = GlyphAtlas()
    atlas.mark_clean()
    assert atlas.dirty is False


def test_flags_kept():
    atlas = GlyphAtlas(ContextFlags.SUPPORTS_ATLAS_UPDATE)
    assert ContextFlags.SUPPORTS_ATLAS_UPDATE in atlas.flags
    assert ContextFlags.SHARED_RENDER_CONTEXT not in atlas.flags


def test_ranges_layout():
    atlas = GlyphAtlas()
    ranges = atlas.glyph_ranges()
    assert tuple(ranges[: len(FONT_BASIC_RANGES)]) == FONT_BASIC_RANGES
    assert ranges[:2] == [0x0020, 0x00FF]
    assert ranges[-1] == 0
    defaults = default_japanese_glyphs()
    assert len(ranges) == len(FONT_BASIC_RANGES) + 2 * len(defaults) + 1
    assert ranges[len(FONT_BASIC_RANGES) : len(FONT_BASIC_RANGES) + 2] == [
        JA_GLYPH_BASE,
        JA_GLYPH_BASE,
    ]


def test_default_glyphs_known():
    atlas = GlyphAtlas()
    assert all(atlas.has_glyph(code) for code in default_japanese_glyphs())


def test_add_unknown_kanji():
    atlas = GlyphAtlas()
    atlas.mark_clean()
    before = atlas.glyph_ranges()
    atlas.add_unknown_glyphs("a\u3400")
    assert atlas.has_glyph(0x3400)
    assert atlas.dirty is True
    after = atlas.glyph_ranges()
    assert after == before[:-1] + [0x3400, 0x3400, 0]


def test_non_kanji_ignored():
    atlas = GlyphAtlas()
    atlas.mark_clean()
    before = atlas.glyph_ranges()
    atlas.add_unknown_glyphs("abc ひらがな カタカナ")
    assert atlas.glyph_ranges() == before
    assert atlas.dirty is False


def test_known_kanji_not_added_twice():
    atlas = GlyphAtlas()
    atlas.add_unknown_glyphs("\u3400")
    atlas.mark_clean()
    before = atlas.glyph_ranges()
    atlas.add_unknown_glyphs("\u3400\u3400" + chr(JA_GLYPH_BASE))
    assert atlas.glyph_ranges() == before
    assert atlas.dirty is False


def test_add_from_root():
    conj = Conjugation(prop=(), readok=False, reading="\u3401")
    plain = _plain("\u3400", conj=(conj,))
    alt = Alternative((_plain("\u3402"), _plain("\u3403")))
    compound = Compound(
        meta=Meta(reading="", text="\u3404", kana="", score=1),
        compound=(),
        components=(alt,),
    )
    clause = Clause(
        romanized=(Romanized("x", plain), Romanized("y", compound)),
        score=0,
    )
    root = Root((Skipped("\u3405"), (clause,)))
    atlas = GlyphAtlas()
    atlas.add_unknown_glyphs_from_root(root)
    for c in "\u3400\u3401\u3402\u3403\u3404":
        assert atlas.has_glyph(ord(c))
    assert not atlas.has_glyph(0x3405)


def test_flat_root_adds_nothing():
    atlas = GlyphAtlas()
    atlas.mark_clean()
    before = atlas.glyph_ranges()
    atlas.add_unknown_glyphs_from_root(Root((Skipped("\u3400"),)))
    assert atlas.glyph_ranges() == before
    assert atlas.dirty is False


def test_overflow_raises():
    atlas = GlyphAtlas()
    text = "".join(chr(code) for code in range(0x3400, 0x4DB6))
    with pytest.raises(OverflowError):
        atlas.add_unknown_glyphs(text)