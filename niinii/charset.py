"""Classification of characters by Japanese Unicode block."""


def is_hiragana(c: str) -> bool:
    """Whether the character is hiragana."""
    return "\u3041" <= c <= "\u3096"


def is_katakana(c: str) -> bool:
    """Whether the character is full-width katakana."""
    return "\u30a0" <= c <= "\u30ff"


def is_kanji(c: str) -> bool:
    """Whether the character is a CJK ideograph."""
    return (
        "\u3400" <= c <= "\u4db5"
        or "\u4e00" <= c <= "\u9fcb"
        or "\uf900" <= c <= "\ufa6a"
    )


def is_radical(c: str) -> bool:
    """Whether the character is a CJK radical."""
    return "\u2e80" <= c <= "\u2fd5"


def is_half_katakana(c: str) -> bool:
    """Whether the character is half-width katakana."""
    return "\uff5f" <= c <= "\uff9f"


def is_jp_symbol(c: str) -> bool:
    """Whether the character is a CJK symbol or punctuation mark."""
    return "\u3000" <= c <= "\u303f"


def is_jp_misc(c: str) -> bool:
    """Whether the character is a miscellaneous Japanese character."""
    return (
        "\u31f0" <= c <= "\u31ff"
        or "\u3220" <= c <= "\u3243"
        or "\u3280" <= c <= "\u337f"
    )


def is_full_alphanum(c: str) -> bool:
    """Whether the character is a full-width letter, digit or sign."""
    return "\uff01" <= c <= "\uff5e"


def is_japanese(c: str) -> bool:
    """Whether the character belongs to any Japanese block."""
    return (
        is_hiragana(c)
        or is_katakana(c)
        or is_kanji(c)
        or is_radical(c)
        or is_half_katakana(c)
        or is_jp_symbol(c)
        or is_jp_misc(c)
        or is_full_alphanum(c)
    )