"""Japanese text segmentation, romanization and kanji lookup backed by ichiran-cli."""

__version__ = "0.1.0"