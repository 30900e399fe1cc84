"""Turning text into a glossed syntax tree with ichiran."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass

from .errors import IchiranError
from .ichiran import Ichiran
from .jmdict import JmDictData
from .kanji import Kanji
from .pgdaemon import PostgresDaemon
from .romanize import Root

log = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 512


class TextTooLongError(ValueError):
    """The text is longer than the parser accepts."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"Text too long ({length}/{MAX_TEXT_LENGTH} chars)")


@dataclass
class SyntaxTree:
    """A parsed text with the data needed to gloss it."""

    original_text: str
    root: Root
    kanji_info: dict[str, Kanji]
    jmdict_data: JmDictData

    def empty(self) -> bool:
        """Whether nothing in the text was segmented."""
        return self.root.is_flat()


class Parser:
    """Parses text with ichiran, optionally owning its database server."""

    def __init__(self, ichiran: Ichiran, pg_daemon: PostgresDaemon | None = None) -> None:
        self._ichiran = ichiran
        self._pg_daemon = pg_daemon

    @property
    def ichiran(self) -> Ichiran:
        return self._ichiran

    @property
    def pg_daemon(self) -> PostgresDaemon | None:
        return self._pg_daemon

    @classmethod
    async def create(
        cls,
        ichiran_path: str | os.PathLike,
        postgres_path: str | os.PathLike,
        db_path: str | os.PathLike,
    ) -> Parser:
        """Make a parser, starting postgres if ichiran reports its parameters."""
        ichiran = Ichiran(ichiran_path)
        try:
            conn_params = await ichiran.conn_params()
        except (IchiranError, OSError):
            log.warning("could not get db conn params from ichiran")
            return cls(ichiran, None)
        return cls(ichiran, PostgresDaemon(postgres_path, db_path, conn_params, False))

    async def parse(self, text: str, variants: int) -> SyntaxTree:
        """Parse text, keeping up to ``variants`` segmentations per run."""
        length = len(text.encode("utf-8"))
        if length > MAX_TEXT_LENGTH:
            raise TextTooLongError(length)
        ichiran = self._ichiran
        root, kanji_info, jmdict_data = await asyncio.gather(
            ichiran.romanize(text, variants),
            ichiran.kanji_from_str(text),
            ichiran.jmdict_data(),
        )
        return SyntaxTree(
            original_text=text,
            root=root,
            kanji_info=kanji_info,
            jmdict_data=jmdict_data,
        )

    def close(self) -> None:
        """Stop the database server, if one was started."""
        if self._pg_daemon is not None:
            self._pg_daemon.stop()

    def __enter__(self) -> Parser:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()