"""Client for the ichiran command-line tool, with caching of its answers."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import threading
from collections import OrderedDict
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .charset import is_kanji
from .errors import LispError, ParseError, ProcessFailure
from .jmdict import JmDictData
from .kanji import Kanji
from .lisp import lisp_escape_string, lisp_interpret
from .romanize import Root, Segment, Skipped
from .split import Split, basic_split

log = logging.getLogger(__name__)

CACHE_CAPACITY = 512

_JMDICT_EXPR = '(format t "~d" ichiran/dict::*jmdict-data*)'
_CONN_EXPR = '(format t "~{~a~^,~}" ichiran/conn::*connection*)'
_PORT = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class ConnParams:
    """Database connection parameters used by ichiran."""

    database: str
    user: str
    password: str
    hostname: str
    port: int


class _LruCache:
    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._items: OrderedDict[Hashable, Any] = OrderedDict()

    def get(self, key: Hashable) -> Any:
        if key not in self._items:
            return None
        self._items.move_to_end(key)
        return self._items[key]

    def __contains__(self, key: Hashable) -> bool:
        return key in self._items

    def put(self, key: Hashable, value: Any) -> None:
        self._items[key] = value
        self._items.move_to_end(key)
        while len(self._items) > self._capacity:
            self._items.popitem(last=False)


def _first_line(output: str) -> str | None:
    if not output:
        return None
    line = output.split("\n", 1)[0]
    return line[:-1] if line.endswith("\r") else line


def _lisp_string(output: str) -> str:
    value = lisp_interpret(output)
    if not isinstance(value, str):
        raise LispError(f"expected a string, got {value!r}")
    return value


class Ichiran:
    """Runs ichiran-cli to segment text and look up kanji."""

    def __init__(self, path: str | os.PathLike) -> None:
        self._path = os.fspath(path)
        self._lock = threading.Lock()
        self._kanji_cache = _LruCache(CACHE_CAPACITY)
        self._segment_cache = _LruCache(CACHE_CAPACITY)
        self._jmdict: JmDictData | None = None

    @property
    def path(self) -> Path:
        """Path of the ichiran-cli executable."""
        return Path(self._path)

    def working_dir(self) -> Path:
        """The directory ichiran-cli lives in, which it runs from."""
        path = Path(self._path)
        if not self._path or path.parent == path:
            raise FileNotFoundError("Could not find working directory of ichiran-cli")
        return path.parent

    async def evaluate(self, expr: str) -> str:
        """Evaluate a Lisp expression with ichiran and return its raw output."""
        cwd = self.working_dir()
        log.debug("evaluate expr=%r", expr)
        program = os.path.abspath(self._path) if os.path.dirname(self._path) else self._path
        proc = await asyncio.create_subprocess_exec(
            program,
            "-e",
            expr,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise ProcessFailure(proc.returncode, stderr.decode("utf-8", errors="replace"))
        return stdout.decode("utf-8")

    async def jmdict_path(self) -> Path:
        """Directory of the JMdict data that ichiran was built with."""
        working_dir = self.working_dir()
        output = await self.evaluate(_JMDICT_EXPR)
        line = _first_line(output)
        if line is None:
            raise ParseError(output)
        return working_dir / line

    async def romanize(self, text: str, limit: int) -> Root:
        """Segment and romanize text, keeping up to ``limit`` candidates."""
        if limit <= 0:
            raise ValueError("limit must be positive")
        splits = basic_split(text)
        queries = sorted({run for kind, run in splits if kind is Split.TEXT})

        with self._lock:
            table: dict[str, Segment] = {}
            for query in queries:
                segment = self._segment_cache.get(query)
                if segment is not None:
                    table[query] = segment

        missing = [query for query in queries if query not in table]
        fetched = await asyncio.gather(*(self._romanize_one(q, limit) for q in missing))

        with self._lock:
            for query, segment in zip(missing, fetched):
                self._segment_cache.put(query, segment)
        table.update(zip(missing, fetched))

        return Root(
            tuple(table[run] if kind is Split.TEXT else Skipped(run) for kind, run in splits)
        )

    async def _romanize_one(self, text: str, limit: int) -> Segment:
        output = await self.evaluate(
            f'(jsown:to-json (ichiran:romanize* "{lisp_escape_string(text)}" :limit {limit}))'
        )
        document = _lisp_string(output)
        try:
            root = Root.from_json(document)
        except ValueError as err:
            raise ParseError(document) from err
        if len(root.segments) != 1:
            raise ParseError(document)
        return root.segments[0]

    async def kanji(self, chars: Iterable[str]) -> dict[str, Kanji]:
        """Look up kanji information for each character."""
        chars = list(chars)
        with self._lock:
            found: dict[str, Kanji] = {}
            for c in chars:
                info = self._kanji_cache.get(c)
                if info is not None:
                    found[c] = info
            query = [c for c in chars if c not in self._kanji_cache]

        if not query:
            return found

        commands = " ".join(
            f"(jsown:to-json (ichiran/kanji:kanji-info-json #\\{c}))" for c in query
        )
        output = await self.evaluate(f"(list {commands})")
        documents = lisp_interpret(f"'{output}")
        if not isinstance(documents, list) or not all(isinstance(d, str) for d in documents):
            raise LispError(f"expected a list of strings, got {documents!r}")

        parsed: list[Kanji] = []
        for document in documents:
            if document == "[]":
                continue
            try:
                info = Kanji.from_json(document)
            except ValueError as err:
                raise ParseError(document) from err
            if not info.text:
                raise ParseError(document)
            parsed.append(info)

        with self._lock:
            for info in parsed:
                c = info.text[0]
                found[c] = info
                self._kanji_cache.put(c, info)
        return found

    async def kanji_from_str(self, text: str) -> dict[str, Kanji]:
        """Look up every distinct kanji in the text."""
        return await self.kanji(sorted(set(filter(is_kanji, text))))

    async def jmdict_data(self) -> JmDictData:
        """Part-of-speech data of the JMdict used by ichiran, loaded once."""
        with self._lock:
            if self._jmdict is not None:
                return self._jmdict
        path = await self.jmdict_path()
        data = await asyncio.to_thread(JmDictData.load, path)
        with self._lock:
            self._jmdict = data
        return data

    async def conn_params(self) -> ConnParams:
        """Database connection parameters ichiran is configured with."""
        output = await self.evaluate(_CONN_EXPR)
        line = _first_line(output)
        if line is None:
            raise ParseError(output)
        fields = line.split(",")
        if len(fields) != 6:
            raise ParseError(output)
        database, user, password, hostname, _, port = fields
        if not _PORT.fullmatch(port) or int(port) > 0xFFFF:
            raise ParseError(output)
        return ConnParams(
            database=database,
            user=user,
            password=password,
            hostname=hostname,
            port=int(port),
        )