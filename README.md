# niinii

A library for glossing Japanese text. It drives an installed `ichiran-cli` executable and turns
its output into Python objects: romanized clauses, conjugation chains, kanji readings and JMdict
part-of-speech data. It has no third-party dependencies.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

Talking to ichiran needs a working `ichiran-cli` and the PostgreSQL database it reads from.
`niinii` can start and stop that database for you. Splitting, character classes and parsing of
ichiran's JSON work without either.

## Modules

- `niinii.charset`: `is_hiragana`, `is_katakana`, `is_kanji`, `is_radical`, `is_half_katakana`,
  `is_jp_symbol`, `is_jp_misc`, `is_full_alphanum` and `is_japanese`, each taking one character.
- `niinii.split`: `basic_split(text)` cuts a string into a list of `(Split.TEXT, run)` and
  `(Split.SKIP, run)` pairs, the runs ichiran segments and the ones it leaves alone.
- `niinii.romanize`: the parse tree (`Root`, `Skipped`, `Clause`, `Romanized`, `Plain`,
  `Compound`, `Alternative`, `Meta`, `Gloss`, `Conjugation`, `Property`, `Counter`),
  `Root.from_json`, `parse_root`, `parse_segment`, `parse_term`, `parse_word`, and
  `term_text`, `term_kana`, `term_reading`. Unknown fields are rejected with `ValueError`.
  `Alternative.best()` returns the highest-scoring candidate, `Conjugation.flatten()` lists every
  leaf-to-root path through its `via` tree, `Gloss.pos_split()` splits `"[n,n-adv,prt]"` into
  `["n", "n-adv", "prt"]`, and `Root.is_flat()` is true when every segment was skipped.
- `niinii.kanji`: `Kanji`, `Reading` and `ReadingType` (printed as `On`, `Kun`, `On/Kun`), with
  `Kanji.from_json` and `Kanji.grade_desc()`.
- `niinii.jmdict`: `JmDictData.load(path)` reads the tab-separated `kwpos.csv` from a JMdict data
  directory into `kwpos_by_kw`; `JmDictData.from_rows` builds the same from rows. The keyword
  `cop-da` is added as an alias of `cop`.
- `niinii.coerce`: `bool_seq`, `no_zwnj`, `option_seq` and `option_seq_dump`, the coercions used
  for ichiran's irregular JSON.
- `niinii.lisp`: `lisp_interpret(expr)` reads one literal Lisp value (strings, numbers,
  `true`/`false`, `()` and quoted lists) into Python; `lisp_escape_string(text)` escapes quotes
  and backslashes.
- `niinii.errors`: `IchiranError` and its subclasses `ProcessFailure`, `ParseError` and
  `LispError`.
- `niinii.ichiran`: `Ichiran(path)`, an async client that runs `ichiran-cli -e <expr>` from the
  executable's directory. It offers `romanize(text, limit)`, `kanji(chars)`,
  `kanji_from_str(text)`, `jmdict_data()`, `jmdict_path()`, `conn_params()` and `evaluate(expr)`.
  Romanized runs and kanji are kept in least-recently-used caches of 512 entries each, and the
  JMdict data is loaded once.
- `niinii.pgdaemon`: `PostgresDaemon`, which starts `postgres -p <port> -D <data>` on
  construction and stops it with `pg_ctl --wait -D <data> stop` in `stop()` or on leaving a
  `with` block. A failure to start is logged and kept in its `error` attribute. `pg_bin_path`
  builds a program path with the platform's executable extension.
- `niinii.parser`: `Parser`, which runs romanization, kanji lookup and JMdict loading together
  and returns a `SyntaxTree`. `Parser.create` starts the database when ichiran reports its
  connection parameters, and runs without one otherwise.
- `niinii.glyphs` and `niinii.ranges`: `GlyphAtlas` tracks which code points a font atlas must
  cover, starting from basic ranges and common kanji and adding kanji met in text or in a parse
  tree; `default_japanese_glyphs()` lists those common kanji.

## Example

```python
import asyncio

from niinii.parser import Parser


async def main():
    parser = await Parser.create(
        "/opt/ichiran/ichiran-cli",
        "/usr/lib/postgresql/bin",
        "/var/lib/ichiran/data",
    )
    with parser:
        tree = await parser.parse("6月20日は国連が決めた「世界難民の日」です。", 1)
        for segment in tree.root.segments:
            print(segment)
        for char, kanji in tree.kanji_info.items():
            print(char, kanji.grade_desc())


asyncio.run(main())
```

Splitting needs no external program:

```python
from niinii.split import basic_split

for kind, text in basic_split("国連のUNHCRとユニクロ"):
    print(kind, text)
```

`Parser.parse` refuses text longer than 512 bytes of UTF-8 with `TextTooLongError`, a
`ValueError`. Failures of `ichiran-cli` are raised as subclasses of `IchiranError`.

## What it does not do

This is a library only. It has no command-line program and no window or overlay for showing
glosses. It does not translate text or speak it, and it does not install ichiran or its database.
`GlyphAtlas` records code points but does not load or render fonts.