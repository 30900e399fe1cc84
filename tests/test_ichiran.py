import json
import sys
from pathlib import Path

import pytest

from niinii.errors import ParseError, ProcessFailure
from niinii.ichiran import ConnParams, Ichiran
from niinii.kanji import Kanji, Reading, ReadingType
from niinii.lisp import lisp_escape_string
from niinii.romanize import Clause, Counter, Gloss, Meta, Plain, Romanized, Root, Skipped

FAKE_CLI = """#!@PYTHON@
import json, os, sys
from pathlib import Path
here = Path(__file__).resolve().parent
expr = sys.argv[2]
with open(here / "calls.log", "a", encoding="utf-8") as log:
    log.write(json.dumps({"cwd": os.getcwd(), "expr": expr}) + "\\n")
table = json.loads((here / "responses.json").read_text(encoding="utf-8"))
if expr not in table:
    sys.stderr.write("no response for " + expr)
    sys.exit(3)
sys.stdout.buffer.write(table[expr].encode("utf-8"))
"""

JMDICT_EXPR = '(format t "~d" ichiran/dict::*jmdict-data*)'
CONN_EXPR = '(format t "~{~a~^,~}" ichiran/conn::*connection*)'
KURU_EXPR = r"(list (jsown:to-json (ichiran/kanji:kanji-info-json #\来)))"
KURU_WAKU_EXPR = (
    r"(list (jsown:to-json (ichiran/kanji:kanji-info-json #\来)) "
    r"(jsown:to-json (ichiran/kanji:kanji-info-json #\枠)))"
)


def romanize_expr(text, limit=1):
    return f'(jsown:to-json (ichiran:romanize* "{text}" :limit {limit}))'


def lisp_str(text):
    return '"' + lisp_escape_string(text) + '"'


def lisp_list(documents):
    return "(" + " ".join(lisp_str(d) for d in documents) + ")\n"


KURU_READINGS = [
    ("らい", "rai", "ja_on", [], 54, "71.05%"),
    ("たい", "tai", "ja_on", [], 1, "1.32%"),
    ("き", "ki", "ja_kun", ["たす", "たる"], 16, "21.05%"),
    ("く", "ku", "ja_kun", ["る"], 5, "6.58%"),
    ("きた", "kita", "ja_kun", ["す", "る"], 0, "0.00%"),
    ("こ", "ko", "ja_kun", [], 0, "0.00%"),
]
KURU_MEANINGS = ["come", "due", "next", "cause", "become"]

KURU_JSON = json.dumps(
    {
        "text": "来",
        "rc": 75,
        "rn": 4,
        "strokes": 7,
        "total": 76,
        "irr": 0,
        "irr_perc": "0.00%",
        "readings": [
            {"text": t, "rtext": r, "type": ty, "okuri": o, "sample": s, "perc": p}
            for t, r, ty, o, s, p in KURU_READINGS
        ],
        "meanings": KURU_MEANINGS,
        "freq": 102,
        "grade": 2,
    },
    ensure_ascii=False,
)

KURU = Kanji(
    text="来",
    radical_code=75,
    nelson_radical_code=4,
    stroke_count=7,
    total_usage_count=76,
    irregular_usage_count=0,
    irregular_percentage="0.00%",
    readings=tuple(
        Reading(t, r, ReadingType(ty), tuple(o), s, p) for t, r, ty, o, s, p in KURU_READINGS
    ),
    meanings=tuple(KURU_MEANINGS),
    freq=102,
    grade=2,
)

NIKAIME_TERM = {
    "reading": "2回目 【にかいめ】",
    "text": "2回目",
    "kana": "にかいめ",
    "score": 696,
    "seq": 1199330,
    "gloss": [{"pos": "[ctr]", "gloss": "counter for occurrences"}],
    "conj": [],
    "counter": {"value": "Value: 2nd", "ordinal": True},
}
NIKAIME_JSON = json.dumps([[[[["nikaime", NIKAIME_TERM, []]], 696]]], ensure_ascii=False)

NIKAIME_SEGMENT = (
    Clause(
        romanized=(
            Romanized(
                "nikaime",
                Plain(
                    meta=Meta(
                        reading="2回目 【にかいめ】", text="2回目", kana="にかいめ", score=696
                    ),
                    seq=1199330,
                    gloss=(Gloss(pos="[ctr]", gloss="counter for occurrences"),),
                    conj=(),
                    counter=Counter(value="Value: 2nd", ordinal=True),
                    suffix=None,
                ),
                (),
            ),
        ),
        score=696,
    ),
)


@pytest.fixture
def cli(tmp_path):
    script = tmp_path / "ichiran-cli"
    script.write_text(FAKE_CLI.replace("@PYTHON@", sys.executable), encoding="utf-8")
    script.chmod(0o755)
    respond(script, {})
    return script


def respond(cli, table):
    (cli.parent / "responses.json").write_text(
        json.dumps(table, ensure_ascii=False), encoding="utf-8"
    )


def calls(cli):
    log = cli.parent / "calls.log"
    if not log.exists():
        return []
    return [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]


def test_fixture_path(tmp_path):
    path = tmp_path / "data" / "ichiran-cli"
    ichiran = Ichiran(path)
    assert ichiran.path == path
    assert ichiran.working_dir() == tmp_path / "data"


def test_working_dir_of_empty_path():
    with pytest.raises(FileNotFoundError):
        Ichiran("").working_dir()


@pytest.mark.asyncio
async def test_evaluate_runs_in_working_dir(cli):
    respond(cli, {"(+ 1 2)": "3\n"})
    assert await Ichiran(cli).evaluate("(+ 1 2)") == "3\n"
    (call,) = calls(cli)
    assert call["expr"] == "(+ 1 2)"
    assert Path(call["cwd"]).resolve() == cli.parent.resolve()


@pytest.mark.asyncio
async def test_evaluate_failure(cli):
    with pytest.raises(ProcessFailure) as info:
        await Ichiran(cli).evaluate("(oops)")
    assert info.value.status == 3
    assert "no response for (oops)" in info.value.stderr


@pytest.mark.asyncio
async def test_romanize_match(cli):
    respond(cli, {romanize_expr("2回目"): lisp_str(NIKAIME_JSON) + "\n"})
    root = await Ichiran(cli).romanize("2回目", 1)
    assert root == Root((NIKAIME_SEGMENT,))


@pytest.mark.asyncio
async def test_romanize_queries_each_run_once_and_caches(cli):
    respond(cli, {romanize_expr("2回目"): lisp_str(NIKAIME_JSON)})
    ichiran = Ichiran(cli)
    root = await ichiran.romanize("2回目、2回目", 1)
    assert root.segments == (NIKAIME_SEGMENT, Skipped("、"), NIKAIME_SEGMENT)
    again = await ichiran.romanize("2回目", 1)
    assert again == Root((NIKAIME_SEGMENT,))
    assert len(calls(cli)) == 1


@pytest.mark.asyncio
async def test_romanize_skip_only_runs_nothing(cli):
    root = await Ichiran(cli).romanize("UNHCR", 1)
    assert root == Root((Skipped("UNHCR"),))
    assert root.is_flat()
    assert calls(cli) == []


@pytest.mark.asyncio
async def test_romanize_escapes_text(cli):
    respond(cli, {romanize_expr("2回目", 5): lisp_str(NIKAIME_JSON)})
    root = await Ichiran(cli).romanize("2回目", 5)
    assert root.segments[0] == NIKAIME_SEGMENT


@pytest.mark.asyncio
async def test_romanize_rejects_zero_limit(cli):
    with pytest.raises(ValueError):
        await Ichiran(cli).romanize("2回目", 0)


@pytest.mark.asyncio
async def test_romanize_unexpected_segment_count(cli):
    two = json.dumps(["a", "b"])
    respond(cli, {romanize_expr("2回目"): lisp_str(two)})
    with pytest.raises(ParseError):
        await Ichiran(cli).romanize("2回目", 1)


@pytest.mark.asyncio
async def test_kanji_match(cli):
    respond(cli, {KURU_EXPR: lisp_list([KURU_JSON])})
    result = await Ichiran(cli).kanji(["来"])
    assert result["来"] == KURU


@pytest.mark.asyncio
async def test_kanji_skips_unknown_and_caches(cli):
    respond(cli, {KURU_WAKU_EXPR: lisp_list([KURU_JSON, "[]"])})
    ichiran = Ichiran(cli)
    result = await ichiran.kanji(["来", "枠"])
    assert result == {"来": KURU}
    cached = await ichiran.kanji(["来"])
    assert cached == {"来": KURU}
    assert len(calls(cli)) == 1


@pytest.mark.asyncio
async def test_kanji_from_str_deduplicates(cli):
    respond(cli, {KURU_EXPR: lisp_list([KURU_JSON])})
    result = await Ichiran(cli).kanji_from_str("来た来")
    assert result == {"来": KURU}
    assert [c["expr"] for c in calls(cli)] == [KURU_EXPR]


@pytest.mark.asyncio
async def test_kanji_from_str_without_kanji(cli):
    assert await Ichiran(cli).kanji_from_str("ひらがな") == {}
    assert calls(cli) == []


def write_kwpos(directory):
    directory.mkdir()
    (directory / "kwpos.csv").write_text(
        "id\tkw\tdescr\tents\n1\tcop\tcopula\t\n2\tn\tnoun\t\n", encoding="utf-8"
    )


@pytest.mark.asyncio
async def test_jmdict_path(cli):
    respond(cli, {JMDICT_EXPR: "jmdict-data\n"})
    assert await Ichiran(cli).jmdict_path() == cli.parent / "jmdict-data"


@pytest.mark.asyncio
async def test_jmdict_path_empty_output(cli):
    respond(cli, {JMDICT_EXPR: ""})
    with pytest.raises(ParseError):
        await Ichiran(cli).jmdict_path()


@pytest.mark.asyncio
async def test_jmdict_data_is_loaded_once(cli):
    write_kwpos(cli.parent / "jmdict-data")
    respond(cli, {JMDICT_EXPR: "jmdict-data\n"})
    ichiran = Ichiran(cli)
    data = await ichiran.jmdict_data()
    assert data.kwpos_by_kw["cop"].descr == "copula"
    assert data.kwpos_by_kw["cop-da"] == data.kwpos_by_kw["cop"]
    again = await ichiran.jmdict_data()
    assert again is data
    assert len(calls(cli)) == 1


@pytest.mark.asyncio
async def test_conn_params(cli):
    password = "password"
    line = ",".join(["ichiran", "postgres", password, "localhost", "nil", "5432"])
    respond(cli, {CONN_EXPR: line + "\n"})
    params = await Ichiran(cli).conn_params()
    assert params == ConnParams(
        database="ichiran", user="postgres", password=password, hostname="localhost", port=5432
    )


@pytest.mark.asyncio
async def test_conn_params_bad_port(cli):
    password = "password"
    line = ",".join(["ichiran", "postgres", password, "localhost", "nil", "port"])
    respond(cli, {CONN_EXPR: line})
    with pytest.raises(ParseError):
        await Ichiran(cli).conn_params()


@pytest.mark.asyncio
async def test_conn_params_wrong_field_count(cli):
    respond(cli, {CONN_EXPR: "ichiran,postgres\n"})
    with pytest.raises(ParseError):
        await Ichiran(cli).conn_params()