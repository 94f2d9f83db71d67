from __future__ import annotations

from core.data import (
    SHEET_COLUMNS,
    entries_to_frame,
    load_dictionary,
    map_row,
    normalize_field,
    parse_csv,
    parse_tags,
    split_csv_line,
)
from core.models import ExampleSentence

from conftest import SHEET_URL, mock_client

HEADER = "id,akha,pronunciation,thai,english,category,tags,ex_akha,ex_thai,ex_english"


def test_parse_keeps_valid_rows_in_order(sample_csv: str) -> None:
    entries = parse_csv(sample_csv)
    assert [e.id for e in entries] == ["w1", "w2", "auto-2", "w4"]
    assert entries[0].headword == "Aq kaq"
    assert entries[0].primary_translation == "อาข่า"
    assert entries[0].secondary_translation == "Akha"


def test_parse_defaults_category_and_example(sample_csv: str) -> None:
    entries = {e.id: e for e in parse_csv(sample_csv)}
    assert entries["w4"].category == "General"
    assert entries["w4"].example is None
    assert entries["w4"].tags == ()
    assert entries["w2"].example == ExampleSentence(headword="Hhaq ma", primary="หมูตัวนี้", secondary="This pig")
    assert entries["w2"].tags == ("farm", "food")


def test_header_only_or_empty_returns_empty() -> None:
    assert parse_csv("") == []
    assert parse_csv(HEADER) == []
    assert parse_csv(HEADER + "\n\n   \n") == []


def test_rejects_missing_headword_or_translations() -> None:
    text = "\n".join(
        [
            HEADER,
            "a,,x,thai,english,,,,,",
            "b,   ,x,thai,english,,,,,",
            "c,word,x,,,,,,,",
            "d,word,x,,english,,,,,",
        ]
    )
    assert [e.id for e in parse_csv(text)] == ["d"]


def test_quoted_comma_and_escaped_quote() -> None:
    text = HEADER + '\nq1,"Ab,cd",,"She said ""hi""",x,,,,,\n'
    entry = parse_csv(text)[0]
    assert entry.headword == "Ab,cd"
    assert entry.primary_translation == 'She said "hi"'


def test_blank_lines_do_not_consume_an_index() -> None:
    text = HEADER + "\r\n\r\nw0,one,,t,,,,,,\r\n   \r\n,two,,t,,,,,,\r\n"
    entries = parse_csv(text)
    assert [e.id for e in entries] == ["w0", "auto-1"]


def test_auto_id_uses_position_among_data_rows() -> None:
    text = "\n".join([HEADER, "a,one,,t,,,,,,", "b,,,,,,,,,", ",three,,t,,,,,,"])
    entries = parse_csv(text)
    assert entries[-1].id == "auto-2"


def test_tags_are_trimmed() -> None:
    assert parse_tags("a | b|c") == ("a", "b", "c")
    assert parse_tags("") == ()
    assert parse_tags("a||b") == ("a", "", "b")
    assert parse_tags("solo") == ("solo",)


def test_split_respects_quote_parity() -> None:
    assert split_csv_line('1,"x,y",z') == ["1", '"x,y"', "z"]
    assert split_csv_line("a,,b,") == ["a", "", "b", ""]


def test_normalize_field() -> None:
    assert normalize_field('  "hello"  ') == "hello"
    assert normalize_field('"') == '"'
    assert normalize_field('say ""yes""') == 'say "yes"'


def test_map_row_pads_and_truncates() -> None:
    short = map_row(["id1", "word"])
    assert short["headword"] == "word"
    assert short["example_secondary"] == ""
    long = map_row([str(i) for i in range(15)])
    assert list(long) == list(SHEET_COLUMNS)
    assert long["example_secondary"] == "9"


def test_entries_to_frame(sample_csv: str) -> None:
    df = entries_to_frame(parse_csv(sample_csv))
    assert list(df.columns) == list(SHEET_COLUMNS)
    assert len(df) == 4
    assert df.loc[df["id"] == "w2", "tags"].iloc[0] == "farm|food"
    assert entries_to_frame([]).empty


def test_load_dictionary_success(sample_csv: str) -> None:
    result = load_dictionary(SHEET_URL, client=mock_client(sample_csv))
    assert result.ok
    assert len(result.entries) == 4


def test_load_dictionary_failures_yield_empty() -> None:
    failed = load_dictionary(SHEET_URL, client=mock_client("boom", status_code=500))
    assert not failed.ok
    assert failed.entries == ()
    assert "500" in failed.error

    unconfigured = load_dictionary(None)
    assert not unconfigured.ok
    assert unconfigured.error == "no data source configured"
