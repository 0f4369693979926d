from __future__ import annotations

from pathlib import Path

import pytest

from srtfix.errors import DirectiveParseError
from srtfix.parsers.directives import (
    load_directives,
    load_known_word_rules,
    parse_directive_line,
    parse_known_word_line,
)


def test_parse_directive_with_label_and_annotation() -> None:
    d = parse_directive_line("[note] 5:too eat:to eat - grammar", 3)
    assert d is not None
    assert d.cue_number == "5"
    assert d.original_text == "too eat"
    assert d.replacement_text == "to eat"
    assert d.annotation == "grammar"
    assert d.source_label == "note"
    assert d.line_number == 3


def test_parse_directive_keeps_colons_in_original() -> None:
    d = parse_directive_line("[x] 12:Hello: World:Hello, World")
    assert d is not None
    assert d.cue_number == "12"
    assert d.original_text == "Hello: World"
    assert d.replacement_text == "Hello, World"
    assert d.annotation is None


def test_parse_directive_timestamp_label() -> None:
    d = parse_directive_line("[00:01:23] 7:recieve:receive")
    assert d is not None
    assert d.source_label == "00:01:23"
    assert d.cue_number == "7"
    assert d.original_text == "recieve"


def test_parse_directive_bare_form() -> None:
    d = parse_directive_line("8: teh cat : the cat ")
    assert d is not None
    assert d.source_label is None
    assert (d.cue_number, d.original_text, d.replacement_text) == ("8", "teh cat", "the cat")


def test_parse_directive_leading_dash_is_not_annotation() -> None:
    d = parse_directive_line("4:-Hi:- Hello")
    assert d is not None
    assert d.replacement_text == "- Hello"
    assert d.annotation is None


@pytest.mark.parametrize("line", ["", "   ", "# comment", "-", " - "])
def test_parse_directive_skips(line: str) -> None:
    assert parse_directive_line(line) is None


@pytest.mark.parametrize(
    "line",
    [
        "[x] 5:only one colon",
        "no colon at all",
        "[x] :orig:fixed",
        "5:   :fixed",
        "5:orig:   ",
    ],
)
def test_parse_directive_failures(line: str) -> None:
    with pytest.raises(DirectiveParseError):
        parse_directive_line(line)


def test_parse_known_word_default_case_insensitive() -> None:
    r = parse_known_word_line("teh > the")
    assert r is not None
    assert (r.original_text, r.replacement_text, r.case_sensitive) == ("teh", "the", False)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("teh>the", ("teh", "the")),
        ("a > b > c", ("a", "c")),
        ("x->y > z", ("x-", "z")),
    ],
)
def test_parse_known_word_splits_like_first_and_last_separator(line: str, expected: tuple[str, str]) -> None:
    r = parse_known_word_line(line)
    assert r is not None
    assert (r.original_text, r.replacement_text) == expected


def test_parse_known_word_case_marker() -> None:
    r = parse_known_word_line("Nasa > NASA [case]")
    assert r is not None
    assert r.case_sensitive is True
    assert r.replacement_text == "NASA"


@pytest.mark.parametrize("line", ["", "# teh > the", "no separator here"])
def test_parse_known_word_skips(line: str) -> None:
    assert parse_known_word_line(line) is None


@pytest.mark.parametrize("line", [" > the", "teh > ", "> [case]"])
def test_parse_known_word_failures(line: str) -> None:
    with pytest.raises(DirectiveParseError):
        parse_known_word_line(line)


def test_load_directives_collects_failures(tmp_path: Path) -> None:
    p = tmp_path / "corrections.txt"
    p.write_text(
        "# suggestions\n"
        "[00:00:01] 1:helo:hello\n"
        "-\n"
        "\n"
        "garbage line\n"
        "2:wrold:world - typo\n",
        encoding="utf-8",
    )
    directives, failures = load_directives(p)

    assert [d.original_text for d in directives] == ["helo", "wrold"]
    assert [d.line_number for d in directives] == [2, 6]
    assert len(failures) == 1
    assert failures[0].kind == "parse"
    assert failures[0].line_number == 5
    assert failures[0].entry == "garbage line"


def test_load_known_word_rules_tolerates_bom(tmp_path: Path) -> None:
    p = tmp_path / "known_words.txt"
    p.write_bytes("\ufeffteh > the\nbad >\nNasa > NASA [case]\n".encode("utf-8"))
    rules, failures = load_known_word_rules(p)

    assert [r.original_text for r in rules] == ["teh", "Nasa"]
    assert rules[1].case_sensitive
    assert len(failures) == 1
    assert failures[0].source == "known_words"


def test_rule_files_share_the_subtitle_decoding(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from srtfix.data import storage

    monkeypatch.setattr(storage.chardet, "detect", lambda data: {"encoding": "big5", "confidence": 0.99})
    p = tmp_path / "known_words.txt"
    p.write_bytes("臺灣 > 台灣\n".encode("big5"))
    c = tmp_path / "corrections.txt"
    c.write_bytes("[00:00:01] 1:臺北:台北 - 簡寫\n".encode("big5"))

    rules, failures = load_known_word_rules(p)
    assert failures == []
    assert (rules[0].original_text, rules[0].replacement_text) == ("臺灣", "台灣")

    directives, failures = load_directives(c)
    assert failures == []
    assert directives[0].original_text == "臺北"
    assert directives[0].annotation == "簡寫"
