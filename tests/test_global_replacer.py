from __future__ import annotations

import pytest

from srtfix.correction.global_replacer import (
    apply_known_word_rule,
    apply_known_word_rule_to_subtitle,
    check_line_count,
)
from srtfix.errors import IntegrityViolation
from srtfix.util.types import KnownWordRule, SubtitleText


def test_case_insensitive_rule_matches_any_case() -> None:
    rule = KnownWordRule("teh", "the")
    out, count = apply_known_word_rule("Teh cat\nteh dog\nTEH bird", rule)
    assert out == "the cat\nthe dog\nthe bird"
    assert count == 3


def test_case_sensitive_rule_matches_exact_case_only() -> None:
    rule = KnownWordRule("Nasa", "NASA", case_sensitive=True)
    out, count = apply_known_word_rule("Nasa and nasa", rule)
    assert out == "NASA and nasa"
    assert count == 1


def test_replacement_is_literal() -> None:
    rule = KnownWordRule("a.b", r"\1\g<0>")
    out, count = apply_known_word_rule("a.b axb", rule)
    assert out == r"\1\g<0> axb"
    assert count == 1


def test_rule_is_idempotent() -> None:
    rule = KnownWordRule("colour", "color")
    once, _ = apply_known_word_rule("Colour of colours", rule)
    twice, count = apply_known_word_rule(once, rule)
    assert once == twice == "color of colors"
    assert count == 0


def test_check_line_count() -> None:
    rule = KnownWordRule("x", "y")
    check_line_count(4, 4, rule)
    with pytest.raises(IntegrityViolation) as exc:
        check_line_count(4, 5, rule)
    assert exc.value.before == 4
    assert exc.value.after == 5
    assert exc.value.rule is rule


def test_subtitle_rule_updates_working_copy() -> None:
    subtitle = SubtitleText(lines=["1", "Teh cat", "", "2", "teh dog", ""])
    count = apply_known_word_rule_to_subtitle(subtitle, KnownWordRule("teh", "the"))
    assert count == 2
    assert subtitle.lines == ["1", "the cat", "", "2", "the dog", ""]


def test_subtitle_rule_that_adds_lines_is_rejected() -> None:
    subtitle = SubtitleText(lines=["1", "one two", ""])
    with pytest.raises(IntegrityViolation):
        apply_known_word_rule_to_subtitle(subtitle, KnownWordRule(" ", "\n"))
    # working copy left as it was
    assert subtitle.lines == ["1", "one two", ""]
