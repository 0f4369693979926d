"""Known-word replacement across the whole subtitle, with a line-count guard."""

from __future__ import annotations

import re
from typing import Tuple

from ..errors import IntegrityViolation
from ..util.types import KnownWordRule, SubtitleText


def apply_known_word_rule(text: str, rule: KnownWordRule) -> Tuple[str, int]:
	"""Replace every occurrence of the rule's text.

	Matching is literal; without ``case_sensitive`` it ignores letter case.
	The replacement is inserted as-is (no backreference expansion).
	Returns the new text and the number of replacements made.
	"""
	if rule.case_sensitive:
		count = text.count(rule.original_text)
		return text.replace(rule.original_text, rule.replacement_text), count
	pattern = re.compile(re.escape(rule.original_text), re.IGNORECASE)
	return pattern.subn(lambda _m: rule.replacement_text, text)


def check_line_count(before: int, after: int, rule: KnownWordRule) -> None:
	"""Raise :class:`IntegrityViolation` if a replacement added or removed lines."""
	if before != after:
		raise IntegrityViolation(rule, before, after)


def apply_known_word_rule_to_subtitle(subtitle: SubtitleText, rule: KnownWordRule) -> int:
	"""Apply ``rule`` to the working copy, guarding its line count.

	The working copy is only updated when the guard passes.
	"""
	before = subtitle.line_count
	text, count = apply_known_word_rule(subtitle.text, rule)
	lines = text.split("\n")
	check_line_count(before, len(lines), rule)
	subtitle.lines = lines
	return count
