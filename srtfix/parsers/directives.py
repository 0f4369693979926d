"""Parsers for the two correction sources.

corrections.txt holds positional corrections, one per line::

	[00:01:23] 12:original text:corrected text - optional note
	12:original text:corrected text

known_words.txt holds global replacements, one per line::

	teh > the
	Nasa > NASA [case]

Subtitle dialogue often contains colons, so the directive payload is split
on its first and last colon only; everything in between is the original text.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from ..data.storage import decode_subtitle_bytes
from ..errors import DirectiveParseError
from ..util.types import CorrectionDirective, Failure, KnownWordRule


logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
NO_SUGGESTION_MARKER = "-"
ANNOTATION_SEPARATOR = " - "

_label_re = re.compile(r"^\[([^\]]*)\]\s*")
_case_marker_re = re.compile(r"\s*\[case\]\s*$", re.IGNORECASE)


def _is_skippable(stripped: str) -> bool:
	return not stripped or stripped.startswith(COMMENT_MARKER)


def parse_directive_line(line: str, line_number: int = 0) -> Optional[CorrectionDirective]:
	"""Parse one corrections.txt line.

	Returns ``None`` for blank lines, comments and the ``-`` placeholder.
	Raises :class:`DirectiveParseError` when the line cannot be parsed.
	"""
	raw = line.rstrip("\r\n")
	stripped = raw.strip()
	if _is_skippable(stripped) or stripped == NO_SUGGESTION_MARKER:
		return None

	label: Optional[str] = None
	payload = stripped
	m = _label_re.match(stripped)
	if m:
		label = m.group(1)
		payload = stripped[m.end():]

	parts = payload.split(":")
	if len(parts) < 3:
		raise DirectiveParseError(f"expected cue:original:corrected, got: {raw}")

	cue_number = parts[0].strip()
	original = ":".join(parts[1:-1]).strip()
	last = parts[-1]

	# Only the replacement field can carry the annotation
	annotation: Optional[str] = None
	last = last.strip()
	idx = last.find(ANNOTATION_SEPARATOR)
	if idx >= 0:
		annotation = last[idx + len(ANNOTATION_SEPARATOR):].strip() or None
		last = last[:idx]
	replacement = last.strip()

	if not cue_number:
		raise DirectiveParseError(f"missing cue number: {raw}")
	if not original:
		raise DirectiveParseError(f"missing original text: {raw}")
	if not replacement:
		raise DirectiveParseError(f"missing corrected text: {raw}")

	return CorrectionDirective(
		cue_number=cue_number,
		original_text=original,
		replacement_text=replacement,
		annotation=annotation,
		source_label=label,
		raw_line=raw,
		line_number=line_number,
	)


def parse_known_word_line(line: str, line_number: int = 0) -> Optional[KnownWordRule]:
	"""Parse one known_words.txt line (``original > replacement [case]``).

	Lines without a ``>`` separator are ignored, like blanks and comments.
	"""
	raw = line.rstrip("\r\n")
	stripped = raw.strip()
	if _is_skippable(stripped) or ">" not in stripped:
		return None

	case_sensitive = False
	body = stripped
	m = _case_marker_re.search(body)
	if m:
		case_sensitive = True
		body = body[:m.start()]

	# Original ends at the first ">", replacement starts after the last one
	original = body.partition(">")[0].strip()
	replacement = body.rpartition(">")[2].strip()
	if not original or not replacement:
		raise DirectiveParseError(f"expected 'original > corrected', got: {raw}")

	return KnownWordRule(
		original_text=original,
		replacement_text=replacement,
		case_sensitive=case_sensitive,
		raw_line=raw,
		line_number=line_number,
	)


def _read_rule_lines(path: Path) -> List[str]:
	# Rule files may share the subtitle's legacy encoding (Big5, GBK, ...)
	return decode_subtitle_bytes(path.read_bytes()).lines


def load_directives(path: Path) -> Tuple[List[CorrectionDirective], List[Failure]]:
	"""Parse every line of a corrections file, collecting parse failures."""
	directives: List[CorrectionDirective] = []
	failures: List[Failure] = []
	for i, line in enumerate(_read_rule_lines(path), start=1):
		try:
			directive = parse_directive_line(line, i)
		except DirectiveParseError as e:
			logger.warning("Cannot parse correction on line %d: %s", i, e)
			failures.append(Failure("parse", "corrections", i, line.strip(), str(e)))
			continue
		if directive is not None:
			directives.append(directive)
	logger.debug("Loaded %d corrections from %s", len(directives), path)
	return directives, failures


def load_known_word_rules(path: Path) -> Tuple[List[KnownWordRule], List[Failure]]:
	"""Parse every line of a known-words file, collecting parse failures."""
	rules: List[KnownWordRule] = []
	failures: List[Failure] = []
	for i, line in enumerate(_read_rule_lines(path), start=1):
		try:
			rule = parse_known_word_line(line, i)
		except DirectiveParseError as e:
			logger.warning("Cannot parse known word on line %d: %s", i, e)
			failures.append(Failure("parse", "known_words", i, line.strip(), str(e)))
			continue
		if rule is not None:
			rules.append(rule)
	logger.debug("Loaded %d known-word rules from %s", len(rules), path)
	return rules, failures
