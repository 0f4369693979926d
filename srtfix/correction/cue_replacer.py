"""Cue-scoped replacement with whole-file fallback.

A positional correction names a cue number, but numbering in the suggestion
source may drift from the subtitle (re-numbered or re-split cues). The text
is therefore looked up in the named cue first and, when it is not there, in
the whole file. Only the first literal occurrence on a single line changes.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional

from ..util.types import CorrectionDirective, CueBlock, ReplaceOutcome, ReplaceResult


logger = logging.getLogger(__name__)

_cue_number_re = re.compile(r"^[0-9]+$")


def is_cue_number(token: str) -> bool:
	"""Return True if ``token`` is a non-negative integer written in ASCII digits."""
	return bool(_cue_number_re.match(token.strip()))


def iter_cue_blocks(lines: List[str]) -> Iterator[CueBlock]:
	"""Yield cue blocks in file order.

	A block starts at a line consisting only of digits and runs up to the
	next such line or the end of the file. Lines before the first cue number
	belong to no block.
	"""
	start: Optional[int] = None
	number = ""
	for i, line in enumerate(lines):
		stripped = line.strip()
		if stripped and is_cue_number(stripped):
			if start is not None:
				yield CueBlock(number, start, i)
			start, number = i, stripped
	if start is not None:
		yield CueBlock(number, start, len(lines))


def find_cue_block(lines: List[str], cue_number: str) -> Optional[CueBlock]:
	"""Return the first block labelled ``cue_number``; duplicates after it are ignored."""
	wanted = cue_number.strip()
	for block in iter_cue_blocks(lines):
		if block.cue_number == wanted:
			return block
	return None


def _replace_on_line(lines: List[str], index: int, original: str, replacement: str) -> None:
	lines[index] = lines[index].replace(original, replacement, 1)


def replace_in_block(lines: List[str], block: CueBlock, original: str, replacement: str) -> Optional[int]:
	"""Replace the first occurrence inside the body of ``block``.

	Returns the 1-based line number touched, or None if no body line has it.
	"""
	for i in range(block.start + 1, block.end):
		if original in lines[i]:
			_replace_on_line(lines, i, original, replacement)
			return i + 1
	return None


def replace_first_in_file(lines: List[str], original: str, replacement: str) -> Optional[int]:
	"""Replace the first occurrence of ``original`` anywhere in the file.

	Returns the 1-based line number touched, or None if no line has it.
	"""
	for i, line in enumerate(lines):
		if original in line:
			_replace_on_line(lines, i, original, replacement)
			return i + 1
	return None


def apply_directive(
	lines: List[str],
	directive: CorrectionDirective,
	*,
	use_cue_targeting: bool = True,
) -> ReplaceResult:
	"""Apply one positional correction to ``lines`` in place."""
	original = directive.original_text
	replacement = directive.replacement_text

	if use_cue_targeting and is_cue_number(directive.cue_number):
		block = find_cue_block(lines, directive.cue_number)
		if block is None:
			logger.debug("Cue %s not found, searching the whole file", directive.cue_number)
		else:
			line_number = replace_in_block(lines, block, original, replacement)
			if line_number is not None:
				return ReplaceResult(ReplaceOutcome.CUE, line_number, block.cue_number)
			logger.debug("'%s' not in cue %s, searching the whole file", original, directive.cue_number)

	line_number = replace_first_in_file(lines, original, replacement)
	if line_number is None:
		return ReplaceResult(ReplaceOutcome.NOT_FOUND)
	return ReplaceResult(ReplaceOutcome.FALLBACK, line_number)
