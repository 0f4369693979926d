"""Exceptions raised by the correction pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from .util.types import KnownWordRule


class CorrectionError(RuntimeError):
	"""Base exception for correction run errors."""


class MissingInputError(CorrectionError, FileNotFoundError):
	"""The subtitle file or every rule file is missing."""


class DirectiveParseError(CorrectionError, ValueError):
	"""A corrections or known-words line does not have the expected shape."""


class IntegrityViolation(CorrectionError):
	"""A known-word replacement changed the number of lines in the subtitle."""

	def __init__(self, rule: "KnownWordRule", before: int, after: int) -> None:
		self.rule = rule
		self.before = before
		self.after = after
		super().__init__(
			f"Replacing '{rule.original_text}' changed the line count from {before} to {after}"
		)


class OutputEncodingError(CorrectionError):
	"""The corrected subtitle cannot be encoded in the file's own encoding."""
