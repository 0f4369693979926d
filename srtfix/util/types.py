"""Core data types for the srtfix correction pipeline.

This module defines the structures shared by the directive parser, the
replacers and the pipeline report. Directives and rules are parsed once per
run and discarded afterwards.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class CorrectionDirective:
    """A positional correction aimed at one subtitle cue.

    Attributes:
        cue_number: Cue index token as written in the corrections file
        original_text: Literal text expected inside the cue
        replacement_text: Text that replaces the first occurrence
        annotation: Optional free-form note after `` - ``
        source_label: Bracketed prefix (usually a timestamp), reporting only
        raw_line: The unparsed input line
        line_number: 1-based line within the corrections file

    Invariant: original_text and replacement_text are non-empty.
    """
    cue_number: str
    original_text: str
    replacement_text: str
    annotation: Optional[str] = None
    source_label: Optional[str] = None
    raw_line: str = ""
    line_number: int = 0


@dataclass(frozen=True)
class KnownWordRule:
    """An unconditional global replacement from the known-words list."""
    original_text: str
    replacement_text: str
    case_sensitive: bool = False
    raw_line: str = ""
    line_number: int = 0


@dataclass(frozen=True)
class CueBlock:
    """A cue block inside a list of lines.

    ``start`` is the index of the cue-number line and ``end`` is exclusive,
    so the body lines are ``lines[start + 1:end]``.
    """
    cue_number: str
    start: int
    end: int


@dataclass
class SubtitleText:
    """Working copy of a subtitle file as an ordered list of lines.

    Lines are stored without their ``\\n`` terminator; a ``\\r`` from CRLF
    files stays attached to the line. Joining with ``\\n`` reproduces the
    original text exactly.
    """
    lines: List[str]
    encoding: str = "utf-8"
    has_bom: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)


class ReplaceOutcome(str, Enum):
    CUE = "cue"
    FALLBACK = "fallback"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ReplaceResult:
    outcome: ReplaceOutcome
    line_number: Optional[int] = None  # 1-based physical line
    cue_number: Optional[str] = None


@dataclass(frozen=True)
class Failure:
    """A directive or rule that could not be applied."""
    kind: str    # "parse" | "not_found"
    source: str  # "corrections" | "known_words"
    line_number: int
    entry: str
    reason: str


@dataclass(frozen=True)
class AppliedCorrection:
    """A correction that changed the working copy, kept for verbose output."""
    source: str
    original_text: str
    replacement_text: str
    outcome: str
    line_number: Optional[int] = None
    cue_number: Optional[str] = None
    label: Optional[str] = None
    occurrences: int = 1


@dataclass
class CorrectionReport:
    """Accumulated result of one correction run."""
    target: Path
    output: Path
    backup: Optional[Path] = None
    cue_corrections: int = 0
    fallback_corrections: int = 0
    known_word_rules_applied: int = 0
    known_word_replacements: int = 0
    failures: List[Failure] = field(default_factory=list)
    applied: List[AppliedCorrection] = field(default_factory=list)
    written: bool = False

    @property
    def corrections_applied(self) -> int:
        return self.cue_corrections + self.fallback_corrections

    @property
    def error_count(self) -> int:
        return len(self.failures)
