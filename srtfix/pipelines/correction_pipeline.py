"""Subtitle correction pipeline.

This pipeline takes a subtitle file, applies the positional corrections from
corrections.txt and then the known-word rules from known_words.txt, and
writes the result. A run is a single transaction: the file is backed up and
loaded into memory first, both passes mutate the in-memory copy, and the
copy is only written when every step succeeded.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import CorrectionPipelineConfig
from ..correction.cue_replacer import apply_directive
from ..correction.global_replacer import apply_known_word_rule_to_subtitle
from ..data.storage import read_subtitle, write_backup, write_subtitle
from ..errors import IntegrityViolation, MissingInputError, OutputEncodingError
from ..parsers.directives import load_directives, load_known_word_rules
from ..util.types import (
    AppliedCorrection,
    CorrectionDirective,
    CorrectionReport,
    Failure,
    KnownWordRule,
    ReplaceOutcome,
    SubtitleText,
)


logger = logging.getLogger(__name__)


class CorrectionPipeline:
    """Pipeline for applying corrections to one subtitle file."""

    def __init__(self, config: CorrectionPipelineConfig, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console()

    def run(self) -> CorrectionReport:
        """Run both correction passes and persist the result.

        Raises:
            MissingInputError: the subtitle or both rule files are missing
            IntegrityViolation: a known-word rule changed the line count; the
                target is left as it was before the run
            OutputEncodingError: the corrected text does not fit the
                subtitle's encoding; the target is left untouched
        """
        has_corrections, has_known_words = self._check_inputs()
        report = CorrectionReport(target=self.config.target, output=self.config.output_path)

        # Phase 1: Snapshot
        subtitle = read_subtitle(self.config.target)
        report.backup = write_backup(self.config.target, self.config.backup_path)
        self._log_progress(f"Backup written to {report.backup}")

        # Phase 2: Positional corrections
        if has_corrections:
            self._log_progress("Applying corrections...")
            directives, failures = load_directives(self.config.corrections_path)
            report.failures.extend(failures)
            self._apply_directives(subtitle, directives, report)
            self._log_progress(f"Corrections done: {report.corrections_applied} applied")

        # Phase 3: Known words
        if has_known_words:
            self._log_progress("Applying known-word rules...")
            rules, failures = load_known_word_rules(self.config.known_words_path)
            report.failures.extend(failures)
            try:
                self._apply_known_words(subtitle, rules, report)
            except IntegrityViolation as e:
                self._log_error(f"{e}; nothing was written, {self.config.target} matches backup {report.backup}")
                raise
            self._log_progress(f"Known words done: {report.known_word_rules_applied} rules applied")

        # Phase 4: Persist
        try:
            write_subtitle(self.config.output_path, subtitle)
        except OutputEncodingError as e:
            self._log_error(f"{e}; nothing was written, {self.config.target} matches backup {report.backup}")
            raise
        report.written = True
        logger.info("Wrote %s", self.config.output_path)

        self._output_summary(report)
        return report

    def _check_inputs(self) -> tuple[bool, bool]:
        """Return which rule files exist, failing when nothing can be done."""
        if not self.config.target.is_file():
            raise MissingInputError(f"Subtitle file not found: {self.config.target}")

        has_corrections = self.config.corrections_path.is_file()
        has_known_words = self.config.known_words_path.is_file()
        if not has_corrections:
            self._log_warning(f"{self.config.corrections_path} not found, skipping corrections")
        if not has_known_words:
            self._log_warning(f"{self.config.known_words_path} not found, skipping known words")
        if not has_corrections and not has_known_words:
            raise MissingInputError(
                f"Neither {self.config.corrections_path} nor {self.config.known_words_path} exists"
            )
        return has_corrections, has_known_words

    def _apply_directives(
        self,
        subtitle: SubtitleText,
        directives: List[CorrectionDirective],
        report: CorrectionReport,
    ) -> None:
        for directive in directives:
            result = apply_directive(
                subtitle.lines,
                directive,
                use_cue_targeting=self.config.use_cue_targeting,
            )
            if result.outcome is ReplaceOutcome.NOT_FOUND:
                self._log_warning(f"Original text not found: '{directive.original_text}'")
                report.failures.append(
                    Failure(
                        "not_found",
                        "corrections",
                        directive.line_number,
                        directive.raw_line,
                        f"'{directive.original_text}' not found",
                    )
                )
                continue

            if result.outcome is ReplaceOutcome.CUE:
                report.cue_corrections += 1
                where = f"cue {result.cue_number}, line {result.line_number}"
            else:
                report.fallback_corrections += 1
                where = f"line {result.line_number}"
            prefix = f"[{directive.source_label}] " if directive.source_label else ""
            self._log_detail(
                f"{prefix}Corrected ({where}): '{directive.original_text}' -> '{directive.replacement_text}'"
            )
            report.applied.append(
                AppliedCorrection(
                    source="corrections",
                    original_text=directive.original_text,
                    replacement_text=directive.replacement_text,
                    outcome=result.outcome.value,
                    line_number=result.line_number,
                    cue_number=result.cue_number,
                    label=directive.source_label,
                )
            )

    def _apply_known_words(
        self,
        subtitle: SubtitleText,
        rules: List[KnownWordRule],
        report: CorrectionReport,
    ) -> None:
        for rule in rules:
            count = apply_known_word_rule_to_subtitle(subtitle, rule)
            report.known_word_rules_applied += 1
            report.known_word_replacements += count
            case_info = "case-sensitive" if rule.case_sensitive else "case-insensitive"
            self._log_detail(
                f"Replaced '{rule.original_text}' -> '{rule.replacement_text}' "
                f"({case_info}, {count} occurrence(s))"
            )
            if count:
                report.applied.append(
                    AppliedCorrection(
                        source="known_words",
                        original_text=rule.original_text,
                        replacement_text=rule.replacement_text,
                        outcome="global",
                        occurrences=count,
                    )
                )

    def _log_progress(self, message: str) -> None:
        """Log progress message."""
        if self.console:
            self.console.print(f"[blue]{escape(message)}[/blue]")

    def _log_warning(self, message: str) -> None:
        logger.debug(message)
        if self.console:
            self.console.print(f"[yellow]Warning: {escape(message)}[/yellow]")

    def _log_error(self, message: str) -> None:
        """Log error message."""
        logger.debug(message)
        if self.console:
            self.console.print(f"[red]{escape(message)}[/red]")

    def _log_detail(self, message: str) -> None:
        logger.debug(message)
        if self.console and self.config.verbose:
            self.console.print(f"  {escape(message)}")

    def _output_summary(self, report: CorrectionReport) -> None:
        """Print the end-of-run summary as tables."""
        table = Table(title=f"Correction Summary - {report.target.name}")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Cue corrections", str(report.cue_corrections))
        table.add_row("Whole-file corrections", str(report.fallback_corrections))
        table.add_row("Known-word rules", str(report.known_word_rules_applied))
        table.add_row("Known-word replacements", str(report.known_word_replacements))
        table.add_row("Unresolved entries", str(report.error_count))
        table.add_row("", "")  # Empty row for spacing
        table.add_row("Backup", escape(str(report.backup)))
        table.add_row("Output", escape(str(report.output)))
        self.console.print(table)

        if report.failures:
            failure_table = Table(title="Unresolved Entries")
            failure_table.add_column("File", style="cyan")
            failure_table.add_column("Line", justify="right")
            failure_table.add_column("Entry")
            failure_table.add_column("Reason", style="red")
            for f in report.failures:
                failure_table.add_row(f.source, str(f.line_number), escape(f.entry), escape(f.reason))
            self.console.print(failure_table)

        if self.config.verbose and report.applied:
            applied_table = Table(title="Applied Corrections")
            applied_table.add_column("Source", style="cyan")
            applied_table.add_column("Where")
            applied_table.add_column("Original")
            applied_table.add_column("Corrected", style="green")
            for a in report.applied:
                if a.outcome == "global":
                    where = f"{a.occurrences}x"
                elif a.cue_number is not None:
                    where = f"cue {a.cue_number} / line {a.line_number}"
                else:
                    where = f"line {a.line_number}"
                applied_table.add_row(a.source, where, escape(a.original_text), escape(a.replacement_text))
            self.console.print(applied_table)
