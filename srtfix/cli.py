"""srtfix CLI - apply corrections.txt and known_words.txt to an SRT subtitle.

Usage:
  srtfix my_subtitle.srt
  srtfix my_subtitle.srt --no-cue-targeting --verbose
  srtfix my_subtitle.srt --restore

Rule files and the backup live in the rules folder (``--rules-dir``, or the
SRTFIX_RULES_DIR environment variable).
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich import print
from rich.console import Console
from rich.markup import escape

from .config import RULES_DIR, CorrectionPipelineConfig
from .data.storage import restore_backup
from .errors import IntegrityViolation, MissingInputError, OutputEncodingError
from .pipelines import CorrectionPipeline


app = typer.Typer(add_completion=False, no_args_is_help=True)


def _configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)


@app.command()
def correct(
	subtitle: Path = typer.Argument(..., help="Subtitle file (.srt) to correct"),
	no_cue_targeting: bool = typer.Option(
		False, "--no-cue-targeting", help="Ignore cue numbers and always search the whole file"
	),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every applied correction and debug logs"),
	rules_dir: Path = typer.Option(RULES_DIR, "--rules-dir", help="Folder with corrections.txt, known_words.txt and backups (default: SRTFIX_RULES_DIR, the source checkout, or the current directory)"),
	corrections: Path | None = typer.Option(None, "--corrections", help="Corrections file; overrides --rules-dir"),
	known_words: Path | None = typer.Option(None, "--known-words", help="Known-words file; overrides --rules-dir"),
	output: Path | None = typer.Option(None, "--output", "-o", help="Write the result here instead of in place"),
	corrected_copy: bool = typer.Option(
		False, "--corrected-copy", help="Write <rules-dir>/<name>.corrected and leave the subtitle untouched"
	),
	restore: bool = typer.Option(False, "--restore", help="Restore the subtitle from its backup and exit"),
) -> None:
	"""Apply positional corrections and known-word rules to a subtitle file."""
	_configure_logging(verbose)
	if output is not None and corrected_copy:
		raise typer.BadParameter("Use either --output or --corrected-copy, not both")

	config = CorrectionPipelineConfig(
		target=subtitle.expanduser().absolute(),
		rules_dir=rules_dir.expanduser().absolute(),
		corrections_file=corrections,
		known_words_file=known_words,
		output=output,
		use_cue_targeting=not no_cue_targeting,
		verbose=verbose,
	)
	if corrected_copy:
		config.output = config.corrected_copy_path

	if restore:
		if not config.backup_path.is_file():
			print(f"[red]No backup found at[/red] {escape(str(config.backup_path))}")
			raise typer.Exit(code=1)
		restore_backup(config.backup_path, config.target)
		print(f"[green]Restored[/green] {escape(str(config.target))} from {escape(str(config.backup_path))}")
		return

	console = Console()
	console.rule("SRT subtitle correction")
	print(f"Subtitle: {escape(str(config.target))}")
	print(f"Corrections: {escape(str(config.corrections_path))}")
	print(f"Known words: {escape(str(config.known_words_path))}")
	print(f"Output: {escape(str(config.output_path))}")

	try:
		report = CorrectionPipeline(config, console=console).run()
	except MissingInputError as e:
		print(f"[red]Error:[/red] {escape(str(e))}")
		raise typer.Exit(code=1)
	except (IntegrityViolation, OutputEncodingError) as e:
		print(f"[red]Aborted:[/red] {escape(str(e))}")
		raise typer.Exit(code=1)

	if report.error_count:
		print(f"[yellow]{report.error_count} entries could not be applied.[/yellow]")
	print("[green]Correction complete![/green]")


if __name__ == "__main__":
	app()
