"""Project-level configuration for rule file locations and backups.

Locations can be overridden via environment variables:
- SRTFIX_RULES_DIR: folder holding the rule files and backups (defaults to the
  source checkout when run from one, otherwise the current directory)
- SRTFIX_CORRECTIONS_FILE: positional corrections (defaults to <rules>/corrections.txt)
- SRTFIX_KNOWN_WORDS_FILE: known-word rules (defaults to <rules>/known_words.txt)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Optional


def _project_root() -> Path:
	"""Return an approximation of the project root (parent of the package)."""
	return Path(__file__).resolve().parents[1]


def default_rules_dir(project_root: Optional[Path] = None) -> Path:
	"""Return the project root for a source checkout, else the current directory.

	An installed package lives in site-packages, which must not receive rule
	files or backups.
	"""
	root = project_root if project_root is not None else _project_root()
	if (root / "pyproject.toml").is_file():
		return root
	return Path.cwd()


CORRECTIONS_FILENAME: Final[str] = "corrections.txt"
KNOWN_WORDS_FILENAME: Final[str] = "known_words.txt"
BACKUP_SUFFIX: Final[str] = ".bak"
CORRECTED_SUFFIX: Final[str] = ".corrected"

RULES_DIR: Final[Path] = Path(os.getenv("SRTFIX_RULES_DIR", default_rules_dir()))
CORRECTIONS_FILE: Final[Path] = Path(os.getenv("SRTFIX_CORRECTIONS_FILE", RULES_DIR / CORRECTIONS_FILENAME))
KNOWN_WORDS_FILE: Final[Path] = Path(os.getenv("SRTFIX_KNOWN_WORDS_FILE", RULES_DIR / KNOWN_WORDS_FILENAME))


@dataclass
class CorrectionPipelineConfig:
	"""Options for a single correction run.

	``output`` defaults to the target itself (in-place correction). The backup
	always lands in ``rules_dir`` next to the rule files.
	"""
	target: Path
	rules_dir: Path = RULES_DIR
	corrections_file: Optional[Path] = None
	known_words_file: Optional[Path] = None
	output: Optional[Path] = None
	use_cue_targeting: bool = True
	verbose: bool = False

	@property
	def corrections_path(self) -> Path:
		if self.corrections_file is not None:
			return self.corrections_file
		if self.rules_dir == RULES_DIR:
			return CORRECTIONS_FILE
		return self.rules_dir / CORRECTIONS_FILENAME

	@property
	def known_words_path(self) -> Path:
		if self.known_words_file is not None:
			return self.known_words_file
		if self.rules_dir == RULES_DIR:
			return KNOWN_WORDS_FILE
		return self.rules_dir / KNOWN_WORDS_FILENAME

	@property
	def output_path(self) -> Path:
		return self.output if self.output is not None else self.target

	@property
	def backup_path(self) -> Path:
		return self.rules_dir / f"{self.target.name}{BACKUP_SUFFIX}"

	@property
	def corrected_copy_path(self) -> Path:
		"""Sibling output used when the target must stay untouched."""
		return self.rules_dir / f"{self.target.name}{CORRECTED_SUFFIX}"
