"""Reading, writing and backing up subtitle files.

Subtitles are loaded into a :class:`SubtitleText` working copy so the
correction passes operate on a list of lines. Writing re-encodes with the
encoding (and BOM) the file was read with, so untouched lines come back
byte-identical.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

import chardet  # type: ignore

from ..errors import OutputEncodingError
from ..util.types import SubtitleText


logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"
_ERRORS = "surrogateescape"


def decode_subtitle_bytes(data: bytes) -> SubtitleText:
	"""Decode raw subtitle bytes into a working copy.

	UTF-8 (with or without BOM) is tried first; anything else goes through
	chardet detection, falling back to UTF-8. Undecodable bytes are kept as
	surrogate escapes so they are written back unchanged.
	"""
	if data.startswith(_UTF8_BOM):
		text = data[len(_UTF8_BOM):].decode("utf-8", errors=_ERRORS)
		return SubtitleText(lines=text.split("\n"), encoding="utf-8", has_bom=True)

	try:
		text = data.decode("utf-8")
		return SubtitleText(lines=text.split("\n"), encoding="utf-8")
	except UnicodeDecodeError:
		pass

	detected = chardet.detect(data)
	encoding = detected.get("encoding") or "utf-8"
	confidence = detected.get("confidence") or 0
	logger.info("Detected encoding: %s (confidence: %.2f%%)", encoding, confidence * 100)
	try:
		text = data.decode(encoding)
	except (UnicodeDecodeError, LookupError):
		logger.warning("Failed to decode with %s, falling back to UTF-8 with error handling", encoding)
		text = data.decode("utf-8", errors=_ERRORS)
		encoding = "utf-8"
	return SubtitleText(lines=text.split("\n"), encoding=encoding)


def encode_subtitle_text(subtitle: SubtitleText) -> bytes:
	"""Encode the working copy with the encoding it was read with.

	Raises :class:`OutputEncodingError` when a correction introduced text
	that the subtitle's encoding cannot represent.
	"""
	try:
		data = subtitle.text.encode(subtitle.encoding, errors=_ERRORS)
	except UnicodeEncodeError as e:
		raise OutputEncodingError(
			f"Corrected text cannot be written as {subtitle.encoding}: {e.object[e.start:e.end]!r}"
		) from e
	return _UTF8_BOM + data if subtitle.has_bom else data


def read_subtitle(path: Path) -> SubtitleText:
	"""Read a subtitle file into a working copy."""
	return decode_subtitle_bytes(path.read_bytes())


def write_subtitle(path: Path, subtitle: SubtitleText) -> None:
	"""Write the working copy to ``path``.

	The data goes to a temporary file in the same folder first and is then
	moved over ``path``, so a failed write never leaves a half-written file.
	"""
	ensure_parent_dir(path)
	data = encode_subtitle_text(subtitle)
	fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
	try:
		with os.fdopen(fd, "wb") as f:
			f.write(data)
		os.replace(tmp_name, path)
	except BaseException:
		Path(tmp_name).unlink(missing_ok=True)
		raise


def write_backup(source: Path, backup: Path) -> Path:
	"""Copy ``source`` to ``backup``, replacing any older backup."""
	ensure_parent_dir(backup)
	if backup.exists():
		logger.info("Removing old backup %s", backup)
		backup.unlink()
	shutil.copy2(source, backup)
	logger.info("Created backup %s", backup)
	return backup


def restore_backup(backup: Path, target: Path) -> None:
	"""Copy the backup verbatim over ``target``."""
	shutil.copyfile(backup, target)
	logger.warning("Restored %s from backup %s", target, backup)


def ensure_parent_dir(path: Path) -> None:
	"""Ensure the parent directory for ``path`` exists (idempotent)."""
	path.parent.mkdir(parents=True, exist_ok=True)
