"""Local file I/O utilities."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".staging-"
BACKUP_PREFIX = ".previous-"


def ensure_writable_dir(path: Path) -> None:
    """Create a directory if needed and check it can be written to.

    Raises:
        OSError: If the directory cannot be created or is not writable.
    """
    path.mkdir(parents=True, exist_ok=True)
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")
    if not os.access(path, os.W_OK | os.X_OK):
        raise PermissionError(f"Directory is not writable: {path}")


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def commit_files(
    files: Mapping[str, str],
    output_dir: Path,
    directories: tuple[str, ...] = (),
) -> None:
    """
    Write a set of text files into output_dir as a single unit.

    Everything is first written to a staging directory inside output_dir.
    Each top-level entry it replaces is moved aside into a backup directory
    before the new entry is moved in. If any move fails, the entries already
    committed are removed and the backed-up ones are moved back, so
    output_dir ends up either fully old or fully new. Staging and backup
    directories are removed either way.

    Args:
        files: Mapping of POSIX relative path (e.g. "bodies/post.md") to file contents
        output_dir: Destination directory (must already exist)
        directories: Relative directories to replace even when they end up empty
    """
    staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=output_dir))
    backup = Path(tempfile.mkdtemp(prefix=BACKUP_PREFIX, dir=output_dir))
    try:
        for relative in directories:
            (staging / relative).mkdir(parents=True, exist_ok=True)

        for relative, text in files.items():
            target = staging / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8", newline="") as f:
                f.write(text)

        committed = []
        try:
            for entry in sorted(staging.iterdir()):
                destination = output_dir / entry.name
                if destination.exists() or destination.is_symlink():
                    os.replace(destination, backup / entry.name)
                os.replace(entry, destination)
                committed.append(destination)
        except BaseException:
            logger.error("Commit to %s failed, restoring previous outputs", output_dir)
            for destination in committed:
                _remove(destination)
            for previous in backup.iterdir():
                os.replace(previous, output_dir / previous.name)
            raise
    finally:
        shutil.rmtree(staging, ignore_errors=True)
        shutil.rmtree(backup, ignore_errors=True)

    logger.info("Wrote %d files to %s", len(files), output_dir)
