"""Helpers for constructing standard session paths."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

CHARS_FILENAME = "chars.txt"
READINGS_FILENAME = "readings.csv"
LABELS_FILENAME = "labels.csv"


def validate_base_dir(base: Path | str) -> Path:
    """Return ``base`` as a Path, or raise ``ValueError`` if it is not an existing directory."""
    path = Path(base)
    if not path.exists():
        raise ValueError(f"'{path}' does not exist")
    if not path.is_dir():
        raise ValueError(f"'{path}' is not a directory")
    return path


def _count_readable_entries(base: Path) -> int:
    count = 0
    for name in os.listdir(base):
        try:
            os.lstat(base / name)
        except OSError as exc:
            logger.warning("Error reading entry %s: %s", name, exc)
            continue
        count += 1
    return count


def next_session_dir(base: Path | str) -> Path:
    """
    Return the path of the next numbered session directory under ``base``.

    The name is ``1 + <number of readable entries>``, so gaps left by deleted
    sessions are not skipped: with ``1``, ``2`` and ``4`` present the next
    directory is ``4``.
    """
    root = Path(base)
    return root / str(_count_readable_entries(root) + 1)


def allocate_session_dir(base: Path | str) -> Path:
    """
    Validate ``base``, then create and return a fresh numbered session directory.

    ``FileExistsError`` propagates if the computed name is already taken.
    """
    root = validate_base_dir(base)
    session_dir = next_session_dir(root)
    session_dir.mkdir()
    logger.info("Created session directory %s", session_dir)
    return session_dir
