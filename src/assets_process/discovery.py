# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Build tree discovery: every ``.html`` file under the output root."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from assets_process.errors import OutputDirNotFoundError

logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"


def find_html_files(root: str | os.PathLike[str]) -> list[Path]:
    """Return all ``.html`` files below ``root``, depth-first.

    Entries are visited in name order within each directory so the result is
    stable across runs. Directory symlinks are not followed.

    Raises:
        OutputDirNotFoundError: ``root`` is missing or not a directory.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise OutputDirNotFoundError(str(root))

    files: list[Path] = []
    _walk(root_path, files)
    logger.debug("Discovered %d HTML files under %s", len(files), root_path)
    return files


def _walk(directory: Path, files: list[Path]) -> None:
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.error("Cannot read directory %s, skipping: %s", directory, e)
        return
    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            _walk(entry, files)
        elif entry.suffix == HTML_SUFFIX and entry.is_file():
            files.append(entry)
