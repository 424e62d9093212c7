# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Assets Process exception hierarchy.

All processor errors inherit from AssetsProcessError. Severity is decided by
where an error is caught, not by its type:

- OutputDirNotFoundError stops the whole run before any file is touched.
- FileProcessingError is caught per file; remaining files still run.
- AssetInlineError is caught per asset; the element is left as-is.
"""

from __future__ import annotations


class AssetsProcessError(Exception):
    """Base exception for all assets-process errors."""


class OutputDirNotFoundError(AssetsProcessError):
    """The build output directory does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Directory {path} does not exist")
        self.path = path


class FileProcessingError(AssetsProcessError):
    """Reading, parsing, transforming or writing one HTML file failed."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Error processing {path}: {cause}")
        self.path = path
        self.cause = cause


class AssetInlineError(AssetsProcessError):
    """A single referenced asset could not be inlined."""

    def __init__(self, ref: str, cause: BaseException) -> None:
        super().__init__(f"Failed to embed {ref}: {cause}")
        self.ref = ref
        self.cause = cause


class TranslationLoadError(AssetsProcessError):
    """Translation override file is unreadable or malformed."""
