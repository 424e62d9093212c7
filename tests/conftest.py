# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import assets_process  # noqa: F401
except ImportError:
    raise ImportError("assets_process is not installed. Run: pip install -e '.[dev]'") from None

import logging

import pytest
import structlog

from assets_process.i18n import TranslationEntry, TranslationTables


@pytest.fixture
def out_dir(tmp_path):
    """Empty build output directory named ``out``."""
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def translations():
    """Small fixed tables, independent of the built-in copy."""
    return TranslationTables.from_dict(
        {
            "block": {"waf": {"title": "Blocked", "message": "You have been blocked"}},
            "error": {"1000s": {"title": "Error", "message": "Something went wrong"}},
            "challenge": {"managed": {"title": "Checking", "message": "One moment"}},
        }
    )


@pytest.fixture
def sample_entry():
    return TranslationEntry(title="Error", message="Something went wrong")


@pytest.fixture(autouse=True)
def _reset_logging():
    """Keep CLI-configured handlers from leaking between tests."""
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
