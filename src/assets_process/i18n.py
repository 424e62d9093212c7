# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page copy for the three Cloudflare custom page families.

Tables are keyed by the page type directory (``cf/<family>/<type>/``) and
hold the title/message pair shown on the page. Built-in English copy ships
as ``DEFAULT_TRANSLATIONS``; a JSON file with the same shape can replace
individual entries::

    {"error": {"1000s": {"title": "...", "message": "..."}}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from assets_process.errors import TranslationLoadError

logger = logging.getLogger(__name__)

BLOCK = "block"
ERROR = "error"
CHALLENGE = "challenge"
FAMILIES: tuple[str, ...] = (BLOCK, ERROR, CHALLENGE)


@dataclass(frozen=True, slots=True)
class TranslationEntry:
    title: str
    message: str


def _freeze(table: Mapping[str, TranslationEntry]) -> Mapping[str, TranslationEntry]:
    return MappingProxyType(dict(table))


@dataclass(frozen=True, slots=True)
class TranslationTables:
    """Read-only block / error / challenge lookup tables."""

    block: Mapping[str, TranslationEntry] = field(default_factory=lambda: _freeze({}))
    error: Mapping[str, TranslationEntry] = field(default_factory=lambda: _freeze({}))
    challenge: Mapping[str, TranslationEntry] = field(default_factory=lambda: _freeze({}))

    def table(self, family: str) -> Mapping[str, TranslationEntry] | None:
        """Table for a page family directory, None for unknown families."""
        if family not in FAMILIES:
            return None
        return getattr(self, family)

    def lookup(self, family: str, type_key: str) -> TranslationEntry | None:
        table = self.table(family)
        if table is None:
            return None
        return table.get(type_key)

    def merged(self, overrides: Mapping[str, Mapping[str, TranslationEntry]]) -> TranslationTables:
        """Return new tables with ``overrides`` layered over these entries."""
        return TranslationTables(
            **{
                family: _freeze({**getattr(self, family), **overrides.get(family, {})})
                for family in FAMILIES
            }
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Mapping[str, str]]]) -> TranslationTables:
        return cls(**{family: _freeze(_parse_table(family, data.get(family, {}))) for family in FAMILIES})


def _parse_table(family: str, raw: object) -> dict[str, TranslationEntry]:
    if not isinstance(raw, Mapping):
        raise TranslationLoadError(f"'{family}' must be an object, got {type(raw).__name__}")
    table: dict[str, TranslationEntry] = {}
    for key, entry in raw.items():
        if not isinstance(entry, Mapping) or not isinstance(entry.get("title"), str):
            raise TranslationLoadError(f"'{family}.{key}' needs a string 'title'")
        table[str(key)] = TranslationEntry(title=entry["title"], message=str(entry.get("message", "")))
    return table


# ---------------------------------------------------------------------------
# Built-in copy
# ---------------------------------------------------------------------------

BLOCK_PAGE_TRANSLATIONS: Mapping[str, TranslationEntry] = _freeze(
    {
        "ip": TranslationEntry(
            title="Access denied",
            message="The owner of this website has banned your IP address or country from accessing it.",
        ),
        "waf": TranslationEntry(
            title="Sorry, you have been blocked",
            message="This website is using a security service to protect itself from online attacks.",
        ),
        "rate-limit": TranslationEntry(
            title="Too many requests",
            message="You have sent too many requests in a given amount of time. Please try again later.",
        ),
    }
)

ERROR_PAGE_TRANSLATIONS: Mapping[str, TranslationEntry] = _freeze(
    {
        "500s": TranslationEntry(
            title="Origin server error",
            message="The web server reported an error while handling your request.",
        ),
        "1000s": TranslationEntry(
            title="Something went wrong",
            message="The request could not be completed because of a DNS or configuration problem.",
        ),
    }
)

CHALLENGE_PAGE_TRANSLATIONS: Mapping[str, TranslationEntry] = _freeze(
    {
        "interactive": TranslationEntry(
            title="Verify you are human",
            message="Complete the action below to continue to the website.",
        ),
        "managed": TranslationEntry(
            title="Just a moment...",
            message="Checking if the site connection is secure before you continue.",
        ),
        "javascript": TranslationEntry(
            title="Checking your browser",
            message="This process is automatic. Your browser will redirect to the requested content shortly.",
        ),
        "country": TranslationEntry(
            title="One more step",
            message="Visitors from your region need to complete a quick check before continuing.",
        ),
    }
)

DEFAULT_TRANSLATIONS = TranslationTables(
    block=BLOCK_PAGE_TRANSLATIONS,
    error=ERROR_PAGE_TRANSLATIONS,
    challenge=CHALLENGE_PAGE_TRANSLATIONS,
)


def load_translations(path: str | Path | None = None) -> TranslationTables:
    """Built-in tables, with entries from the JSON file at ``path`` layered on top.

    Raises:
        TranslationLoadError: file unreadable, invalid JSON, or wrong shape.
    """
    if path is None:
        return DEFAULT_TRANSLATIONS

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TranslationLoadError(f"Cannot load translations from {path}: {e}") from e
    if not isinstance(data, Mapping):
        raise TranslationLoadError(f"Translations file {path} must contain a JSON object")

    unknown = sorted(set(data) - set(FAMILIES))
    if unknown:
        logger.warning("Ignoring unknown page families in %s: %s", path, ", ".join(unknown))

    overrides = TranslationTables.from_dict(data)
    return DEFAULT_TRANSLATIONS.merged({family: getattr(overrides, family) for family in FAMILIES})
