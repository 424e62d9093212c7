# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Cloudflare edge meta tags for pages deployed under ``out/cf``.

Five tags are prepended to ``<head>`` in a fixed order. The first three carry
placeholder tokens that the edge runtime substitutes per request; they are
never resolved here::

    <meta name="client-ip" content="::CLIENT_IP::">
    <meta name="ray-id" content="::RAY_ID::">
    <meta name="location-code" content="::GEO::">
    <meta name="build-date" content="2026-01-01T00:00:00.000Z">
    <meta name="version" content="1.2.3">

A page that already carries a ``ray-id`` tag is left untouched, so running
the processor twice over the same tree does not stack a second set.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import lxml.html

from assets_process.dom import ensure_head, find_meta, make_meta

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"
DEFAULT_DEPLOY_MARKER: tuple[str, ...] = ("out", "cf")

CLIENT_IP_PLACEHOLDER = "::CLIENT_IP::"
RAY_ID_PLACEHOLDER = "::RAY_ID::"
GEO_PLACEHOLDER = "::GEO::"

GUARD_TAG = "ray-id"


def read_package_version(package_json: str | Path) -> str:
    """``version`` from a package.json, or ``"unknown"`` on any failure."""
    try:
        data = json.loads(Path(package_json).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Failed to read package.json version from %s: %s", package_json, e)
        return UNKNOWN_VERSION
    if not isinstance(data, dict):
        logger.warning("Failed to read package.json version from %s: not an object", package_json)
        return UNKNOWN_VERSION
    version = data.get("version")
    return str(version) if version else UNKNOWN_VERSION


def build_timestamp(now: datetime | None = None) -> str:
    """UTC ISO-8601 timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_deploy_target(html_path: str | Path, marker: tuple[str, ...] = DEFAULT_DEPLOY_MARKER) -> bool:
    """True if ``marker`` occurs as consecutive segments of ``html_path``."""
    parts = Path(html_path).parts
    width = len(marker)
    if not width:
        return False
    return any(parts[i : i + width] == marker for i in range(len(parts) - width + 1))


def edge_tags(version: str, build_date: str) -> list[tuple[str, str]]:
    return [
        ("client-ip", CLIENT_IP_PLACEHOLDER),
        (GUARD_TAG, RAY_ID_PLACEHOLDER),
        ("location-code", GEO_PLACEHOLDER),
        ("build-date", build_date),
        ("version", version),
    ]


def add_edge_meta_tags(doc: lxml.html.HtmlElement, version: str, build_date: str) -> bool:
    """Prepend the edge tags to ``<head>``. Returns False if already present."""
    if find_meta(doc, GUARD_TAG):
        logger.debug("Edge meta tags already present, skipping")
        return False

    head = ensure_head(doc)
    for index, (name, content) in enumerate(edge_tags(version, build_date)):
        head.insert(index, make_meta(head, name, content))
    return True
