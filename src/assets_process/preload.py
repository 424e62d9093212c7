# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Preload hint normalization for the static hosting target."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import lxml.html

logger = logging.getLogger(__name__)


@dataclass
class PreloadStats:
    promoted: int = 0  # as="style" -> rel="stylesheet"
    removed: int = 0  # as="font"


def normalize_preloads(doc: lxml.html.HtmlElement) -> PreloadStats:
    """Rewrite ``<link rel="preload">`` elements in place.

    ``as="style"`` becomes a real stylesheet link, ``as="font"`` is dropped,
    any other ``as`` value is left alone.
    """
    stats = PreloadStats()
    for link in doc.xpath("//link[@rel='preload']"):
        kind = link.get("as")
        if kind == "style":
            link.set("rel", "stylesheet")
            del link.attrib["as"]
            stats.promoted += 1
        elif kind == "font":
            link.drop_tree()
            stats.removed += 1

    if stats.promoted or stats.removed:
        logger.debug("Preloads: %d promoted, %d removed", stats.promoted, stats.removed)
    return stats
