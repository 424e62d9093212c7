# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Title / description / keywords rewriting for ``cf/<family>/<type>`` pages.

The page category comes from the file location: the first path segment equal
to the anchor (``cf``) is followed by the family directory and the type key.
Files outside the namespace keep whatever metadata the build produced, and a
type key without a translation leaves title and description alone.
"""

from __future__ import annotations

import logging
from pathlib import Path

import lxml.html

from assets_process import PageCategory
from assets_process.config import DEFAULT_BRAND, DEFAULT_KEYWORDS
from assets_process.dom import ensure_head, find_meta, make_meta
from assets_process.i18n import TranslationTables

logger = logging.getLogger(__name__)

DEFAULT_ANCHOR = "cf"
_HTML_SUFFIX = ".html"


def _path_parts(html_path: str | Path, build_root: str | Path | None) -> tuple[str, ...]:
    path = Path(html_path)
    if build_root is not None:
        try:
            return path.absolute().relative_to(Path(build_root).absolute()).parts
        except ValueError:
            pass
    return path.parts


def derive_category(
    html_path: str | Path,
    anchor: str = DEFAULT_ANCHOR,
    build_root: str | Path | None = None,
) -> PageCategory | None:
    """Page category for ``html_path``, or None outside the anchor namespace.

    Segments are taken relative to ``build_root`` when the file lies under it,
    so an ``anchor``-named directory above the build root is never matched.
    """
    parts = _path_parts(html_path, build_root)
    try:
        idx = parts.index(anchor)
    except ValueError:
        return None
    if idx + 2 >= len(parts):
        return None

    type_key = parts[idx + 2]
    # cf/error/1000s.html and cf/error/1000s/index.html name the same page
    if idx + 2 == len(parts) - 1 and type_key.endswith(_HTML_SUFFIX):
        type_key = type_key[: -len(_HTML_SUFFIX)]
    return PageCategory(directory=parts[idx + 1], type_key=type_key)


def set_title(doc: lxml.html.HtmlElement, text: str) -> None:
    titles = doc.xpath("//title")
    if not titles:
        head = ensure_head(doc)
        titles = [head.makeelement("title", {})]
        head.append(titles[0])
    for title in titles:
        for child in list(title):
            title.remove(child)
        title.text = text


def set_description(doc: lxml.html.HtmlElement, text: str) -> None:
    existing = find_meta(doc, "description")
    if existing:
        for meta in existing:
            meta.set("content", text)
        return
    head = ensure_head(doc)
    head.append(make_meta(head, "description", text))


def ensure_keywords(doc: lxml.html.HtmlElement, keywords: str = DEFAULT_KEYWORDS) -> bool:
    """Append a keywords tag unless one exists. Returns True if added."""
    if find_meta(doc, "keywords"):
        return False
    head = ensure_head(doc)
    head.append(make_meta(head, "keywords", keywords))
    return True


def rewrite_metadata(
    doc: lxml.html.HtmlElement,
    html_path: str | Path,
    translations: TranslationTables,
    *,
    brand: str = DEFAULT_BRAND,
    keywords: str = DEFAULT_KEYWORDS,
    anchor: str = DEFAULT_ANCHOR,
    build_root: str | Path | None = None,
) -> bool:
    """Apply localized metadata to ``doc`` in place. Returns True if anything changed."""
    category = derive_category(html_path, anchor, build_root)
    if category is None:
        return False

    changed = False
    entry = translations.lookup(category.directory, category.type_key)
    if entry is None:
        logger.debug("No translation for %s/%s", category.directory, category.type_key)
    else:
        if entry.title:
            set_title(doc, f"{entry.title} - {brand}")
            changed = True
        if entry.message:
            set_description(doc, entry.message)
            changed = True

    if ensure_keywords(doc, keywords):
        changed = True
    return changed
