# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Asset inliner: root-relative script (and optionally stylesheet) references
become base64 ``data:`` URIs so a page no longer depends on sibling files.

Only references starting with ``/`` are eligible. An inlined reference is a
data URI, so a second pass finds nothing to do.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

import lxml.html

from assets_process.errors import AssetInlineError

logger = logging.getLogger(__name__)

BUILD_ROOT_MARKER = "out"

JS_MIME = "application/javascript"
CSS_MIME = "text/css"

# Boolean attributes carried over to the inlined <script>; everything else is dropped.
_KEPT_SCRIPT_ATTRS = ("defer", "nomodule")


@dataclass
class InlineStats:
    scripts: int = 0
    styles: int = 0
    missing: int = 0
    failed: int = 0


def find_build_root(html_path: str | Path, marker: str = BUILD_ROOT_MARKER) -> Path | None:
    """Walk up from the file's directory to the nearest ancestor named ``marker``.

    Returns None when the filesystem root is reached without a match.
    """
    current = Path(html_path).absolute().parent
    while True:
        if current.name == marker:
            return current
        if current.parent == current:
            return None
        current = current.parent


def resolve_asset(ref: str, build_root: Path) -> Path | None:
    """Map a root-relative reference to a file under ``build_root``.

    Returns None for non-root-relative refs and for paths escaping the root.
    """
    if not ref.startswith("/"):
        return None
    try:
        candidate = (build_root / unquote(ref[1:])).resolve()
    except (OSError, ValueError) as e:
        logger.warning("Asset %s cannot be resolved: %s", ref, e)
        return None
    if not candidate.is_relative_to(build_root.resolve()):
        logger.warning("Asset %s resolves outside build root, skipping", ref)
        return None
    return candidate


def to_data_uri(path: Path, mime: str, ref: str = "") -> str:
    """Read ``path`` and return it as a base64 data URI."""
    try:
        payload = path.read_bytes()
    except OSError as e:
        raise AssetInlineError(ref or str(path), e) from e
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def _inline_refs(
    doc: lxml.html.HtmlElement,
    xpath: str,
    ref_attr: str,
    mime: str,
    build_root: Path,
    make_attrib: Callable[[lxml.html.HtmlElement, str], dict[str, str]],
    stats: InlineStats,
) -> int:
    inlined = 0
    for el in doc.xpath(xpath):
        ref = el.get(ref_attr, "")
        asset = resolve_asset(ref, build_root)
        if asset is None:
            continue
        if not asset.is_file():
            stats.missing += 1
            logger.debug("Asset not found, leaving reference: %s", ref)
            continue
        try:
            data_uri = to_data_uri(asset, mime, ref)
        except AssetInlineError as e:
            stats.failed += 1
            logger.warning("%s", e, exc_info=e.cause)
            continue

        replacement = el.makeelement(el.tag, make_attrib(el, data_uri))
        replacement.tail = el.tail
        el.getparent().replace(el, replacement)
        inlined += 1
        logger.info("Embedded %s: %s", "JS" if mime == JS_MIME else "CSS", ref)
    return inlined


def _script_attrib(el: lxml.html.HtmlElement, data_uri: str) -> dict[str, str]:
    attrib = {name: "" for name in _KEPT_SCRIPT_ATTRS if name in el.attrib}
    attrib["src"] = data_uri
    return attrib


def _stylesheet_attrib(el: lxml.html.HtmlElement, data_uri: str) -> dict[str, str]:
    return {"rel": "stylesheet", "href": data_uri}


def inline_assets(
    doc: lxml.html.HtmlElement,
    html_path: str | Path,
    build_root: str | Path | None = None,
    *,
    inline_css: bool = False,
) -> InlineStats:
    """Inline root-relative assets of one document in place.

    Args:
        doc: Parsed document, mutated in place.
        html_path: Location of the file ``doc`` came from.
        build_root: Directory root-relative refs resolve against. When None,
            the nearest ``out`` ancestor of ``html_path`` is used; if there is
            none, nothing is inlined.
        inline_css: Also inline ``<link rel="stylesheet">`` targets.
    """
    stats = InlineStats()
    root = Path(build_root) if build_root is not None else find_build_root(html_path)
    if root is None:
        logger.warning("No build root found for %s, skipping asset inlining", html_path)
        return stats

    if inline_css:
        stats.styles = _inline_refs(
            doc, "//link[@rel='stylesheet'][@href]", "href", CSS_MIME, root, _stylesheet_attrib, stats
        )
    stats.scripts = _inline_refs(doc, "//script[@src]", "src", JS_MIME, root, _script_attrib, stats)
    return stats
