# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""lxml parse/serialize round trip and small head helpers shared by the stages."""

from __future__ import annotations

import lxml.html

# huge_tree: inlined data URIs can exceed libxml2's 10 MB attribute limit
_PARSER = lxml.html.HTMLParser(recover=True, encoding="utf-8", default_doctype=False, huge_tree=True)


def parse_html(raw_html: str) -> lxml.html.HtmlElement:
    """Parse a full document. Raises ``lxml.etree.LxmlError`` on empty input."""
    return lxml.html.document_fromstring(raw_html.encode("utf-8"), parser=_PARSER)


def serialize_html(doc: lxml.html.HtmlElement) -> str:
    """Serialize back to HTML, keeping the original DOCTYPE if there was one."""
    doctype = doc.getroottree().docinfo.doctype
    return lxml.html.tostring(doc, encoding="unicode", method="html", doctype=doctype or None)


def ensure_head(doc: lxml.html.HtmlElement) -> lxml.html.HtmlElement:
    """Return ``<head>``, creating it as the first child of ``<html>`` if missing."""
    head = doc.find("head")
    if head is None:
        head = doc.makeelement("head", {})
        doc.insert(0, head)
    return head


def find_meta(doc: lxml.html.HtmlElement, name: str) -> list[lxml.html.HtmlElement]:
    return doc.xpath("//meta[@name=$name]", name=name)


def make_meta(parent: lxml.html.HtmlElement, name: str, content: str) -> lxml.html.HtmlElement:
    return parent.makeelement("meta", {"name": name, "content": content})
