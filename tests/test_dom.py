# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for assets_process.dom: parse/serialize round trip and head helpers."""

from __future__ import annotations

import pytest
from lxml import etree

from assets_process.dom import ensure_head, find_meta, make_meta, parse_html, serialize_html
from tests._html_helpers import html


class TestParseSerialize:
    def test_doctype_kept(self):
        out = serialize_html(parse_html(html("<p>x</p>")))
        assert out.lower().startswith("<!doctype html>")

    def test_no_doctype_added(self):
        out = serialize_html(parse_html(html("<p>x</p>", doctype=False)))
        assert not out.lower().startswith("<!doctype")

    def test_non_ascii_text_survives(self):
        doc = parse_html(html("<p>héllo 日本</p>"))
        assert "héllo 日本" in serialize_html(doc)

    def test_serialization_is_stable(self):
        once = serialize_html(parse_html(html('<p>x</p><script src="/a.js" defer></script>', "<title>t</title>")))
        assert serialize_html(parse_html(once)) == once

    def test_empty_input_raises(self):
        with pytest.raises(etree.LxmlError):
            parse_html("")


class TestHeadHelpers:
    def test_existing_head_returned(self):
        doc = parse_html(html(head="<title>t</title>"))
        assert ensure_head(doc) is doc.find("head")

    def test_head_created_first(self):
        doc = parse_html("<html><body><p>x</p></body></html>")
        head = ensure_head(doc)
        assert doc[0] is head
        assert ensure_head(doc) is head

    def test_meta_helpers(self):
        doc = parse_html(html())
        head = ensure_head(doc)
        head.append(make_meta(head, "version", "1.0"))
        (meta,) = find_meta(doc, "version")
        assert list(meta.attrib.items()) == [("name", "version"), ("content", "1.0")]
        assert find_meta(doc, "other") == []
