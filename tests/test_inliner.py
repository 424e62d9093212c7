# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for assets_process.inliner: data URI inlining of root-relative assets."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest

from assets_process.dom import serialize_html
from assets_process.errors import AssetInlineError
from assets_process.inliner import (
    JS_MIME,
    find_build_root,
    inline_assets,
    resolve_asset,
    to_data_uri,
)
from tests._html_helpers import html, parse_doc, write

JS_PREFIX = "data:application/javascript;base64,"
CSS_PREFIX = "data:text/css;base64,"


def _scripts(doc):
    return doc.xpath("//script")


def _decode(src: str, prefix: str = JS_PREFIX) -> bytes:
    assert src.startswith(prefix)
    return base64.b64decode(src[len(prefix) :])


# ── find_build_root ──────────────────────────────────────────────


class TestFindBuildRoot:
    def test_nearest_out_ancestor(self, out_dir):
        page = out_dir / "cf" / "error" / "index.html"
        assert find_build_root(page) == out_dir

    def test_file_directly_in_out(self, out_dir):
        assert find_build_root(out_dir / "index.html") == out_dir

    def test_nearest_wins_when_nested(self, out_dir):
        inner = out_dir / "cf" / "out"
        assert find_build_root(inner / "index.html") == inner

    def test_suffix_match_is_not_enough(self, tmp_path):
        assert find_build_root(tmp_path / "layout" / "index.html") != tmp_path / "layout"

    def test_no_out_returns_none(self):
        assert find_build_root(Path("/index.html")) is None


# ── resolve_asset ────────────────────────────────────────────────


class TestResolveAsset:
    def test_root_relative(self, out_dir):
        assert resolve_asset("/_next/app.js", out_dir) == (out_dir / "_next" / "app.js").resolve()

    def test_url_decoded(self, out_dir):
        assert resolve_asset("/_next/my%20file.js", out_dir) == (out_dir / "_next" / "my file.js").resolve()

    def test_relative_ref_ignored(self, out_dir):
        assert resolve_asset("app.js", out_dir) is None

    def test_absolute_url_ignored(self, out_dir):
        assert resolve_asset("https://cdn.example.com/app.js", out_dir) is None

    def test_traversal_outside_root_rejected(self, out_dir):
        assert resolve_asset("/../secret.js", out_dir) is None

    def test_protocol_relative_rejected(self, out_dir):
        assert resolve_asset("//cdn.example.com/app.js", out_dir) is None

    def test_null_byte_rejected(self, out_dir, caplog):
        assert resolve_asset("/x%00.js", out_dir) is None
        assert "cannot be resolved" in caplog.text


# ── to_data_uri ──────────────────────────────────────────────────


class TestToDataUri:
    def test_encodes_bytes_exactly(self, tmp_path):
        payload = "console.log('héllo');\n".encode()
        asset = write(tmp_path / "a.js", payload)
        assert _decode(to_data_uri(asset, JS_MIME)) == payload

    def test_missing_file_raises_inline_error(self, tmp_path):
        with pytest.raises(AssetInlineError) as exc_info:
            to_data_uri(tmp_path / "gone.js", JS_MIME, "/gone.js")
        assert exc_info.value.ref == "/gone.js"
        assert isinstance(exc_info.value.cause, OSError)


# ── inline_assets: scripts ───────────────────────────────────────


class TestInlineScripts:
    def test_existing_asset_inlined(self, out_dir):
        payload = b"window.__boot = 1;"
        write(out_dir / "_next" / "static" / "main.js", payload)
        doc = parse_doc(html('<script src="/_next/static/main.js"></script>'))

        stats = inline_assets(doc, out_dir / "index.html", out_dir)

        assert stats.scripts == 1
        (script,) = _scripts(doc)
        assert _decode(script.get("src")) == payload

    def test_defer_and_nomodule_kept_others_dropped(self, out_dir):
        write(out_dir / "a.js", b"1")
        doc = parse_doc(
            html('<script src="/a.js" defer nomodule type="module" crossorigin="anonymous" id="x"></script>')
        )

        inline_assets(doc, out_dir / "index.html", out_dir)

        (script,) = _scripts(doc)
        assert set(script.attrib) == {"defer", "nomodule", "src"}

    def test_no_boolean_attrs_when_absent(self, out_dir):
        write(out_dir / "a.js", b"1")
        doc = parse_doc(html('<script src="/a.js" async></script>'))

        inline_assets(doc, out_dir / "index.html", out_dir)

        (script,) = _scripts(doc)
        assert set(script.attrib) == {"src"}

    def test_missing_asset_left_unchanged(self, out_dir):
        doc = parse_doc(html('<script src="/_next/missing.js" defer type="module"></script>'))

        stats = inline_assets(doc, out_dir / "index.html", out_dir)

        assert stats.scripts == 0
        assert stats.missing == 1
        (script,) = _scripts(doc)
        assert script.get("src") == "/_next/missing.js"
        assert script.get("type") == "module"

    def test_external_and_relative_untouched(self, out_dir):
        write(out_dir / "local.js", b"1")
        doc = parse_doc(
            html('<script src="https://cdn.example.com/x.js"></script><script src="local.js"></script>')
        )

        stats = inline_assets(doc, out_dir / "index.html", out_dir)

        assert stats.scripts == 0
        assert [s.get("src") for s in _scripts(doc)] == ["https://cdn.example.com/x.js", "local.js"]

    def test_inline_script_without_src_untouched(self, out_dir):
        doc = parse_doc(html("<script>var a = 1;</script>"))
        inline_assets(doc, out_dir / "index.html", out_dir)
        (script,) = _scripts(doc)
        assert script.text == "var a = 1;"

    def test_url_encoded_path(self, out_dir):
        write(out_dir / "_next" / "[slug]" / "page.js", b"slug")
        doc = parse_doc(html('<script src="/_next/%5Bslug%5D/page.js"></script>'))

        inline_assets(doc, out_dir / "index.html", out_dir)

        assert _decode(_scripts(doc)[0].get("src")) == b"slug"

    def test_tail_text_preserved(self, out_dir):
        write(out_dir / "a.js", b"1")
        doc = parse_doc(html('<p>before</p><script src="/a.js"></script>after'))

        inline_assets(doc, out_dir / "index.html", out_dir)

        assert "after" in doc.find("body").text_content()

    def test_order_of_scripts_preserved(self, out_dir):
        write(out_dir / "a.js", b"a")
        write(out_dir / "b.js", b"b")
        doc = parse_doc(html('<script src="/a.js"></script><script src="/missing.js"></script><script src="/b.js"></script>'))

        inline_assets(doc, out_dir / "index.html", out_dir)

        srcs = [s.get("src") for s in _scripts(doc)]
        assert _decode(srcs[0]) == b"a"
        assert srcs[1] == "/missing.js"
        assert _decode(srcs[2]) == b"b"

    def test_read_error_logged_and_others_continue(self, out_dir, monkeypatch, caplog):
        write(out_dir / "bad.js", b"x")
        write(out_dir / "good.js", b"good")
        real_read_bytes = Path.read_bytes

        def flaky_read_bytes(self):
            if self.name == "bad.js":
                raise PermissionError("denied")
            return real_read_bytes(self)

        monkeypatch.setattr(Path, "read_bytes", flaky_read_bytes)
        doc = parse_doc(html('<script src="/bad.js"></script><script src="/good.js"></script>'))

        stats = inline_assets(doc, out_dir / "index.html", out_dir)

        assert stats.scripts == 1
        assert stats.failed == 1
        srcs = [s.get("src") for s in _scripts(doc)]
        assert srcs[0] == "/bad.js"
        assert _decode(srcs[1]) == b"good"
        assert "Failed to embed /bad.js" in caplog.text

    def test_unresolvable_ref_does_not_block_others(self, out_dir):
        write(out_dir / "a.js", b"ok")
        doc = parse_doc(html('<script src="/x%00.js"></script><script src="/a.js"></script>'))

        stats = inline_assets(doc, out_dir / "index.html", out_dir)

        assert stats.scripts == 1
        srcs = [s.get("src") for s in _scripts(doc)]
        assert srcs[0] == "/x%00.js"
        assert _decode(srcs[1]) == b"ok"

    def test_second_pass_is_noop(self, out_dir):
        write(out_dir / "a.js", b"console.log(1)")
        doc = parse_doc(html('<script src="/a.js" defer></script>'))
        inline_assets(doc, out_dir / "index.html", out_dir)
        first = serialize_html(doc)

        stats = inline_assets(doc, out_dir / "index.html", out_dir)

        assert stats.scripts == 0
        assert serialize_html(doc) == first


class TestBuildRootFallback:
    def test_discovered_from_path_when_not_given(self, out_dir):
        write(out_dir / "a.js", b"1")
        doc = parse_doc(html('<script src="/a.js"></script>'))

        stats = inline_assets(doc, out_dir / "cf" / "index.html")

        assert stats.scripts == 1

    def test_skipped_without_out_ancestor(self, caplog):
        doc = parse_doc(html('<script src="/a.js"></script>'))

        stats = inline_assets(doc, Path("/index.html"))

        assert stats.scripts == 0
        assert _scripts(doc)[0].get("src") == "/a.js"
        assert "skipping asset inlining" in caplog.text


# ── inline_assets: stylesheets (flagged) ─────────────────────────


class TestInlineStylesheets:
    def test_disabled_by_default(self, out_dir):
        write(out_dir / "app.css", b"body{}")
        doc = parse_doc(html(head='<link rel="stylesheet" href="/app.css">'))

        stats = inline_assets(doc, out_dir / "index.html", out_dir)

        assert stats.styles == 0
        assert doc.xpath("//link")[0].get("href") == "/app.css"

    def test_enabled_inlines_css(self, out_dir):
        write(out_dir / "app.css", b"body{color:red}")
        doc = parse_doc(html(head='<link rel="stylesheet" href="/app.css" crossorigin="">'))

        stats = inline_assets(doc, out_dir / "index.html", out_dir, inline_css=True)

        assert stats.styles == 1
        (link,) = doc.xpath("//link")
        assert link.get("rel") == "stylesheet"
        assert set(link.attrib) == {"rel", "href"}
        assert _decode(link.get("href"), CSS_PREFIX) == b"body{color:red}"
