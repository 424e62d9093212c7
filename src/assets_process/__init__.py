# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Assets Process: post-build HTML rewriter for statically exported error pages.

Walks a build output tree (``./out``) and rewrites every HTML file in place:
- scripts: root-relative ``<script src>`` inlined as base64 data URIs
- preloads: style hints promoted to stylesheets, font hints dropped
- metadata: localized title/description/keywords for ``cf/<family>/<type>`` pages
- edge tags: Cloudflare placeholder meta tags for ``out/cf`` pages
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PageCategory:
    """Page family and type key derived from a file's location."""

    directory: str  # block, error, challenge
    type_key: str  # e.g. "1000s", "waf"


@dataclass
class FileResult:
    """Outcome of processing a single HTML file."""

    path: str
    scripts_inlined: int = 0
    styles_inlined: int = 0
    preloads_promoted: int = 0
    preloads_removed: int = 0
    metadata_updated: bool = False
    env_tags_added: bool = False
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass
class ProcessReport:
    """Aggregate result of one pipeline run."""

    out_dir: str
    files: list[FileResult] = field(default_factory=list)
    aborted: bool = False  # output directory missing, nothing processed

    @property
    def processed(self) -> int:
        return sum(1 for f in self.files if f.ok)

    @property
    def failed(self) -> list[FileResult]:
        return [f for f in self.files if not f.ok]

    @property
    def scripts_inlined(self) -> int:
        return sum(f.scripts_inlined for f in self.files)
