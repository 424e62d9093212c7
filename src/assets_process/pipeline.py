# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Processing pipeline orchestration.

Flow (per HTML file, sequentially):
  read
    → lxml parse
    → asset inliner (scripts, optional stylesheets)
    → preload normalizer
    → metadata rewriter (cf/<family>/<type> pages)
    → edge meta tags (out/cf pages only)
    → serialize
    → overwrite in place

A missing output directory aborts the run before anything is touched. Any
failure inside one file is logged and recorded; the remaining files are
still processed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from assets_process import FileResult, ProcessReport
from assets_process.config import ProcessorConfig
from assets_process.discovery import find_html_files
from assets_process.dom import parse_html, serialize_html
from assets_process.env_tags import add_edge_meta_tags, build_timestamp, is_deploy_target, read_package_version
from assets_process.errors import FileProcessingError, OutputDirNotFoundError
from assets_process.i18n import TranslationTables, load_translations
from assets_process.inliner import inline_assets
from assets_process.logging_config import file_context
from assets_process.metadata import rewrite_metadata
from assets_process.preload import normalize_preloads

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetsProcessor:
    """Pipeline bound to one configuration and its read-once inputs."""

    config: ProcessorConfig
    translations: TranslationTables
    version: str
    build_date: str

    @classmethod
    def from_config(cls, config: ProcessorConfig | None = None) -> AssetsProcessor:
        """Load translations, read the package version and stamp the build time once."""
        config = config or ProcessorConfig()
        return cls(
            config=config,
            translations=load_translations(config.translations_path),
            version=read_package_version(config.package_json),
            build_date=build_timestamp(),
        )

    def transform(self, raw_html: str, html_path: Path, result: FileResult) -> str:
        """Apply every stage to one document and return the new HTML."""
        cfg = self.config
        doc = parse_html(raw_html)

        inline = inline_assets(doc, html_path, cfg.out_dir, inline_css=cfg.inline_css)
        result.scripts_inlined = inline.scripts
        result.styles_inlined = inline.styles

        preloads = normalize_preloads(doc)
        result.preloads_promoted = preloads.promoted
        result.preloads_removed = preloads.removed

        result.metadata_updated = rewrite_metadata(
            doc,
            html_path,
            self.translations,
            brand=cfg.brand,
            keywords=cfg.default_keywords,
            anchor=cfg.category_anchor,
            build_root=cfg.out_dir,
        )

        if is_deploy_target(html_path, cfg.deploy_marker):
            result.env_tags_added = add_edge_meta_tags(doc, self.version, self.build_date)

        return serialize_html(doc)

    def process_file(self, html_path: Path) -> FileResult:
        """Rewrite one file in place. Never raises."""
        result = FileResult(path=str(html_path))
        with file_context(str(html_path)):
            try:
                raw = html_path.read_text(encoding="utf-8")
                html_path.write_text(self.transform(raw, html_path, result), encoding="utf-8")
            except Exception as e:
                err = FileProcessingError(str(html_path), e)
                result.error = str(e) or type(e).__name__
                logger.error("%s", err, exc_info=e)
                return result
            logger.info("Processed: %s", html_path)
        return result

    def run(self) -> ProcessReport:
        """Process every HTML file under the output directory."""
        report = ProcessReport(out_dir=str(self.config.out_dir))
        try:
            files = find_html_files(self.config.out_dir)
        except OutputDirNotFoundError as e:
            logger.error("%s", e)
            report.aborted = True
            return report

        for html_path in files:
            report.files.append(self.process_file(html_path))

        if report.failed:
            logger.warning("Processed %d files, %d failed", report.processed, len(report.failed))
        logger.info("All files processed successfully!")
        return report


def process_output_dir(config: ProcessorConfig | None = None) -> ProcessReport:
    """Build a processor from ``config`` and run it over the output directory."""
    return AssetsProcessor.from_config(config).run()
