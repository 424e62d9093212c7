# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Processor configuration: defaults, ``ASSETS_PROCESS_*`` env overrides."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_OUT_DIR = "./out"
DEFAULT_PACKAGE_JSON = "package.json"
DEFAULT_BRAND = "Cloudflare"
DEFAULT_KEYWORDS = "Cloudflare, security, WAF, protection"

_ENV_PREFIX = "ASSETS_PROCESS_"
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class ProcessorConfig:
    """Immutable pipeline configuration, built once per invocation."""

    out_dir: Path = Path(DEFAULT_OUT_DIR)
    package_json: Path = Path(DEFAULT_PACKAGE_JSON)
    translations_path: Path | None = None  # JSON override for built-in tables
    brand: str = DEFAULT_BRAND
    default_keywords: str = DEFAULT_KEYWORDS
    category_anchor: str = "cf"
    deploy_marker: tuple[str, ...] = ("out", "cf")
    inline_css: bool = False  # Cloudflare keeps relative CSS working; off by default

    def replace(self, **changes) -> ProcessorConfig:
        """Return a copy with ``changes`` applied, ignoring ``None`` values."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ProcessorConfig:
        """Build config from ``ASSETS_PROCESS_*`` variables over the defaults."""
        env = os.environ if environ is None else environ
        changes: dict = {}

        out_dir = env.get(f"{_ENV_PREFIX}OUT_DIR", "").strip()
        if out_dir:
            changes["out_dir"] = Path(out_dir)

        package_json = env.get(f"{_ENV_PREFIX}PACKAGE_JSON", "").strip()
        if package_json:
            changes["package_json"] = Path(package_json)

        translations = env.get(f"{_ENV_PREFIX}TRANSLATIONS", "").strip()
        if translations:
            changes["translations_path"] = Path(translations)

        brand = env.get(f"{_ENV_PREFIX}BRAND", "").strip()
        if brand:
            changes["brand"] = brand

        inline_css = env.get(f"{_ENV_PREFIX}INLINE_CSS", "").strip().lower()
        if inline_css:
            changes["inline_css"] = inline_css in _TRUE_VALUES

        return cls(**changes)
