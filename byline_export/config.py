"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings
- CrawlConfig: Frontier limits and the allowed site family
- EnrichConfig: Article enrichment settings
- OutputConfig: Export file and PDF layout settings
- LoggingConfig: Logging behavior
- HistoryConfig: Export history ledger
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import yaml

from .core.author import ALLOWED_DOMAINS


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: Per-request timeout; every fetch is bounded by it
        retries: Number of retry attempts after a transport failure
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
        accept: HTTP Accept header string
    """

    timeout_seconds: float = 15.0
    retries: int = 0
    trust_env: bool = True
    user_agent: str = "Mozilla/5.0 (compatible; VocentoArticleExporter/1.0)"
    accept: str = "text/html,application/xhtml+xml,application/xml,application/json"


@dataclass
class CrawlConfig:
    """Configuration for the listing-page crawl.

    Attributes:
        max_articles: Maximum number of previews collected (and exported)
        max_pages: Maximum number of listing pages fetched; also the highest seeded page number
        frontier_factor: Queue + visited may not exceed max_pages * frontier_factor
        offset_step: Articles per page assumed by the ``offset`` seed variant
        max_fallback_blocks: Cap on class-hinted container blocks per page
        min_link_title: Minimum headline length for loose article links
        seed_feeds: Whether to seed RSS endpoint guesses when the author id is known
        allowed_domains: Site family accepted for author pages and crawled URLs
    """

    max_articles: int = 60
    max_pages: int = 40
    frontier_factor: int = 6
    offset_step: int = 10
    max_fallback_blocks: int = 800
    min_link_title: int = 12
    seed_feeds: bool = True
    allowed_domains: list[str] = field(default_factory=lambda: list(ALLOWED_DOMAINS))


@dataclass
class EnrichConfig:
    """Configuration for article enrichment.

    Attributes:
        enabled: If False, previews are exported as collected
        concurrency: Article fetches in flight per batch
    """

    enabled: bool = True
    concurrency: int = 6


@dataclass
class OutputConfig:
    """Configuration for export files.

    Attributes:
        directory: Default directory for CLI exports
        filename_prefix: Exported files are named ``<prefix>-<author slug>.<ext>``
        pdf_wrap_width: Characters per PDF line before wrapping
        pdf_max_lines: Maximum lines written per PDF page
    """

    directory: str = "out"
    filename_prefix: str = "articulos"
    pdf_wrap_width: int = 95
    pdf_max_lines: int = 160


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file inside the output directory
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class HistoryConfig:
    """Configuration for the export history ledger.

    Attributes:
        enabled: Whether each export run is recorded
        path: JSONL file receiving one line per export run
    """

    enabled: bool = False
    path: str = "data/export-history.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    crawl: CrawlConfig = field(default_factory=CrawlConfig)
    enrich: EnrichConfig = field(default_factory=EnrichConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)


_SECTIONS = {
    "fetch": FetchConfig,
    "crawl": CrawlConfig,
    "enrich": EnrichConfig,
    "output": OutputConfig,
    "logging": LoggingConfig,
    "history": HistoryConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return merge_config(AppConfig(), raw)


def merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge a raw (YAML-shaped) mapping into a copy of ``base``.

    Unknown sections and keys are ignored; known sections merge key by key.
    """
    data = asdict(base)
    for section, values in raw.items():
        if section not in data or not isinstance(values, dict):
            continue
        for key, value in values.items():
            if key in data[section]:
                data[section][key] = value
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})
