from pathlib import Path

from byline_export.config import AppConfig, load_config, merge_config
from byline_export.core.author import ALLOWED_DOMAINS


def test_defaults_match_exporter_limits() -> None:
    cfg = load_config(None)

    assert cfg.crawl.max_articles == 60
    assert cfg.crawl.max_pages == 40
    assert cfg.crawl.frontier_factor == 6
    assert cfg.enrich.concurrency == 6
    assert cfg.fetch.timeout_seconds == 15.0
    assert cfg.fetch.user_agent == "Mozilla/5.0 (compatible; VocentoArticleExporter/1.0)"
    assert cfg.output.filename_prefix == "articulos"
    assert tuple(cfg.crawl.allowed_domains) == ALLOWED_DOMAINS
    assert cfg.history.enabled is False


def test_yaml_sections_merge_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "crawl:\n  max_pages: 5\n  unknown_key: 1\n"
        "enrich:\n  concurrency: 2\n"
        "history:\n  enabled: true\n  path: data/h.jsonl\n"
        "unknown_section:\n  a: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.crawl.max_pages == 5
    assert cfg.crawl.max_articles == 60
    assert cfg.enrich.concurrency == 2
    assert cfg.history.enabled is True
    assert cfg.history.path == "data/h.jsonl"
    assert not hasattr(cfg.crawl, "unknown_key")


def test_empty_yaml_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()


def test_merge_config_does_not_mutate_base() -> None:
    base = AppConfig()

    merged = merge_config(base, {"fetch": {"retries": 3}})

    assert merged.fetch.retries == 3
    assert base.fetch.retries == 0
