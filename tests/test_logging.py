import json
import logging
from pathlib import Path

from byline_export.config import LoggingConfig
from byline_export.utils.logging import get_logger, log_event, setup_logging


def test_jsonl_file_logging_keeps_event_fields(tmp_path: Path) -> None:
    cfg = LoggingConfig(level="DEBUG", console=False, file=True, format="jsonl")
    root = setup_logging(cfg, tmp_path)

    log_event(get_logger("crawl"), "Crawl page failed", level=logging.DEBUG, event="crawl_page_failed", url="https://a.es/x.html")
    for handler in root.handlers:
        handler.flush()

    lines = (tmp_path / cfg.filename).read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[-1])
    assert record["message"] == "Crawl page failed"
    assert record["logger"] == "byline_export.crawl"
    assert record["level"] == "DEBUG"
    assert record["event"] == "crawl_page_failed"
    assert record["url"] == "https://a.es/x.html"

    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


def test_plain_format_and_level_filtering(tmp_path: Path) -> None:
    cfg = LoggingConfig(level="WARNING", console=False, file=True, format="plain", filename="run.log")
    root = setup_logging(cfg, tmp_path)

    log_event(root, "hidden", event="debug_only")
    log_event(root, "shown", level=logging.WARNING, event="export_failed")
    for handler in list(root.handlers):
        handler.flush()
        handler.close()
        root.removeHandler(handler)

    text = (tmp_path / "run.log").read_text(encoding="utf-8")
    assert "shown" in text
    assert "hidden" not in text


def test_log_event_without_logger_is_a_no_op() -> None:
    log_event(None, "nothing", event="ignored")
