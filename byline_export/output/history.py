"""
Export history ledger.

Every export run is appended as one JSON line holding run metadata only
(never the exported articles). ``summarize`` folds the ledger into totals
and per-day counters.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import json
import time
from pathlib import Path
from typing import Any, Iterator
import uuid


MAX_DAILY_HISTORY_DAYS = 365


@dataclass
class HistoryEntry:
    """One export run.

    Attributes:
        id: Random run identifier
        status: "success" or "error"
        startedAt: ISO-8601 UTC start time
        finishedAt: ISO-8601 UTC end time
        durationMs: Wall-clock duration in milliseconds
        httpStatus: Status a request handler would answer with
        format: Requested format token
        authorUrl: Requested author URL
        articles: Number of exported articles
        error: Error message ("" on success)
    """

    id: str
    status: str
    startedAt: str
    finishedAt: str
    durationMs: int
    httpStatus: int
    format: str
    authorUrl: str
    articles: int = 0
    error: str = ""


@dataclass
class RunTracker:
    """Open run started by ``ExportHistory.start``."""

    format: str
    author_url: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    started_monotonic: float = field(default_factory=time.monotonic)


@dataclass
class DailyCounters:
    downloads: int = 0
    errors: int = 0


@dataclass
class HistorySummary:
    totals: DailyCounters
    daily: dict[str, DailyCounters]
    recent: list[HistoryEntry]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totals": asdict(self.totals),
            "history": [{"date": day, **asdict(counters)} for day, counters in self.daily.items()],
            "recentLogs": [asdict(entry) for entry in self.recent],
        }


class ExportHistory:
    """Append-only JSONL ledger of export runs.

    Attributes:
        path: JSONL file receiving one line per run
        enabled: When False, nothing is written
    """

    def __init__(self, path: Path, enabled: bool = True):
        self.path = Path(path)
        self.enabled = enabled

    def start(self, fmt: str, author_url: str) -> RunTracker:
        return RunTracker(format=fmt, author_url=author_url)

    def finish(
        self, run: RunTracker, http_status: int, articles: int = 0, error: str = ""
    ) -> HistoryEntry:
        """Close a run and append it to the ledger."""
        entry = HistoryEntry(
            id=run.id,
            status="error" if error or http_status >= 400 else "success",
            startedAt=run.started_at,
            finishedAt=datetime.now(timezone.utc).isoformat(),
            durationMs=int((time.monotonic() - run.started_monotonic) * 1000),
            httpStatus=http_status,
            format=run.format,
            authorUrl=run.author_url,
            articles=articles,
            error=error,
        )
        self.append(entry)
        return entry

    def append(self, entry: HistoryEntry) -> None:
        if not self.enabled:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(entry), ensure_ascii=False))
            handle.write("\n")

    def read(self) -> Iterator[HistoryEntry]:
        """Yield ledger entries in write order; unreadable lines are skipped."""
        if not self.path.exists():
            return
        with self.path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    raw = json.loads(line)
                    yield HistoryEntry(**raw)
                except (ValueError, TypeError):
                    continue

    def summarize(self, recent: int = 20, max_days: int = MAX_DAILY_HISTORY_DAYS) -> HistorySummary:
        """Totals and per-day counters, newest day first, plus the latest runs."""
        totals = DailyCounters()
        daily: dict[str, DailyCounters] = {}
        entries = list(self.read())
        for entry in entries:
            day = daily.setdefault(entry.startedAt[:10], DailyCounters())
            if entry.status == "success":
                totals.downloads += 1
                day.downloads += 1
            else:
                totals.errors += 1
                day.errors += 1
        ordered = dict(sorted(daily.items(), reverse=True)[:max_days])
        latest = list(reversed(entries[-recent:])) if recent > 0 else []
        return HistorySummary(totals=totals, daily=ordered, recent=latest)
