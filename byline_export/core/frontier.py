"""
Crawl state containers.

Frontier owns the page queue plus the queued/visited sets and enforces the
"enqueue once" and page-cap invariants in one place. PreviewCollection owns
the insertion-ordered article map and its size cap.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator

from .types import ArticlePreview
from .urls import url_key


class Frontier:
    """Bounded breadth-first queue of candidate listing-page URLs.

    A URL (by ``url_key``) is enqueued at most once per crawl. Discovered
    URLs are refused once queue + visited reaches ``max_size``; seeds are
    always accepted.

    Attributes:
        max_pages: Maximum number of pages to visit
        max_size: Aggregate safety bound on queued-but-unvisited plus visited pages
    """

    def __init__(self, max_pages: int, max_size: int):
        self.max_pages = max_pages
        self.max_size = max_size
        self._queue: deque[str] = deque()
        self._queued: set[str] = set()
        self._visited: set[str] = set()

    def seed(self, urls: Iterable[str]) -> int:
        """Enqueue seed URLs, skipping duplicates. Returns the number added."""
        added = 0
        for url in urls:
            key = url_key(url)
            if key in self._queued:
                continue
            self._queued.add(key)
            self._queue.append(url)
            added += 1
        return added

    def offer(self, url: str) -> bool:
        """Enqueue a discovered URL if it is new and the frontier has room."""
        key = url_key(url)
        if key in self._queued:
            return False
        if len(self._queue) + len(self._visited) >= self.max_size:
            return False
        self._queued.add(key)
        self._queue.append(url)
        return True

    def pop(self) -> str | None:
        """Dequeue the next unvisited URL and mark it visited.

        Returns None when the queue is empty or the page cap is reached.
        """
        while self._queue and not self.page_cap_reached:
            url = self._queue.popleft()
            key = url_key(url)
            if key in self._visited:
                continue
            self._visited.add(key)
            return url
        return None

    @property
    def page_cap_reached(self) -> bool:
        return len(self._visited) >= self.max_pages

    @property
    def has_pending(self) -> bool:
        return bool(self._queue) and not self.page_cap_reached

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    @property
    def queued_count(self) -> int:
        return len(self._queued)

    @property
    def remaining(self) -> set[str]:
        """Keys enqueued but not yet fetched."""
        return self._queued - self._visited

    def is_queued(self, url: str) -> bool:
        return url_key(url) in self._queued

    def is_visited(self, url: str) -> bool:
        return url_key(url) in self._visited


class PreviewCollection:
    """Insertion-ordered, capped map of previews keyed by ``url_key``.

    The first preview seen for a URL wins; later duplicates are ignored.
    """

    def __init__(self, max_items: int):
        self.max_items = max_items
        self._items: dict[str, ArticlePreview] = {}

    def add(self, preview: ArticlePreview) -> bool:
        key = url_key(preview.url)
        if key in self._items or self.full:
            return False
        self._items[key] = preview
        return True

    def extend(self, previews: Iterable[ArticlePreview]) -> int:
        return sum(1 for preview in previews if self.add(preview))

    @property
    def full(self) -> bool:
        return len(self._items) >= self.max_items

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, url: str) -> bool:
        return url_key(url) in self._items

    def __iter__(self) -> Iterator[ArticlePreview]:
        return iter(self._items.values())

    def to_list(self) -> list[ArticlePreview]:
        return list(self._items.values())[: self.max_items]
