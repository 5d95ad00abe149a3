"""
HTTP fetching for listing pages, feeds and articles.

All requests of one export share a single ``httpx.AsyncClient`` carrying the
exporter's user agent, accept header and a bounded timeout. Failures are
reported through FetchResult and never raised to the crawl.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import asyncio
import json
import re
from typing import Any, Callable

import httpx

from ..config import FetchConfig
from ..core.urls import normalize_url


# A JSON string containing one of these tags is treated as an HTML fragment.
_HTML_FRAGMENT_RE = re.compile(r"<(article|div|li|section|a|time)\b", re.IGNORECASE)


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
        content_type: Lowercased Content-Type header ("" when absent)
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


@dataclass
class FetchPayload:
    """Markup to scan plus extra URLs surfaced by a JSON response.

    Attributes:
        html: HTML (or XML) body, or the HTML fragments found inside a JSON body
        extra_urls: Absolute URLs found as JSON string values
    """
    html: str
    extra_urls: list[str] = field(default_factory=list)


def build_client(cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create the per-export HTTP client.

    Args:
        cfg: Fetch configuration (headers, timeout, proxy behaviour)
        transport: Optional transport override (used by tests)
    """
    return httpx.AsyncClient(
        headers={"User-Agent": cfg.user_agent, "Accept": cfg.accept},
        timeout=httpx.Timeout(cfg.timeout_seconds),
        follow_redirects=True,
        trust_env=cfg.trust_env,
        transport=transport,
    )


async def fetch_url(client: httpx.AsyncClient, url: str, retries: int = 0) -> FetchResult:
    """Fetch a URL, retrying transport errors with linear backoff.

    Non-success statuses are returned as errors without retrying.
    """
    last_error: str | None = None
    for attempt in range(retries + 1):
        try:
            resp = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < retries:
                await asyncio.sleep(0.5 * (attempt + 1))
            continue
        content_type = resp.headers.get("content-type", "").lower()
        if not resp.is_success:
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                text=None,
                error=f"HTTP {resp.status_code}",
                content_type=content_type,
            )
        return FetchResult(
            url=url,
            status_code=resp.status_code,
            text=resp.text,
            error=None,
            content_type=content_type,
        )
    return FetchResult(url=url, status_code=None, text=None, error=last_error)


def looks_like_json(text: str) -> bool:
    stripped = text.lstrip()
    return stripped.startswith("{") or stripped.startswith("[")


def to_payload(result: FetchResult, base_url: str) -> FetchPayload | None:
    """Turn a successful fetch into scannable markup.

    JSON bodies (by content type or shape) are walked for HTML fragments
    and URL-looking strings; anything else is used as markup directly.
    """
    if not result.ok:
        return None
    text = result.text or ""
    if "application/json" in result.content_type or looks_like_json(text):
        return payload_from_json(text, base_url)
    return FetchPayload(html=text)


def payload_from_json(text: str, base_url: str) -> FetchPayload:
    """Collect HTML fragments and URLs from every string value of a JSON document."""
    try:
        parsed = json.loads(text)
    except ValueError:
        return FetchPayload(html="")

    html_parts: list[str] = []
    urls: list[str] = []

    def _visit(value: str) -> None:
        if _HTML_FRAGMENT_RE.search(value):
            html_parts.append(value)
        lowered = value.lower()
        if "http://" in lowered or "https://" in lowered or value.startswith("/"):
            url = normalize_url(value, base_url)
            if url:
                urls.append(url)

    walk_json(parsed, _visit)
    return FetchPayload(html="\n".join(html_parts), extra_urls=urls)


def walk_json(value: Any, on_string: Callable[[str], None]) -> None:
    """Call ``on_string`` for every string value in a JSON tree (keys excluded)."""
    if isinstance(value, str):
        on_string(value)
    elif isinstance(value, list):
        for item in value:
            walk_json(item, on_string)
    elif isinstance(value, dict):
        for item in value.values():
            walk_json(item, on_string)


async def fetch_payload(
    client: httpx.AsyncClient, url: str, base_url: str, retries: int = 0
) -> tuple[FetchResult, FetchPayload | None]:
    """Fetch a URL and convert it to a payload in one step."""
    result = await fetch_url(client, url, retries)
    return result, to_payload(result, base_url)
