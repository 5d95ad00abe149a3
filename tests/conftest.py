from __future__ import annotations

import httpx
import pytest

from byline_export.config import AppConfig
from byline_export.core.author import resolve_author_context


TEST_DOMAIN = "example-vocento-site.es"
AUTHOR_URL = f"https://www.{TEST_DOMAIN}/autor/john-doe-527.html"


class FakeSite:
    """In-memory website served through ``httpx.MockTransport``.

    Unknown URLs answer 404. Every requested URL is recorded in order.
    """

    def __init__(self) -> None:
        self.pages: dict[str, tuple[int, str, str]] = {}
        self.requests: list[str] = []
        self.user_agents: list[str] = []

    def add(self, url: str, body: str, content_type: str = "text/html; charset=utf-8", status: int = 200) -> None:
        self.pages[url] = (status, body, content_type)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        self.user_agents.append(request.headers.get("user-agent", ""))
        if url not in self.pages:
            return httpx.Response(404, text="not found")
        status, body, content_type = self.pages[url]
        return httpx.Response(status, text=body, headers={"content-type": content_type})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, follow_redirects=True)


def article_card(path: str, title: str, author: str = "John Doe") -> str:
    return (
        "<article>"
        f'<span class="voc-descriptor">Sociedad</span>'
        f'<h2><a href="{path}">{title}</a></h2>'
        '<p class="voc-subtitulo">Resumen de la noticia</p>'
        '<time datetime="2024-05-01T10:00:00Z">1 mayo</time>'
        f'<span class="voc-firma">{author}</span>'
        "</article>"
    )


def article_page(title: str, author: str = "John Doe", section: str = "Sociedad") -> str:
    return f"""<html><head>
<title>{title} | Example</title>
<script type="application/ld+json">
{{"@context": "https://schema.org", "@graph": [
  {{"@type": "WebPage", "name": "Example"}},
  {{"@type": "NewsArticle", "headline": "{title}", "description": "Subtitulo de {title}",
    "articleSection": "{section}", "datePublished": "2024-05-01T10:00:00Z",
    "author": {{"@type": "Person", "name": "{author}"}}}}
]}}
</script>
</head><body><h1>{title}</h1></body></html>"""


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def cfg() -> AppConfig:
    config = AppConfig()
    config.crawl.allowed_domains = [TEST_DOMAIN]
    config.crawl.max_pages = 3
    config.logging.console = False
    return config


@pytest.fixture
def context():
    return resolve_author_context(AUTHOR_URL, [TEST_DOMAIN])
