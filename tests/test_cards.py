from byline_export.markup.cards import NO_HEADLINE, extract_feed_previews, extract_page_previews
from byline_export.markup.scanner import scan_html

from conftest import TEST_DOMAIN, article_card


BASE = f"https://www.{TEST_DOMAIN}"


def test_article_cards_yield_full_previews(context) -> None:
    page = scan_html(
        "<main>"
        + article_card("/sociedad/noticia-uno.html", "Primera noticia")
        + article_card(f"{BASE}/economia/noticia-dos.html", "Segunda noticia", author="Ana Ruiz")
        + "</main>"
    )

    previews = extract_page_previews(page, context)

    assert [p.url for p in previews] == [
        f"{BASE}/sociedad/noticia-uno.html",
        f"{BASE}/economia/noticia-dos.html",
    ]
    first = previews[0]
    assert first.title == "Primera noticia"
    assert first.subtitle == "Resumen de la noticia"
    assert first.descriptor == "Sociedad"
    assert first.published_at == "2024-05-01T10:00:00Z"
    assert first.author == "John Doe"
    assert previews[1].author == "Ana Ruiz"


def test_card_skips_author_and_tag_links_and_defaults(context) -> None:
    page = scan_html(
        "<article>"
        '<a href="/autor/john-doe-527.html">John Doe</a>'
        '<a href="/tag/politica.html">Política</a>'
        '<a href="/politica/noticia-tres.html"><img src="x.jpg"></a>'
        "</article>"
        '<article><a href="https://www.elpais.com/x/noticia.html">Fuera</a></article>'
    )

    previews = extract_page_previews(page, context)

    assert len(previews) == 1
    assert previews[0].url == f"{BASE}/politica/noticia-tres.html"
    assert previews[0].title == "John Doe"
    assert previews[0].author == "John Doe"


def test_class_hinted_blocks_used_without_article_tags(context) -> None:
    page = scan_html(
        '<ul class="voc-list">'
        '<li class="voc-story"><h3><a href="/cultura/libro.html">Un libro</a></h3></li>'
        '<li class="voc-story"><h3>Sin enlace</h3></li>'
        "</ul>"
    )

    previews = extract_page_previews(page, context)

    assert [(p.title, p.url) for p in previews] == [("Un libro", f"{BASE}/cultura/libro.html")]


def test_loose_links_need_long_text_and_article_paths(context) -> None:
    page = scan_html(
        "<body>"
        '<a href="/deportes/gran-victoria.html">Gran victoria del equipo local</a>'
        '<a href="/deportes/corta.html">Corta</a>'
        '<a href="/autor/john-doe-527/2.html">Siguiente página de artículos</a>'
        '<a href="/servicios/suscripcion.html">Suscríbete a nuestra newsletter</a>'
        '<a href="/deportes/gran-victoria.html">Gran victoria del equipo local</a>'
        "</body>"
    )

    previews = extract_page_previews(page, context)

    assert [p.url for p in previews] == [f"{BASE}/deportes/gran-victoria.html"]
    assert previews[0].author == context.author_name


def test_feed_previews_from_rss_and_atom(context) -> None:
    rss = f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/"><channel>
<item>
  <title><![CDATA[Noticia del feed]]></title>
  <link>{BASE}/sociedad/feed-uno.html</link>
  <description>Resumen &amp; contexto</description>
  <category>Sociedad</category>
  <pubDate>Wed, 01 May 2024 10:00:00 GMT</pubDate>
  <dc:creator>John Doe</dc:creator>
</item>
<item><title>Externa</title><link>https://www.elpais.com/x/noticia.html</link></item>
<item><title>Servicio</title><link>{BASE}/servicios/app.html</link></item>
</channel></rss>"""
    atom = f"""<?xml version="1.0"?>
<feed xmlns="http://www.w3.org/2005/Atom">
<entry><link href="{BASE}/cultura/atom-uno.html"/><updated>2024-05-02</updated></entry>
</feed>"""

    rss_previews = extract_feed_previews(rss, context)
    atom_previews = extract_feed_previews(atom, context)

    assert len(rss_previews) == 1
    item = rss_previews[0]
    assert item.title == "Noticia del feed"
    assert item.subtitle == "Resumen & contexto"
    assert item.descriptor == "Sociedad"
    assert item.published_at == "Wed, 01 May 2024 10:00:00 GMT"
    assert item.author == "John Doe"

    assert [(p.title, p.url, p.published_at) for p in atom_previews] == [
        (NO_HEADLINE, f"{BASE}/cultura/atom-uno.html", "2024-05-02")
    ]
    assert atom_previews[0].author == context.author_name
