import pytest

from byline_export.core.author import is_same_author, resolve_author_context
from byline_export.core.text import normalize_text
from byline_export.errors import DomainNotAllowed, InvalidUrl, NotAuthorPage, ValidationError


def test_resolve_author_context_derives_slug_name_and_id() -> None:
    context = resolve_author_context("https://www.elcorreo.com/autor/jose-perez-1234.html")

    assert context.author_slug == "jose-perez"
    assert context.author_name == "Jose Perez"
    assert context.author_id == "1234"
    assert context.canonical_url == "https://www.elcorreo.com/autor/jose-perez-1234.html"
    assert context.author_path == "/autor/jose-perez-1234"


def test_resolve_author_context_without_id_or_extension() -> None:
    context = resolve_author_context("https://abc.es/autor/maria-lopez")

    assert context.author_slug == "maria-lopez"
    assert context.author_name == "Maria Lopez"
    assert context.author_id == ""


def test_resolve_author_context_accepts_subdomains_and_decodes_path() -> None:
    context = resolve_author_context("https://blogs.elcorreo.com/autor/jos%C3%A9-n%C3%BA%C3%B1ez-7.html")

    assert context.author_slug == "jose-nunez"
    assert context.author_name == "José Núñez"
    assert context.author_id == "7"


@pytest.mark.parametrize(
    "url",
    ["not a url", "ftp://elcorreo.com/autor/x.html", "https:///autor/x.html", ""],
)
def test_resolve_author_context_rejects_malformed_urls(url: str) -> None:
    with pytest.raises(InvalidUrl):
        resolve_author_context(url)


def test_resolve_author_context_rejects_foreign_domain() -> None:
    with pytest.raises(DomainNotAllowed) as excinfo:
        resolve_author_context("https://www.elpais.com/autor/jose-perez-1234.html")

    assert excinfo.value.status_code == 400
    assert excinfo.value.to_dict()["type"] == "DomainNotAllowed"


def test_resolve_author_context_rejects_lookalike_domain() -> None:
    with pytest.raises(DomainNotAllowed):
        resolve_author_context("https://notelcorreo.com/autor/jose-perez-1234.html")


def test_resolve_author_context_requires_author_segment() -> None:
    with pytest.raises(NotAuthorPage):
        resolve_author_context("https://www.elcorreo.com/sociedad/noticia-123.html")


def test_resolve_author_context_rejects_empty_slug() -> None:
    with pytest.raises(NotAuthorPage):
        resolve_author_context("https://www.elcorreo.com/autor/-1234.html")


def test_validation_errors_share_base_class() -> None:
    for error in (InvalidUrl, DomainNotAllowed, NotAuthorPage):
        assert issubclass(error, ValidationError)


def test_normalize_text_strips_diacritics_and_punctuation() -> None:
    assert normalize_text("  Íñigo  O'Donnell!! ") == "inigo-o-donnell"
    assert normalize_text("") == ""


def test_is_same_author_is_permissive(context) -> None:
    assert is_same_author("John Doe", context)
    assert is_same_author("Por John Doe y Ana Ruiz", context)
    assert is_same_author("Doe", context)
    assert is_same_author("", context)
    assert is_same_author("***", context)
    assert not is_same_author("Jane Smith", context)
