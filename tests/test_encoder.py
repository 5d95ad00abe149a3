import csv
import io
import json
import re

import pytest

from byline_export.core.types import ArticlePreview, ExportFormat
from byline_export.errors import UnsupportedFormat
from byline_export.output.encoder import encode_export
from byline_export.output.pdf import PdfDocument, render_pdf, to_pdf_text, wrap_text


def _articles() -> list[ArticlePreview]:
    return [
        ArticlePreview(
            title='El "gran" debate',
            subtitle="Una entradilla, con coma",
            descriptor="Política",
            url="https://www.elcorreo.com/politica/debate.html",
            published_at="2024-05-01",
            author="Ana Ruiz",
        ),
        ArticlePreview(
            title="Segunda pieza",
            url="https://www.elcorreo.com/sociedad/segunda.html",
            author="Ana Ruiz",
        ),
    ]


def test_json_export_uses_wire_keys_and_keeps_unicode() -> None:
    payload = encode_export(_articles(), "json")

    assert payload.content_type == "application/json; charset=utf-8"
    assert payload.extension == "json"
    records = json.loads(payload.content)
    assert len(records) == 2
    assert list(records[0]) == ["title", "subtitle", "descriptor", "url", "publishedAt", "author"]
    assert records[1]["publishedAt"] == ""
    assert "Política" in payload.content


def test_csv_export_quotes_every_value() -> None:
    payload = encode_export(_articles(), ExportFormat.CSV)

    lines = payload.content.split("\n")
    assert payload.content_type == "text/csv; charset=utf-8"
    assert lines[0] == "title,subtitle,descriptor,url,publishedAt,author"
    assert lines[1] == (
        '"El ""gran"" debate","Una entradilla, con coma","Política",'
        '"https://www.elcorreo.com/politica/debate.html","2024-05-01","Ana Ruiz"'
    )
    assert lines[2] == '"Segunda pieza","","","https://www.elcorreo.com/sociedad/segunda.html","","Ana Ruiz"'
    assert len(lines) == 3


def test_json_export_reads_back_into_the_same_records() -> None:
    articles = _articles()

    payload = encode_export(articles, "json")

    assert [ArticlePreview.from_dict(record) for record in json.loads(payload.content)] == articles


def test_csv_rows_split_back_into_six_fields() -> None:
    articles = [
        *_articles(),
        ArticlePreview(
            title='Dice "basta"\ny se va',
            url="https://www.elcorreo.com/sociedad/basta.html",
            subtitle="Linea uno\nlinea dos",
        ),
    ]

    payload = encode_export(articles, "csv")
    rows = list(csv.reader(io.StringIO(payload.content)))

    assert rows[0] == ["title", "subtitle", "descriptor", "url", "publishedAt", "author"]
    assert all(len(row) == 6 for row in rows)
    assert rows[1:] == [
        [a.title, a.subtitle, a.descriptor, a.url, a.published_at, a.author] for a in articles
    ]


def test_csv_export_of_empty_list_is_header_only() -> None:
    assert encode_export([], "csv").content == "title,subtitle,descriptor,url,publishedAt,author"


def test_markdown_export_blocks() -> None:
    payload = encode_export(_articles(), "md")

    assert payload.extension == "md"
    assert payload.content_type == "text/markdown; charset=utf-8"
    first, second = payload.content.split("\n\n---\n\n")
    assert first == (
        '# El "gran" debate\n\n> Una entradilla, con coma\n\n'
        "- URL: https://www.elcorreo.com/politica/debate.html\n"
        "- Fecha: 2024-05-01\n- Autor: Ana Ruiz\n- Descriptor: Política"
    )
    assert second == (
        "# Segunda pieza\n\n- URL: https://www.elcorreo.com/sociedad/segunda.html\n"
        "- Fecha: N/D\n- Autor: Ana Ruiz"
    )


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(UnsupportedFormat) as excinfo:
        encode_export(_articles(), "docx")

    assert excinfo.value.status_code == 400


def test_non_string_field_is_a_type_error() -> None:
    broken = ArticlePreview(title="Ok", url="https://www.elcorreo.com/a.html", author=None)  # type: ignore[arg-type]

    with pytest.raises(TypeError):
        encode_export([broken], "json")


def test_pdf_export_has_consistent_xref() -> None:
    payload = encode_export(_articles(), "pdf")
    data = payload.content

    assert payload.content_type == "application/pdf"
    assert isinstance(data, bytes)
    assert data.startswith(b"%PDF-1.4\n")
    assert data.endswith(b"%%EOF")

    startxref = int(re.search(rb"startxref\n(\d+)\n%%EOF$", data).group(1))
    assert data[startxref:].startswith(b"xref\n0 8\n")
    offsets = [int(value) for value in re.findall(rb"(\d{10}) 00000 n \n", data)]
    assert len(offsets) == 7
    for number, offset in enumerate(offsets, start=1):
        assert data[offset:].startswith(f"{number} 0 obj\n".encode())

    assert b"/Type /Pages /Count 2 /Kids [5 0 R 7 0 R]" in data
    assert b"/Font << /F1 3 0 R >>" in data
    assert b"/MediaBox [0 0 595 842]" in data
    assert b"trailer\n<< /Size 8 /Root 1 0 R >>" in data


def test_pdf_stream_lengths_match() -> None:
    data = render_pdf(_articles())

    for match in re.finditer(rb"<< /Length (\d+) >>\nstream\n", data):
        length = int(match.group(1))
        end = match.end() + length
        assert data[end:end + len(b"\nendstream")] == b"\nendstream"


def test_pdf_page_text_layout() -> None:
    data = render_pdf(_articles()[1:])

    assert b"BT\n/F1 10 Tf\n36 806 Td\n14 TL\n(Segunda pieza) Tj\nT* () Tj\n" in data
    assert b"T* (Fecha: N/D) Tj" in data


def test_pdf_text_encoding() -> None:
    assert to_pdf_text("“Hola” ‘y’ (adiós)… — ñ ✓") == "\"Hola\" 'y' \\(adiós\\)... - ñ ?"
    assert to_pdf_text("back\\slash") == "back\\\\slash"
    assert to_pdf_text("控") == "?"


def test_wrap_text_is_greedy_and_caps_lines() -> None:
    assert wrap_text("uno dos tres cuatro", 9) == ["uno dos", "tres", "cuatro"]
    assert wrap_text("a\n\nb", 10) == ["a", "", "b"]
    assert wrap_text("palabramuylarga corta", 5) == ["palabramuylarga", "corta"]
    assert wrap_text("\n".join("x" * 10), 10, max_lines=3) == ["x", "x", "x"]


def test_pdf_document_rejects_unset_objects() -> None:
    doc = PdfDocument()
    root = doc.reserve()

    with pytest.raises(ValueError):
        doc.build(root=root)
