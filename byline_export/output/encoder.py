"""
Export encoding for article lists.

All encoders are pure: the same articles in the same order always produce
the same bytes.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Sequence

from ..core.types import EXPORT_FIELDS, ArticlePreview, ExportFormat, ExportPayload
from .pdf import render_pdf


MARKDOWN_SEPARATOR = "\n\n---\n\n"
NOT_AVAILABLE = "N/D"

CONTENT_TYPES = {
    ExportFormat.CSV: "text/csv; charset=utf-8",
    ExportFormat.JSON: "application/json; charset=utf-8",
    ExportFormat.MARKDOWN: "text/markdown; charset=utf-8",
    ExportFormat.PDF: "application/pdf",
}


def _check_record(article: ArticlePreview) -> None:
    for name, value in article.to_dict().items():
        if not isinstance(value, str):
            raise TypeError(f"Article field {name!r} must be a string, got {type(value).__name__}")


def encode_csv(articles: Sequence[ArticlePreview]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(",".join(EXPORT_FIELDS) + "\n")
    for article in articles:
        record = article.to_dict()
        writer.writerow([record[name] for name in EXPORT_FIELDS])
    # Every row ends with one terminator; the export has no trailing newline.
    return buffer.getvalue()[:-1]


def encode_json(articles: Sequence[ArticlePreview]) -> str:
    return json.dumps([article.to_dict() for article in articles], indent=2, ensure_ascii=False)


def markdown_block(article: ArticlePreview) -> str:
    lines = [f"# {article.title}"]
    if article.subtitle:
        lines.extend(["", f"> {article.subtitle}"])
    lines.extend(
        [
            "",
            f"- URL: {article.url}",
            f"- Fecha: {article.published_at or NOT_AVAILABLE}",
            f"- Autor: {article.author}",
        ]
    )
    if article.descriptor:
        lines.append(f"- Descriptor: {article.descriptor}")
    return "\n".join(lines)


def encode_markdown(articles: Sequence[ArticlePreview]) -> str:
    return MARKDOWN_SEPARATOR.join(markdown_block(article) for article in articles)


def encode_export(
    articles: Sequence[ArticlePreview],
    fmt: ExportFormat | str,
    pdf_wrap_width: int = 95,
    pdf_max_lines: int = 160,
) -> ExportPayload:
    """Serialize articles in the requested format.

    Args:
        articles: Articles in export order
        fmt: Export format or format token
        pdf_wrap_width: Characters per PDF line
        pdf_max_lines: Lines per PDF page

    Raises:
        UnsupportedFormat: If ``fmt`` is not a known format token
        TypeError: If an article field is not a string
    """
    fmt = ExportFormat.parse(fmt)
    articles = list(articles)
    for article in articles:
        _check_record(article)

    if fmt is ExportFormat.CSV:
        content: str | bytes = encode_csv(articles)
    elif fmt is ExportFormat.JSON:
        content = encode_json(articles)
    elif fmt is ExportFormat.MARKDOWN:
        content = encode_markdown(articles)
    else:
        content = render_pdf(articles, pdf_wrap_width, pdf_max_lines)
    return ExportPayload(content_type=CONTENT_TYPES[fmt], content=content, extension=fmt.extension)
