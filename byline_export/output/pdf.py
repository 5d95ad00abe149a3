"""
Minimal PDF writer.

Produces a viewable PDF 1.4 document with one A4 page per article, set in
Helvetica with WinAnsi encoding. Object numbers are assigned when objects
are added or reserved and byte offsets are recorded while serializing, so
the cross-reference table always matches the emitted bytes.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from ..core.types import ArticlePreview


PAGE_WIDTH = 595
PAGE_HEIGHT = 842
FONT_SIZE = 10
LEADING = 14
MARGIN_LEFT = 36
TOP_BASELINE = 806

_PUNCTUATION = str.maketrans(
    {
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
        "–": "-",
        "—": "-",
        "…": "...",
    }
)
_UNPRINTABLE_RE = re.compile(r"[^\x20-\x7e\xa0-\xff]")
_WHITESPACE_RE = re.compile(r"\s+")


class PdfDocument:
    """Incremental builder for a small PDF file.

    Example:
        >>> doc = PdfDocument()
        >>> catalog = doc.reserve()
        >>> doc.set(catalog, "<< /Type /Catalog >>")
        >>> doc.build(root=catalog).startswith(b"%PDF-1.4")
        True
    """

    HEADER = b"%PDF-1.4\n"

    def __init__(self) -> None:
        self._objects: list[bytes | None] = []

    def reserve(self) -> int:
        """Allocate the next object number; its body is supplied later via ``set``."""
        self._objects.append(None)
        return len(self._objects)

    def set(self, object_id: int, body: str | bytes) -> None:
        if isinstance(body, str):
            body = body.encode("latin-1")
        self._objects[object_id - 1] = body

    def add(self, body: str | bytes) -> int:
        object_id = self.reserve()
        self.set(object_id, body)
        return object_id

    def add_stream(self, content: str) -> int:
        data = content.encode("latin-1")
        header = f"<< /Length {len(data)} >>\nstream\n".encode("latin-1")
        return self.add(header + data + b"\nendstream")

    def build(self, root: int) -> bytes:
        """Serialize all objects, the xref table and the trailer.

        Raises:
            ValueError: If a reserved object was never given a body
        """
        output = bytearray(self.HEADER)
        offsets: list[int] = []
        for index, body in enumerate(self._objects, start=1):
            if body is None:
                raise ValueError(f"PDF object {index} was reserved but never set")
            offsets.append(len(output))
            output += f"{index} 0 obj\n".encode("latin-1")
            output += body
            output += b"\nendobj\n"

        xref_start = len(output)
        size = len(self._objects) + 1
        output += f"xref\n0 {size}\n".encode("latin-1")
        output += b"0000000000 65535 f \n"
        for offset in offsets:
            output += f"{offset:010d} 00000 n \n".encode("latin-1")
        output += (
            f"trailer\n<< /Size {size} /Root {root} 0 R >>\n"
            f"startxref\n{xref_start}\n%%EOF"
        ).encode("latin-1")
        return bytes(output)


def to_pdf_text(value: str) -> str:
    """Map text onto the WinAnsi-safe range and escape PDF string delimiters.

    Examples:
        >>> to_pdf_text("“Hola” (mundo) — ok")
        '"Hola" \\\\(mundo\\\\) - ok'
    """
    text = value.translate(_PUNCTUATION)
    text = _UNPRINTABLE_RE.sub("?", text)
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def wrap_text(text: str, width: int, max_lines: int | None = None) -> list[str]:
    """Greedy word wrap per paragraph; empty paragraphs become blank lines.

    A single word longer than ``width`` is kept whole on its own line.
    """
    lines: list[str] = []
    for paragraph in text.split("\n"):
        words = [word for word in _WHITESPACE_RE.split(paragraph) if word]
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if len(candidate) > width and current:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines if max_lines is None else lines[:max_lines]


def article_lines(article: ArticlePreview) -> list[str]:
    parts = [
        article.title,
        article.subtitle,
        f"Descriptor: {article.descriptor}" if article.descriptor else "",
        f"URL: {article.url}",
        f"Fecha: {article.published_at or 'N/D'}",
        f"Autor: {article.author}",
    ]
    return [part for part in parts if part]


def page_stream(lines: Sequence[str]) -> str:
    ops = ["BT", f"/F1 {FONT_SIZE} Tf", f"{MARGIN_LEFT} {TOP_BASELINE} Td", f"{LEADING} TL"]
    for index, line in enumerate(lines):
        prefix = "" if index == 0 else "T* "
        ops.append(f"{prefix}({to_pdf_text(line)}) Tj")
    ops.append("ET")
    return "\n".join(ops)


def render_pdf(
    articles: Iterable[ArticlePreview], wrap_width: int = 95, max_lines: int = 160
) -> bytes:
    """Render one page per article.

    Object layout: 1 catalog, 2 page tree, 3 font, then a content stream
    and its page for each article.
    """
    doc = PdfDocument()
    catalog = doc.reserve()
    pages = doc.reserve()
    font = doc.add("<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>")

    kids: list[int] = []
    for article in articles:
        lines = wrap_text("\n\n".join(article_lines(article)), wrap_width, max_lines)
        content = doc.add_stream(page_stream(lines))
        kids.append(
            doc.add(
                f"<< /Type /Page /Parent {pages} 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
                f"/Resources << /Font << /F1 {font} 0 R >> >> /Contents {content} 0 R >>"
            )
        )

    doc.set(catalog, f"<< /Type /Catalog /Pages {pages} 0 R >>")
    kid_refs = " ".join(f"{kid} 0 R" for kid in kids)
    doc.set(pages, f"<< /Type /Pages /Count {len(kids)} /Kids [{kid_refs}] >>")
    return doc.build(root=catalog)
