"""
Tag/attribute scanning over HTML and XML markup.

Call sites depend on the MarkupScanner capability set ("find blocks by tag",
"find attribute values", "clean text") rather than on a parser, so the
BeautifulSoup-backed SoupScanner can be replaced without touching them.
"""

from __future__ import annotations

import html
import re
from typing import Iterable, Protocol, Sequence

from bs4 import BeautifulSoup, Tag


_CDATA_RE = re.compile(r"<!\[CDATA\[|\]\]>")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_html(value: str | None) -> str:
    """Strip tags and CDATA markers, decode entities and collapse whitespace.

    Examples:
        >>> clean_html("<b>Caf&eacute;</b>&nbsp; con <i>leche</i>")
        'Café con leche'
    """
    if not value:
        return ""
    text = _CDATA_RE.sub("", str(value))
    if "<" in text:
        text = BeautifulSoup(text, "html.parser").get_text(" ")
    elif "&" in text:
        text = html.unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


class MarkupScanner(Protocol):
    """Capability set used by the card, discovery and enrichment code."""

    markup: str

    def blocks(self, *tags: str) -> list["MarkupScanner"]:
        """Every element with one of the given tag names, in document order."""
        ...

    def class_blocks(
        self, tags: Sequence[str], hints: Sequence[str], limit: int
    ) -> list["MarkupScanner"]:
        """Innermost elements of ``tags`` whose class contains one of ``hints``."""
        ...

    def first_text(self, *tags: str) -> str:
        """Cleaned text of the first non-empty element among ``tags`` (tried in order)."""
        ...

    def meta(self, attr: str, value: str) -> str:
        """``content`` of the first ``<meta attr="value">``."""
        ...

    def by_class(self, hints: Sequence[str]) -> str:
        """Cleaned text of the first element whose class contains a hint (hints tried in order)."""
        ...

    def attr(self, tag: str, name: str) -> str:
        """Value of ``name`` on the first ``tag`` carrying it."""
        ...

    def tag_attrs(self, tag: str, required: str | None = None) -> list[dict[str, str]]:
        """Attribute maps of every ``tag`` (optionally only those carrying ``required``)."""
        ...

    def attribute_values(self, names: Sequence[str]) -> list[tuple[str, str]]:
        """``(name, value)`` pairs for the given attributes across all elements."""
        ...

    def links(self) -> list[tuple[str, str]]:
        """``(href, cleaned text)`` for every anchor."""
        ...

    def hrefs(self) -> list[str]:
        """Every ``href`` value on any element, in document order."""
        ...

    def scripts(self, type_: str | None = None) -> list[str]:
        """Raw bodies of ``<script>`` elements, optionally filtered by type."""
        ...


def _attr_value(value: object) -> str:
    # Multi-valued attributes (class, rel) come back as lists.
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return "" if value is None else str(value)


class SoupScanner:
    """MarkupScanner backed by BeautifulSoup.

    Args:
        markup: Raw markup string or an already-parsed element
        features: BeautifulSoup parser ("html.parser" for pages, "xml" for feeds)
    """

    def __init__(self, markup: str | Tag, features: str = "html.parser"):
        if isinstance(markup, Tag):
            self._root = markup
            self.markup = str(markup)
        else:
            self._root = BeautifulSoup(markup or "", features)
            self.markup = markup or ""
        self._features = features

    def _wrap(self, element: Tag) -> "SoupScanner":
        return SoupScanner(element, self._features)

    def blocks(self, *tags: str) -> list["SoupScanner"]:
        return [self._wrap(el) for el in self._root.find_all(list(tags))]

    def class_blocks(
        self, tags: Sequence[str], hints: Sequence[str], limit: int
    ) -> list["SoupScanner"]:
        lowered = [hint.lower() for hint in hints]

        def _matches(el: Tag) -> bool:
            classes = _attr_value(el.get("class")).lower()
            return any(hint in classes for hint in lowered)

        candidates = [el for el in self._root.find_all(list(tags), class_=True) if _matches(el)]
        innermost = [
            el
            for el in candidates
            if not any(_matches(child) for child in el.find_all(list(tags), class_=True))
        ]
        return [self._wrap(el) for el in innermost[:limit]]

    def first_text(self, *tags: str) -> str:
        for tag in tags:
            element = self._root.find(tag)
            if element is None:
                continue
            text = clean_html(element.get_text(" "))
            if text:
                return text
        return ""

    def meta(self, attr: str, value: str) -> str:
        wanted = value.lower()
        for element in self._root.find_all("meta", attrs={attr: True}):
            if _attr_value(element.get(attr)).lower() != wanted:
                continue
            content = _attr_value(element.get("content"))
            if content:
                return content
        return ""

    def by_class(self, hints: Sequence[str]) -> str:
        elements = self._root.find_all(class_=True)
        for hint in hints:
            needle = hint.lower()
            for element in elements:
                if needle not in _attr_value(element.get("class")).lower():
                    continue
                text = clean_html(element.get_text(" "))
                if text:
                    return text
        return ""

    def attr(self, tag: str, name: str) -> str:
        element = self._root.find(tag, attrs={name: True})
        if element is None:
            return ""
        return _attr_value(element.get(name)).strip()

    def tag_attrs(self, tag: str, required: str | None = None) -> list[dict[str, str]]:
        attrs = {required: True} if required else {}
        return [
            {key.lower(): _attr_value(value) for key, value in el.attrs.items()}
            for el in self._root.find_all(tag, attrs=attrs)
        ]

    def attribute_values(self, names: Sequence[str]) -> list[tuple[str, str]]:
        wanted = {name.lower() for name in names}
        pairs: list[tuple[str, str]] = []
        for element in self._root.find_all(True):
            for key, value in element.attrs.items():
                if key.lower() in wanted:
                    pairs.append((key.lower(), _attr_value(value).strip()))
        return pairs

    def links(self) -> list[tuple[str, str]]:
        return [
            (_attr_value(el.get("href")).strip(), clean_html(el.get_text(" ")))
            for el in self._root.find_all("a", href=True)
        ]

    def hrefs(self) -> list[str]:
        return [_attr_value(el.get("href")).strip() for el in self._root.find_all(href=True)]

    def scripts(self, type_: str | None = None) -> list[str]:
        bodies = []
        for element in self._root.find_all("script"):
            if type_ is not None and _attr_value(element.get("type")).strip().lower() != type_:
                continue
            bodies.append(element.string or element.get_text())
        return bodies


def scan_html(markup: str) -> SoupScanner:
    return SoupScanner(markup, "html.parser")


def scan_xml(markup: str) -> SoupScanner:
    return SoupScanner(markup, "xml")


def first_non_empty(values: Iterable[str]) -> str:
    for value in values:
        if value:
            return value
    return ""
