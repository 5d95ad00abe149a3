"""Text normalization shared by author resolution and URL matching."""

from __future__ import annotations

import re
import unicodedata


_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_text(value: str) -> str:
    """Normalize text into a matching slug.

    Lowercases, strips diacritics through canonical decomposition, collapses
    every run of characters outside ``[a-z0-9]`` into a single hyphen and
    trims hyphens at both ends.

    Examples:
        >>> normalize_text("José Ángel Núñez")
        'jose-angel-nunez'
        >>> normalize_text("  --  ")
        ''
    """
    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RE.sub("-", stripped).strip("-")
