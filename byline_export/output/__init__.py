"""
Export encoding, PDF rendering and the export history ledger.
"""

from .encoder import CONTENT_TYPES, encode_export
from .history import ExportHistory, HistoryEntry, HistorySummary
from .pdf import PdfDocument, render_pdf, wrap_text

__all__ = [
    "CONTENT_TYPES",
    "encode_export",
    "ExportHistory",
    "HistoryEntry",
    "HistorySummary",
    "PdfDocument",
    "render_pdf",
    "wrap_text",
]
