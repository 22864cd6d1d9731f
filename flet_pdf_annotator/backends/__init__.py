"""
PDF backends - abstraction layer for PDF rendering and authoring libraries.
"""

from .base import (
    DocumentAuthor,
    DocumentRenderer,
    DocumentSource,
    EditableDocument,
    EditablePage,
    RenderedDocument,
    RenderedPage,
)
from .pymupdf import PyMuPDFAuthor, PyMuPDFRenderer

__all__ = [
    "DocumentAuthor",
    "DocumentRenderer",
    "DocumentSource",
    "EditableDocument",
    "EditablePage",
    "RenderedDocument",
    "RenderedPage",
    "PyMuPDFAuthor",
    "PyMuPDFRenderer",
]
