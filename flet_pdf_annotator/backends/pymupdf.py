"""
PyMuPDF backend implementation.

Implements both collaborators: page rasterization and page authoring.

Opening, rasterizing and serializing run in a worker thread so the event
loop stays responsive. MuPDF is not thread-safe, so every call into it
holds ``_mupdf_lock``.
"""

from __future__ import annotations

import asyncio
import io
import logging
import threading
import warnings
from pathlib import Path
from typing import Dict, Optional, Tuple

warnings.filterwarnings("ignore", message="builtin type Swig")

import pymupdf  # noqa: E402
from PIL import Image  # noqa: E402

from ..errors import LoadError  # noqa: E402
from ..types import RasterizedPage, UnitRGB  # noqa: E402
from .base import (  # noqa: E402
    DocumentAuthor,
    DocumentRenderer,
    DocumentSource,
    EditableDocument,
    EditablePage,
    RenderedDocument,
    RenderedPage,
)

logger = logging.getLogger(__name__)

_mupdf_lock = threading.RLock()


async def _in_thread(func, *args, **kwargs):
    """Run ``func`` off the event loop while holding the MuPDF lock."""

    def call():
        with _mupdf_lock:
            return func(*args, **kwargs)

    return await asyncio.to_thread(call)


def _open(source: DocumentSource, password: Optional[str] = None) -> pymupdf.Document:
    if isinstance(source, (str, Path)):
        doc = pymupdf.open(str(source))
    elif isinstance(source, bytes):
        doc = pymupdf.open(stream=source, filetype="pdf")
    elif isinstance(source, io.BytesIO):
        doc = pymupdf.open(stream=source.getvalue(), filetype="pdf")
    else:
        raise TypeError(f"Unsupported source type: {type(source)}")

    # Handle encrypted documents
    if doc.is_encrypted:
        if password is None:
            doc.close()
            raise ValueError("Document is encrypted and requires a password")
        if not doc.authenticate(password):
            doc.close()
            raise ValueError("Invalid password")

    return doc


class PyMuPDFPage(RenderedPage):
    """PyMuPDF page implementation."""

    def __init__(self, page: pymupdf.Page):
        self._page = page

    async def rasterize(self, scale: float) -> RasterizedPage:
        return await _in_thread(self._rasterize, scale)

    def _rasterize(self, scale: float) -> RasterizedPage:
        pix = self._page.get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
        if pix.n != 3:
            pix = pymupdf.Pixmap(pymupdf.csRGB, pix)
        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        return RasterizedPage(pixel_width=pix.width, pixel_height=pix.height, image=image)


class PyMuPDFDocument(RenderedDocument):
    """PyMuPDF document opened for viewing."""

    def __init__(self, doc: pymupdf.Document):
        self._doc = doc
        self._pages: Dict[int, PyMuPDFPage] = {}

    @property
    def page_count(self) -> int:
        return len(self._doc)

    async def get_page(self, index: int) -> PyMuPDFPage:
        if index in self._pages:
            return self._pages[index]

        if index < 0 or index >= len(self._doc):
            raise IndexError(f"Page index {index} out of range")

        with _mupdf_lock:
            page = PyMuPDFPage(self._doc[index])
        self._pages[index] = page
        return page

    def close(self) -> None:
        with _mupdf_lock:
            if self._doc:
                self._doc.close()
        self._pages.clear()


class PyMuPDFRenderer(DocumentRenderer):
    """Opens documents for display."""

    def __init__(self, password: Optional[str] = None):
        self._password = password

    async def load_document(self, source: DocumentSource) -> PyMuPDFDocument:
        try:
            doc = await _in_thread(_open, source, self._password)
        except (RuntimeError, ValueError, TypeError, OSError) as e:
            logger.debug("Could not open %r", source, exc_info=True)
            raise LoadError(f"Failed to load PDF: {e}") from e
        return PyMuPDFDocument(doc)


class PyMuPDFEditablePage(EditablePage):
    """Draws on a page using document coordinates (origin bottom-left)."""

    def __init__(self, page: pymupdf.Page):
        self._page = page

    @property
    def native_width(self) -> float:
        return self._page.rect.width

    @property
    def native_height(self) -> float:
        return self._page.rect.height

    def _point(self, x: float, y: float) -> pymupdf.Point:
        # PyMuPDF puts the origin at the top-left.
        return pymupdf.Point(x, self.native_height - y)

    def draw_rectangle(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: UnitRGB,
        opacity: float = 1.0,
    ) -> None:
        rect = pymupdf.Rect(self._point(x, y + height), self._point(x + width, y))
        with _mupdf_lock:
            self._page.draw_rect(
                rect, color=None, fill=color, width=0, fill_opacity=opacity
            )

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        color: UnitRGB,
    ) -> None:
        with _mupdf_lock:
            self._page.insert_text(
                self._point(x, y), text, fontsize=size, fontname="helv", color=color
            )

    def draw_line(
        self,
        start: Tuple[float, float],
        end: Tuple[float, float],
        thickness: float,
        color: UnitRGB,
    ) -> None:
        with _mupdf_lock:
            self._page.draw_line(
                self._point(*start),
                self._point(*end),
                color=color,
                width=thickness,
                lineCap=1,
            )


class PyMuPDFEditableDocument(EditableDocument):
    """PyMuPDF document opened for modification."""

    def __init__(self, doc: pymupdf.Document):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return len(self._doc)

    def get_page(self, index: int) -> PyMuPDFEditablePage:
        if index < 0 or index >= len(self._doc):
            raise IndexError(f"Page index {index} out of range")
        with _mupdf_lock:
            return PyMuPDFEditablePage(self._doc[index])

    async def serialize(self) -> bytes:
        return await _in_thread(self._doc.tobytes, garbage=4, deflate=True)

    def close(self) -> None:
        with _mupdf_lock:
            self._doc.close()


class PyMuPDFAuthor(DocumentAuthor):
    """Reopens document bytes for drawing."""

    async def load_for_editing(self, data: bytes) -> PyMuPDFEditableDocument:
        doc = await _in_thread(_open, data)
        return PyMuPDFEditableDocument(doc)
