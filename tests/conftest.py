import asyncio

import pymupdf
import pytest
from PIL import Image

from flet_pdf_annotator.backends.base import (
    DocumentAuthor,
    DocumentRenderer,
    EditableDocument,
    EditablePage,
    RenderedDocument,
    RenderedPage,
)
from flet_pdf_annotator.backends.pymupdf import PyMuPDFAuthor, PyMuPDFRenderer
from flet_pdf_annotator.errors import LoadError


def make_pdf(pages: int = 2, width: float = 612, height: float = 792) -> bytes:
    """Build a small PDF in memory, each page labelled with its number."""
    doc = pymupdf.open()
    for number in range(1, pages + 1):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Page {number}", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf()


@pytest.fixture
def pdf_file(tmp_path, pdf_bytes):
    path = tmp_path / "sample.pdf"
    path.write_bytes(pdf_bytes)
    return path


@pytest.fixture
def blank_image() -> Image.Image:
    return Image.new("RGB", (200, 150), "white")


class FailingRenderer(DocumentRenderer):
    async def load_document(self, source):
        raise LoadError("network unreachable")


class GatedRenderer(DocumentRenderer):
    """Delays loads of selected sources until their gate is opened."""

    def __init__(self):
        self._inner = PyMuPDFRenderer()
        self.gates = {}

    async def load_document(self, source):
        gate = self.gates.get(source)
        if gate is not None:
            await gate.wait()
        return await self._inner.load_document(source)


class GatedRasterRenderer(DocumentRenderer):
    """Real documents whose next rasterization waits for ``gate``, if set."""

    def __init__(self):
        self._inner = PyMuPDFRenderer()
        self.gate = None

    async def load_document(self, source):
        return _GatedDocument(await self._inner.load_document(source), self)


class _GatedDocument(RenderedDocument):
    def __init__(self, document, owner):
        self._document = document
        self._owner = owner

    @property
    def page_count(self):
        return self._document.page_count

    async def get_page(self, index):
        return _GatedPage(await self._document.get_page(index), self._owner)

    def close(self):
        self._document.close()


class _GatedPage(RenderedPage):
    def __init__(self, page, owner):
        self._page = page
        self._owner = owner

    async def rasterize(self, scale):
        gate, self._owner.gate = self._owner.gate, None
        if gate is not None:
            await gate.wait()
        return await self._page.rasterize(scale)


class GatedAuthor(DocumentAuthor):
    """PyMuPDF author whose next load waits for ``gate``, if set."""

    def __init__(self):
        self._inner = PyMuPDFAuthor()
        self.gate = None

    async def load_for_editing(self, data):
        gate, self.gate = self.gate, None
        if gate is not None:
            await gate.wait()
        return await self._inner.load_for_editing(data)


class RecordingPage(EditablePage):
    def __init__(self, width=612.0, height=792.0):
        self._width = width
        self._height = height
        self.commands = []

    @property
    def native_width(self):
        return self._width

    @property
    def native_height(self):
        return self._height

    def draw_rectangle(self, x, y, width, height, color, opacity=1.0):
        self.commands.append(("rect", (x, y, width, height), color, opacity))

    def draw_text(self, text, x, y, size, color):
        self.commands.append(("text", text, (x, y), size, color))

    def draw_line(self, start, end, thickness, color):
        self.commands.append(("line", start, end, thickness, color))


class RecordingDocument(EditableDocument):
    def __init__(self, page, fail_serialize=False):
        self.page = page
        self.fail_serialize = fail_serialize
        self.closed = False

    @property
    def page_count(self):
        return 1

    def get_page(self, index):
        if index != 0:
            raise IndexError(f"Page index {index} out of range")
        return self.page

    async def serialize(self):
        if self.fail_serialize:
            raise RuntimeError("disk full")
        return b"%PDF-recorded"

    def close(self):
        self.closed = True


class RecordingAuthor(DocumentAuthor):
    def __init__(self, width=612.0, height=792.0, fail_serialize=False):
        self.document = RecordingDocument(RecordingPage(width, height), fail_serialize)

    async def load_for_editing(self, data):
        return self.document


@pytest.fixture
def recording_author():
    return RecordingAuthor()


def run(coro):
    return asyncio.run(coro)
