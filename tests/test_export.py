import pymupdf
import pytest

from flet_pdf_annotator.backends.pymupdf import PyMuPDFAuthor
from flet_pdf_annotator.errors import ExportError
from flet_pdf_annotator.export import default_export_name, export_annotations
from flet_pdf_annotator.types import Drawing, Highlight, Point, TextNote

from .conftest import RecordingAuthor, make_pdf, run

RENDERED = (918, 1188)  # 612x792 at scale 1.5


def test_highlight_rectangle_in_document_space(recording_author):
    highlight = Highlight(page=1, start=Point(200, 150), end=Point(100, 100), color=0xFF0000)
    data = run(export_annotations(recording_author, b"%PDF", 0, [highlight], RENDERED))

    assert data == b"%PDF-recorded"
    ((kind, (x, y, width, height), color, opacity),) = recording_author.document.page.commands
    assert kind == "rect"
    assert x == pytest.approx(66.67, abs=0.01)
    assert x + width == pytest.approx(133.33, abs=0.01)
    assert y == pytest.approx(692.0, abs=0.01)
    assert y + height == pytest.approx(725.33, abs=0.01)
    assert color == (1.0, 0.0, 0.0)
    assert opacity == 0.35


def test_drawing_becomes_one_line_per_segment(recording_author):
    drawing = Drawing(
        page=1, points=(Point(0, 0), Point(30, 0), Point(30, 30)), color=0x00FF00
    )
    run(export_annotations(recording_author, b"%PDF", 0, [drawing], RENDERED))

    commands = recording_author.document.page.commands
    assert [c[0] for c in commands] == ["line", "line"]
    _, start, end, thickness, color = commands[0]
    assert start == pytest.approx((0, 792))
    assert end == pytest.approx((20, 792))
    assert thickness == pytest.approx(2 * 2 / 3)
    assert color == (0.0, 1.0, 0.0)
    assert commands[1][1] == pytest.approx((20, 792))
    assert commands[1][2] == pytest.approx((20, 772))


def test_text_note_at_scaled_size(recording_author):
    note = TextNote(page=1, position=Point(90, 300), text="see here", color=0x336699)
    run(export_annotations(recording_author, b"%PDF", 0, [note], RENDERED))

    ((kind, text, (x, y), size, color),) = recording_author.document.page.commands
    assert (kind, text) == ("text", "see here")
    assert x == pytest.approx(60)
    assert y == pytest.approx(592)
    assert size == pytest.approx(16 * 2 / 3)
    assert color == pytest.approx((0x33 / 255, 0x66 / 255, 0x99 / 255))


def test_zero_pixel_size_fails_fast(recording_author):
    highlight = Highlight(page=1, start=Point(0, 0), end=Point(1, 1), color=0)
    with pytest.raises(ExportError):
        run(export_annotations(recording_author, b"%PDF", 0, [highlight], (0, 0)))
    assert recording_author.document.page.commands == []
    assert recording_author.document.closed


def test_collaborator_failure_becomes_export_error():
    author = RecordingAuthor(fail_serialize=True)
    with pytest.raises(ExportError) as info:
        run(export_annotations(author, b"%PDF", 0, [], RENDERED))
    assert isinstance(info.value.__cause__, RuntimeError)


def test_invalid_page_index_becomes_export_error(recording_author):
    with pytest.raises(ExportError, match="Page 6 is not in the document"):
        run(export_annotations(recording_author, b"%PDF", 5, [], RENDERED))
    assert recording_author.document.closed


def test_bad_bytes_become_export_error():
    with pytest.raises(ExportError):
        run(export_annotations(PyMuPDFAuthor(), b"not a pdf", 0, [], RENDERED))


def test_pymupdf_export_preserves_content_and_adds_annotations():
    source = make_pdf(pages=2)
    annotations = [
        Highlight(page=1, start=Point(100, 100), end=Point(200, 150), color=0xFF0000),
        Drawing(page=1, points=(Point(300, 300), Point(450, 300)), color=0x0000FF),
        TextNote(page=1, position=Point(150, 600), text="reviewed", color=0x000000),
    ]
    data = run(export_annotations(PyMuPDFAuthor(), source, 0, annotations, RENDERED))

    doc = pymupdf.open(stream=data, filetype="pdf")
    try:
        assert len(doc) == 2
        page = doc[0]
        text = page.get_text()
        assert "Page 1" in text
        assert "reviewed" in text

        fills = [d for d in page.get_drawings() if d.get("fill") is not None]
        assert len(fills) == 1
        rect = fills[0]["rect"]
        # PyMuPDF reports top-left based coordinates
        assert rect.x0 == pytest.approx(66.67, abs=0.1)
        assert rect.x1 == pytest.approx(133.33, abs=0.1)
        assert rect.y0 == pytest.approx(66.67, abs=0.1)
        assert rect.y1 == pytest.approx(100.0, abs=0.1)
        assert fills[0]["fill"] == pytest.approx((1.0, 0.0, 0.0))
        assert fills[0]["fill_opacity"] == pytest.approx(0.35, abs=0.01)

        strokes = [d for d in page.get_drawings() if d.get("color") is not None]
        assert strokes
        assert "Page 2" in doc[1].get_text()
    finally:
        doc.close()


def test_default_export_name():
    assert default_export_name() == "annotated-document.pdf"
    assert default_export_name("xps") == "annotated-document.xps"
