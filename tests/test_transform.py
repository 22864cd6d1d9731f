import pytest

from flet_pdf_annotator.errors import TransformError
from flet_pdf_annotator.transform import (
    page_scale,
    rect_to_document_space,
    to_document_space,
    to_pixel_space,
)
from flet_pdf_annotator.types import PageSize, Point, normalize_rect


def test_page_scale_is_native_over_pixel():
    scale_x, scale_y = page_scale(PageSize(612, 792), 918, 1188)
    assert scale_x == pytest.approx(2 / 3)
    assert scale_y == pytest.approx(2 / 3)


@pytest.mark.parametrize("size", [(0, 1188), (918, 0), (0, 0)])
def test_page_scale_fails_fast_without_pixel_size(size):
    with pytest.raises(TransformError):
        page_scale(PageSize(612, 792), *size)


def test_to_document_space_flips_y():
    assert to_document_space(Point(0, 0), 792, 1.0, 1.0) == (0, 792)
    assert to_document_space(Point(10, 792), 792, 1.0, 1.0) == (10, 0)
    x, y = to_document_space(Point(150, 300), 792, 2 / 3, 2 / 3)
    assert x == pytest.approx(100)
    assert y == pytest.approx(592)


@pytest.mark.parametrize(
    "point", [Point(0, 0), Point(917.5, 1187.25), Point(33.3, 401.9), Point(-4, 1300)]
)
def test_round_trip_recovers_pixel_point(point):
    scale_x, scale_y = page_scale(PageSize(612, 792), 918, 1188)
    doc = to_document_space(point, 792, scale_x, scale_y)
    back = to_pixel_space(doc, 792, scale_x, scale_y)
    assert back.x == pytest.approx(point.x)
    assert back.y == pytest.approx(point.y)


def test_highlight_rect_at_one_and_a_half_zoom():
    scale_x, scale_y = page_scale(PageSize(612, 792), 918, 1188)
    rect = normalize_rect(Point(100, 100), Point(200, 150))
    x, y, width, height = rect_to_document_space(rect, 792, scale_x, scale_y)

    assert x == pytest.approx(66.67, abs=0.01)
    assert x + width == pytest.approx(133.33, abs=0.01)
    assert y == pytest.approx(692.0, abs=0.01)
    assert y + height == pytest.approx(725.33, abs=0.01)
