"""
Coordinate transforms between pixel space and document space.

Pixel space has its origin at the top-left of the rendered page image.
Document space has its origin at the bottom-left, in native points.
"""

from __future__ import annotations

from typing import Tuple

from .errors import TransformError
from .types import PageSize, Point, Rect


def page_scale(
    native: PageSize, pixel_width: float, pixel_height: float
) -> Tuple[float, float]:
    """Document units per pixel along x and y.

    Raises:
        TransformError: If the page has no pixel size yet.
    """
    if pixel_width <= 0 or pixel_height <= 0:
        raise TransformError(
            f"Page has no rendered size ({pixel_width}x{pixel_height})"
        )
    return (native.width / pixel_width, native.height / pixel_height)


def to_document_space(
    point: Point, page_height: float, scale_x: float, scale_y: float
) -> Tuple[float, float]:
    """Project a pixel-space point into document space (y flipped)."""
    return (point.x * scale_x, page_height - point.y * scale_y)


def to_pixel_space(
    doc_point: Tuple[float, float], page_height: float, scale_x: float, scale_y: float
) -> Point:
    """Inverse of ``to_document_space``."""
    if scale_x == 0 or scale_y == 0:
        raise TransformError("Scale must be non-zero")
    x, y = doc_point
    return Point(x / scale_x, (page_height - y) / scale_y)


def rect_to_document_space(
    rect: Rect, page_height: float, scale_x: float, scale_y: float
) -> Rect:
    """Convert normalized pixel bounds to a bottom-left anchored rect.

    Returns:
        (x, y, width, height) where (x, y) is the lower-left corner.
    """
    x0, y0, x1, y1 = rect
    left, top = to_document_space(Point(x0, y0), page_height, scale_x, scale_y)
    right, bottom = to_document_space(Point(x1, y1), page_height, scale_x, scale_y)
    return (left, bottom, right - left, top - bottom)
