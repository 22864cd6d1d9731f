"""
Export pipeline - bakes pixel-space annotations into a new document.
"""

from __future__ import annotations

import logging
from typing import Iterable, Tuple

from .backends.base import DocumentAuthor, EditablePage
from .config import AnnotatorConfig
from .errors import AnnotatorError, ExportError
from .transform import page_scale, rect_to_document_space, to_document_space
from .types import Annotation, Drawing, Highlight, PageSize, TextNote, color_to_unit_rgb

logger = logging.getLogger(__name__)


def default_export_name(ext: str = "pdf") -> str:
    return f"annotated-document.{ext}"


async def export_annotations(
    author: DocumentAuthor,
    document_bytes: bytes,
    page_index: int,
    annotations: Iterable[Annotation],
    pixel_size: Tuple[int, int],
    config: AnnotatorConfig = AnnotatorConfig(),
) -> bytes:
    """Draw ``annotations`` onto page ``page_index`` and return the new bytes.

    Args:
        author: Authoring collaborator
        document_bytes: The original document
        page_index: 0-based page the annotations belong to
        annotations: Annotations of that page, in pixel space
        pixel_size: (width, height) of the page as rendered on screen
        config: Opacity, stroke and font settings

    Raises:
        ExportError: On any failure; no partial output is returned.
    """
    annotations = list(annotations)
    doc = None
    try:
        doc = await author.load_for_editing(document_bytes)
        if not 0 <= page_index < doc.page_count:
            raise ExportError(
                f"Page {page_index + 1} is not in the document ({doc.page_count} pages)"
            )
        page = doc.get_page(page_index)
        native = PageSize(page.native_width, page.native_height)
        scale_x, scale_y = page_scale(native, *pixel_size)

        for annotation in annotations:
            _draw_annotation(page, annotation, native.height, scale_x, scale_y, config)

        data = await doc.serialize()
    except ExportError:
        raise
    except (AnnotatorError, RuntimeError, ValueError, TypeError, IndexError, OSError) as e:
        raise ExportError(f"Failed to export annotated document: {e}") from e
    finally:
        if doc is not None:
            doc.close()

    logger.info(
        "Exported %d annotation(s) on page %d (%d bytes)",
        len(annotations),
        page_index + 1,
        len(data),
    )
    return data


def _draw_annotation(
    page: EditablePage,
    annotation: Annotation,
    page_height: float,
    scale_x: float,
    scale_y: float,
    config: AnnotatorConfig,
) -> None:
    color = color_to_unit_rgb(annotation.color)

    if isinstance(annotation, Highlight):
        x, y, width, height = rect_to_document_space(
            annotation.bounds(), page_height, scale_x, scale_y
        )
        page.draw_rectangle(x, y, width, height, color, opacity=config.highlight_opacity)

    elif isinstance(annotation, TextNote):
        x, y = to_document_space(annotation.position, page_height, scale_x, scale_y)
        page.draw_text(annotation.text, x, y, config.text_font_size * scale_y, color)

    elif isinstance(annotation, Drawing):
        points = [
            to_document_space(p, page_height, scale_x, scale_y) for p in annotation.points
        ]
        thickness = annotation.stroke_width * scale_x
        for start, end in zip(points, points[1:]):
            page.draw_line(start, end, thickness, color)

    else:
        raise TypeError(f"Unsupported annotation: {annotation!r}")
