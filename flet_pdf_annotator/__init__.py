"""
Flet PDF Annotator

Highlight, draw on and add notes to PDF pages, then export the annotated
document.

Usage:
    import flet as ft
    from flet_pdf_annotator import AnnotationSession, AnnotatorViewer, Tool

    async def main(page: ft.Page):
        session = AnnotationSession()
        viewer = AnnotatorViewer(session)
        page.add(viewer.control)
        await session.load("/path/to/file.pdf")
        session.select_tool(Tool.HIGHLIGHT)

    ft.app(main)
"""

from __future__ import annotations

from .config import AnnotatorConfig
from .errors import AnnotatorError, ExportError, LoadError, TransformError
from .export import default_export_name, export_annotations
from .logging_utils import configure_logging
from .rendering.renderer import OverlayRenderer
from .session import AnnotationSession, ViewState
from .store import AnnotationStore
from .transform import page_scale, to_document_space, to_pixel_space
from .types import (
    Annotation,
    Drawing,
    Highlight,
    PageSize,
    Point,
    RasterizedPage,
    TextNote,
    Tool,
    color_to_hex,
    parse_color,
)
from .viewer import AnnotatorViewer

__version__ = "0.1.0"

__all__ = [
    "AnnotationSession",
    "AnnotatorViewer",
    "AnnotatorConfig",
    "AnnotationStore",
    "OverlayRenderer",
    "ViewState",
    "Annotation",
    "Highlight",
    "Drawing",
    "TextNote",
    "Point",
    "PageSize",
    "RasterizedPage",
    "Tool",
    "AnnotatorError",
    "LoadError",
    "ExportError",
    "TransformError",
    "configure_logging",
    "default_export_name",
    "export_annotations",
    "page_scale",
    "to_document_space",
    "to_pixel_space",
    "color_to_hex",
    "parse_color",
    "__version__",
]
