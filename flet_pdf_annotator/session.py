"""
Annotation session - the application state and its entry points.

One session owns everything that changes while a document is open: the
view state, the annotation store, the selected tool and color, and the
transient gesture. All entry points run on the event loop; the only
awaiting ones are ``load``, page/scale changes (rasterization) and
``export``. Each async request captures a generation number and its result
is dropped if a newer request of the same kind started meanwhile.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from PIL import Image

from .backends.base import (
    DocumentAuthor,
    DocumentRenderer,
    DocumentSource,
    RenderedDocument,
)
from .backends.pymupdf import PyMuPDFAuthor, PyMuPDFRenderer
from .config import AnnotatorConfig
from .errors import ExportError, LoadError
from .export import export_annotations
from .interactions.capture import reduce_gesture
from .interactions.gestures import (
    IDLE,
    CaptureContext,
    GestureEvent,
    GestureState,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    TextCancelled,
    TextRequest,
    TextSubmitted,
    ToolChanged,
)
from .rendering.renderer import OverlayRenderer
from .store import AnnotationStore
from .types import Annotation, Color, Point, RasterizedPage, Tool, parse_color

logger = logging.getLogger(__name__)

_POINTER_EVENTS = (PointerDown, PointerMove, PointerUp, PointerLeave)


@dataclass
class ViewState:
    """What is on screen: page (1-indexed), zoom and rendered pixel size."""

    page: int = 1
    total_pages: int = 0
    scale: float = 1.5
    pixel_width: int = 0
    pixel_height: int = 0


class AnnotationSession:
    """
    Annotate one document at a time.

    Usage:
        session = AnnotationSession(on_change=lambda s: show(s.surface))
        await session.load("/path/to/file.pdf")
        session.select_tool(Tool.HIGHLIGHT)
        session.pointer_down(10, 10)
        session.pointer_up(50, 40)
        data = await session.export()
    """

    def __init__(
        self,
        renderer: Optional[DocumentRenderer] = None,
        author: Optional[DocumentAuthor] = None,
        config: Optional[AnnotatorConfig] = None,
        on_change: Optional[Callable[["AnnotationSession"], None]] = None,
        on_text_request: Optional[Callable[[TextRequest], None]] = None,
    ):
        self.config = config or AnnotatorConfig()
        self._renderer = renderer or PyMuPDFRenderer()
        self._author = author or PyMuPDFAuthor()
        self._overlay = OverlayRenderer(self.config)
        self.on_change = on_change
        self.on_text_request = on_text_request

        self.store = AnnotationStore()
        self.view = ViewState(scale=self.config.initial_scale)
        self.tool = Tool.SELECT
        self.color: Color = self.config.default_color
        self.gesture: GestureState = IDLE
        self.load_error: Optional[str] = None
        self.export_error: Optional[str] = None

        self._source: Optional[DocumentSource] = None
        self._document: Optional[RenderedDocument] = None
        self._raster: Optional[RasterizedPage] = None
        self._surface: Optional[Image.Image] = None

        self._load_generation = 0
        self._raster_generation = 0
        self._export_generation = 0

    # Properties

    @property
    def is_loaded(self) -> bool:
        return self._document is not None

    @property
    def surface(self) -> Optional[Image.Image]:
        """The last composited page image, or None before the first render."""
        return self._surface

    @property
    def raw_page(self) -> Optional[RasterizedPage]:
        """The current page as rasterized, without any overlay."""
        return self._raster

    @property
    def error(self) -> Optional[str]:
        """Most relevant user-visible error message."""
        return self.export_error or self.load_error

    # Loading

    async def load(self, source: DocumentSource) -> bool:
        """Open ``source`` and render its first page.

        Any previous document, annotations and gesture are discarded.

        Returns:
            True if this load completed and is now the active document.
        """
        self._load_generation += 1
        self._export_generation += 1
        generation = self._load_generation

        self._close_document()
        self._source = source
        self.store.clear()
        self.view = ViewState(scale=self.view.scale)
        self.gesture = IDLE
        self.load_error = None
        self.export_error = None

        try:
            document = await self._renderer.load_document(source)
        except Exception as e:
            if generation == self._load_generation:
                self._fail_load(e)
            return False

        if generation != self._load_generation:
            logger.debug("Discarding stale load (generation %d)", generation)
            document.close()
            return False

        if document.page_count < 1:
            document.close()
            self._fail_load(LoadError("Document has no pages"))
            return False

        self._document = document
        self.view.total_pages = document.page_count
        logger.info("Loaded document with %d page(s)", document.page_count)
        return await self._rasterize_current()

    def _fail_load(self, error: Exception) -> None:
        if not isinstance(error, LoadError):
            error = LoadError(f"Failed to load PDF: {error}")
        logger.error("%s", error)
        self.load_error = str(error)
        self._notify()

    def _close_document(self) -> None:
        if self._document is not None:
            self._document.close()
        self._document = None
        self._raster = None
        self._surface = None

    async def _rasterize_current(self) -> bool:
        """Rasterize the current page and recomposite.

        Pixel size is reset first, so no gesture is captured against a
        stale page geometry while rendering is pending.
        """
        document = self._document
        if document is None:
            return False

        self._raster_generation += 1
        generation = self._raster_generation
        self._raster = None
        self.view.pixel_width = 0
        self.view.pixel_height = 0

        try:
            page = await document.get_page(self.view.page - 1)
            raster = await page.rasterize(self.view.scale)
        except Exception as e:
            if generation == self._raster_generation and document is self._document:
                self._fail_load(LoadError(f"Failed to render page {self.view.page}: {e}"))
            return False

        if generation != self._raster_generation or document is not self._document:
            return False

        self._raster = raster
        self.view.pixel_width = raster.pixel_width
        self.view.pixel_height = raster.pixel_height
        self.render()
        return True

    # Navigation and zoom

    async def go_to_page(self, page: int) -> bool:
        """Show page ``page`` (1-indexed, clamped to the document)."""
        if self._document is None:
            return False
        page = max(1, min(self.view.total_pages, page))
        if page == self.view.page and self._raster is not None:
            return False
        self.gesture = IDLE
        self.view.page = page
        return await self._rasterize_current()

    async def next_page(self) -> bool:
        return await self.go_to_page(self.view.page + 1)

    async def previous_page(self) -> bool:
        return await self.go_to_page(self.view.page - 1)

    async def set_scale(self, scale: float) -> bool:
        """Change zoom; annotations follow the page content."""
        scale = self.config.clamp_scale(scale)
        if scale == self.view.scale:
            return False
        self.view.scale = scale
        if self._document is None:
            return False
        self.gesture = IDLE
        return await self._rasterize_current()

    async def zoom_in(self) -> bool:
        return await self.set_scale(self.view.scale * self.config.zoom_step)

    async def zoom_out(self) -> bool:
        return await self.set_scale(self.view.scale / self.config.zoom_step)

    # Tools

    def select_tool(self, tool: Union[Tool, str]) -> None:
        tool = Tool(tool)
        if tool == self.tool:
            return
        self.tool = tool
        self._dispatch(ToolChanged(tool))

    def set_color(self, color: Union[Color, str]) -> None:
        self.color = parse_color(color)

    # Pointer input (pixel space)

    def pointer_down(self, x: float, y: float) -> None:
        self._dispatch(PointerDown(Point(x, y)))

    def pointer_move(self, x: float, y: float) -> None:
        self._dispatch(PointerMove(Point(x, y)))

    def pointer_up(self, x: float, y: float) -> None:
        self._dispatch(PointerUp(Point(x, y)))

    def pointer_leave(self) -> None:
        self._dispatch(PointerLeave())

    def submit_text(self, text: Optional[str]) -> None:
        """Answer a pending text request; blank text creates nothing."""
        self._dispatch(TextSubmitted(text))

    def cancel_text(self) -> None:
        self._dispatch(TextCancelled())

    def _dispatch(self, event: GestureEvent) -> None:
        if isinstance(event, _POINTER_EVENTS) and self._raster is None:
            return

        context = CaptureContext(
            tool=self.tool,
            color=self.color,
            page=self.view.page,
            stroke_width=self.config.stroke_width,
            scale=self.view.scale,
        )
        transition = reduce_gesture(self.gesture, event, context)
        self.gesture = transition.state

        if transition.committed is not None:
            self.store.append(transition.committed)

        self.render()

        if transition.text_request is not None and self.on_text_request:
            self.on_text_request(transition.text_request)

    # Annotations

    def clear_annotations(self) -> None:
        """Drop every annotation and redraw the bare page."""
        self.store.clear()
        self.render()

    def render(self) -> Optional[Image.Image]:
        """Recomposite the current page from scratch."""
        if self._raster is None:
            self._surface = None
        else:
            self._surface = self._overlay.composite(
                self._raster.image,
                self._annotations_at_current_scale(self.view.page),
                self.gesture,
                self.color,
            )
        self._notify()
        return self._surface

    def _annotations_at_current_scale(self, page: int) -> List[Annotation]:
        """Annotations of ``page`` in the pixel space of the current zoom."""
        scale = self.view.scale
        return [a.at_scale(scale) for a in self.store.annotations_for_page(page)]

    # Export

    async def export(self) -> Optional[bytes]:
        """Bake the current page's annotations into a copy of the document.

        Returns:
            The new document bytes, or None on failure (see ``export_error``).
            Annotations are kept either way.
        """
        self._export_generation += 1
        generation = self._export_generation
        self.export_error = None

        if self._document is None or self._source is None:
            self._fail_export(ExportError("No document loaded"))
            return None

        page = self.view.page
        annotations = self._annotations_at_current_scale(page)
        pixel_size = (self.view.pixel_width, self.view.pixel_height)

        try:
            data = self._read_source(self._source)
            result = await export_annotations(
                self._author, data, page - 1, annotations, pixel_size, self.config
            )
        except Exception as e:
            if generation == self._export_generation:
                self._fail_export(e)
            return None

        if generation != self._export_generation:
            logger.info("Export superseded by a newer request")
            return None
        return result

    async def save_export(self, path: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """Export and write the result to ``path`` (default: config.export_name)."""
        data = await self.export()
        if data is None:
            return None
        target = Path(path) if path is not None else Path.cwd() / self.config.export_name
        try:
            target.write_bytes(data)
        except OSError as e:
            self._fail_export(ExportError(f"Could not write {target}: {e}"))
            return None
        logger.info("Saved annotated document to %s", target)
        return target

    def _read_source(self, source: DocumentSource) -> bytes:
        if isinstance(source, bytes):
            return source
        if isinstance(source, io.BytesIO):
            return source.getvalue()
        try:
            return Path(source).read_bytes()
        except OSError as e:
            raise ExportError(f"Could not re-read {source}: {e}") from e

    def _fail_export(self, error: Exception) -> None:
        if not isinstance(error, ExportError):
            error = ExportError(f"Failed to export annotated document: {error}")
        logger.error("%s", error)
        self.export_error = str(error)
        self._notify()

    # Lifecycle

    def close(self) -> None:
        self._load_generation += 1
        self._export_generation += 1
        self._close_document()
        self._source = None

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)
