"""
Overlay renderer - composites annotations over a rasterized page.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from PIL import Image

from ..config import AnnotatorConfig
from ..interactions.gestures import (
    AwaitingText,
    DrawingGesture,
    GestureState,
    HighlightGesture,
    Idle,
)
from ..types import (
    Annotation,
    Color,
    Drawing,
    Highlight,
    Point,
    TextNote,
    normalize_rect,
)
from .canvas import Canvas, CompositeOperation


class OverlayRenderer:
    """Paints the annotation overlay on top of a page image.

    Layers, bottom to top:

    1. the raw page image
    2. highlights (multiply, translucent)
    3. drawings (normal paint-over, opaque)
    4. text notes (opaque)
    5. the gesture in progress, if any

    Every call starts from the raw image; nothing is cached between calls.
    """

    def __init__(self, config: AnnotatorConfig = AnnotatorConfig()):
        self.config = config

    def composite(
        self,
        page_image: Image.Image,
        annotations: Iterable[Annotation],
        gesture: GestureState = Idle(),
        color: Color = 0x000000,
    ) -> Image.Image:
        """Return a new image; ``page_image`` is not modified.

        Args:
            page_image: Rasterized page at the current scale
            annotations: Committed annotations of the displayed page
            gesture: Transient gesture state
            color: Currently selected color, used for the gesture preview
        """
        canvas = Canvas(page_image)

        highlights: List[Highlight] = []
        drawings: List[Drawing] = []
        notes: List[TextNote] = []
        for annotation in annotations:
            if isinstance(annotation, Highlight):
                highlights.append(annotation)
            elif isinstance(annotation, Drawing):
                drawings.append(annotation)
            elif isinstance(annotation, TextNote):
                notes.append(annotation)
            else:
                raise TypeError(f"Unsupported annotation: {annotation!r}")

        for highlight in highlights:
            self._paint_highlight(canvas, highlight.start, highlight.end, highlight.color)

        for drawing in drawings:
            self._paint_polyline(canvas, drawing.points, drawing.color, drawing.stroke_width)

        for note in notes:
            self._paint_text(canvas, note)

        self._paint_gesture(canvas, gesture, color)

        return canvas.image

    def _paint_highlight(self, canvas: Canvas, start: Point, end: Point, color: Color) -> None:
        x0, y0, x1, y1 = normalize_rect(start, end)
        with canvas.saved() as state:
            state.composite_operation = CompositeOperation.MULTIPLY
            state.global_alpha = self.config.highlight_opacity
            state.fill_color = color
            canvas.fill_rect(x0, y0, x1 - x0, y1 - y0)

    def _paint_polyline(
        self, canvas: Canvas, points: Sequence[Point], color: Color, width: float
    ) -> None:
        with canvas.saved() as state:
            state.composite_operation = CompositeOperation.SOURCE_OVER
            state.global_alpha = 1.0
            state.stroke_color = color
            state.line_width = width
            canvas.stroke_polyline([p.as_tuple() for p in points])

    def _paint_text(self, canvas: Canvas, note: TextNote) -> None:
        with canvas.saved() as state:
            state.composite_operation = CompositeOperation.SOURCE_OVER
            state.global_alpha = 1.0
            state.fill_color = note.color
            state.font_size = self.config.text_font_size
            canvas.fill_text(note.text, note.position.x, note.position.y)

    def _paint_gesture(self, canvas: Canvas, gesture: GestureState, color: Color) -> None:
        if isinstance(gesture, DrawingGesture):
            if len(gesture.points) > 1:
                self._paint_polyline(canvas, gesture.points, color, self.config.stroke_width)
        elif isinstance(gesture, HighlightGesture):
            self._paint_highlight(canvas, gesture.start, gesture.current, color)
        elif isinstance(gesture, (Idle, AwaitingText)):
            pass
        else:
            raise TypeError(f"Unsupported gesture state: {gesture!r}")
