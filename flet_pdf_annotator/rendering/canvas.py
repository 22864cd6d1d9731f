"""
Raster canvas with a 2D-context style paint state.

Paint state (alpha, composite operation, colors, line width, font size)
lives on a stack: ``save()`` pushes a copy, ``restore()`` pops it. Shapes
are rasterized into a coverage mask first and then composited onto the
image, so every operation honours the current alpha and blend mode.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from typing import Iterator, List, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFont

from ..types import Color, color_to_rgb255


class CompositeOperation(Enum):
    SOURCE_OVER = "source-over"
    MULTIPLY = "multiply"


@dataclass
class PaintState:
    """Current paint state."""

    global_alpha: float = 1.0
    composite_operation: CompositeOperation = CompositeOperation.SOURCE_OVER
    fill_color: Color = 0x000000
    stroke_color: Color = 0x000000
    line_width: float = 1.0
    font_size: float = 16.0


@lru_cache(maxsize=8)
def _load_font(size: float) -> ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=size)


class Canvas:
    """Paints onto a private RGB copy of ``image``."""

    def __init__(self, image: Image.Image):
        # convert() always returns a new image, so the caller's stays untouched.
        self._image = image.convert("RGB")
        self._state = PaintState()
        self._stack: List[PaintState] = []

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def state(self) -> PaintState:
        return self._state

    @property
    def size(self) -> Tuple[int, int]:
        return self._image.size

    # State stack

    def save(self) -> None:
        self._stack.append(replace(self._state))

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    @contextmanager
    def saved(self) -> Iterator[PaintState]:
        """``save()`` on entry, ``restore()`` on exit; yields the live state."""
        self.save()
        try:
            yield self._state
        finally:
            self.restore()

    # Painting

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Fill every pixel the rectangle touches; empty rectangles paint nothing."""
        if width <= 0 or height <= 0:
            return
        left, top = math.floor(x), math.floor(y)
        right = max(left, math.ceil(x + width) - 1)
        bottom = max(top, math.ceil(y + height) - 1)
        mask = self._new_mask()
        ImageDraw.Draw(mask).rectangle([left, top, right, bottom], fill=255)
        self._composite(mask, self._state.fill_color)

    def stroke_polyline(self, points: Sequence[Tuple[float, float]]) -> None:
        if len(points) < 2:
            return
        mask = self._new_mask()
        ImageDraw.Draw(mask).line(
            list(points),
            fill=255,
            width=max(1, round(self._state.line_width)),
            joint="curve",
        )
        self._composite(mask, self._state.stroke_color)

    def fill_text(self, text: str, x: float, y: float) -> None:
        """Draw ``text`` with its baseline starting at (x, y)."""
        mask = self._new_mask()
        ImageDraw.Draw(mask).text(
            (x, y),
            text,
            fill=255,
            font=_load_font(self._state.font_size),
            anchor="ls",
        )
        self._composite(mask, self._state.fill_color)

    def _new_mask(self) -> Image.Image:
        return Image.new("L", self._image.size, 0)

    def _composite(self, mask: Image.Image, color: Color) -> None:
        state = self._state
        if state.global_alpha <= 0:
            return
        if state.global_alpha < 1:
            alpha = state.global_alpha
            mask = mask.point(lambda v: round(v * alpha))

        source = Image.new("RGB", self._image.size, color_to_rgb255(color))
        if state.composite_operation == CompositeOperation.MULTIPLY:
            source = ImageChops.multiply(self._image, source)

        self._image = Image.composite(source, self._image, mask)
