"""
Shared data types for the PDF annotator.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple, Union

from PIL import Image


class Tool(Enum):
    """Annotation tools available to the user."""

    SELECT = "select"
    HIGHLIGHT = "highlight"
    DRAW = "draw"
    TEXT = "text"


@dataclass(frozen=True)
class Point:
    """A point in pixel space (origin top-left)."""

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def scaled(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)


@dataclass(frozen=True)
class PageSize:
    """Native page size in document points."""

    width: float
    height: float


@dataclass
class RasterizedPage:
    """A page rendered to pixels at a given scale."""

    pixel_width: int
    pixel_height: int
    image: Image.Image


@dataclass(frozen=True)
class Highlight:
    """Axis-aligned rectangle spanned by two opposite corners.

    The corners are kept exactly as captured; use ``bounds()`` to get
    the normalized rectangle. Like every annotation, its pixel coordinates
    belong to a page rendered at ``scale``; ``at_scale()`` converts them.
    """

    page: int
    start: Point
    end: Point
    color: int
    scale: float = 1.0

    def bounds(self) -> Tuple[float, float, float, float]:
        """Normalized (x0, y0, x1, y1) with x0 <= x1 and y0 <= y1."""
        return normalize_rect(self.start, self.end)

    def at_scale(self, scale: float) -> "Highlight":
        if scale == self.scale:
            return self
        factor = scale / self.scale
        return replace(
            self, start=self.start.scaled(factor), end=self.end.scaled(factor), scale=scale
        )


@dataclass(frozen=True)
class Drawing:
    """Freehand polyline."""

    page: int
    points: Tuple[Point, ...]
    color: int
    stroke_width: float = 2.0
    scale: float = 1.0

    def __post_init__(self):
        if len(self.points) < 2:
            raise ValueError("A drawing needs at least 2 points")

    def at_scale(self, scale: float) -> "Drawing":
        if scale == self.scale:
            return self
        factor = scale / self.scale
        return replace(
            self,
            points=tuple(p.scaled(factor) for p in self.points),
            stroke_width=self.stroke_width * factor,
            scale=scale,
        )


@dataclass(frozen=True)
class TextNote:
    """Text anchored at a point (baseline-left)."""

    page: int
    position: Point
    text: str
    color: int
    scale: float = 1.0

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ValueError("A text note needs non-empty text")

    def at_scale(self, scale: float) -> "TextNote":
        if scale == self.scale:
            return self
        return replace(self, position=self.position.scaled(scale / self.scale), scale=scale)


Annotation = Union[Highlight, Drawing, TextNote]

# 24-bit RGB packed into an int, e.g. 0xFF0000
Color = int
Rect = Tuple[float, float, float, float]
UnitRGB = Tuple[float, float, float]

DEFAULT_COLOR: Color = 0xFFFF00


def normalize_rect(a: Point, b: Point) -> Rect:
    """Return (min_x, min_y, max_x, max_y) for two corner points."""
    return (min(a.x, b.x), min(a.y, b.y), max(a.x, b.x), max(a.y, b.y))


def parse_color(value: Union[str, int]) -> Color:
    """Parse ``#RRGGBB`` (or ``RRGGBB``) into a 24-bit int.

    Ints are accepted as-is when they fit in 24 bits.
    """
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"Color out of range: {value:#x}")
        return value

    text = value.strip().lstrip("#")
    if len(text) != 6:
        raise ValueError(f"Invalid color: {value!r}")
    try:
        return int(text, 16)
    except ValueError:
        raise ValueError(f"Invalid color: {value!r}") from None


def color_to_rgb255(color: Color) -> Tuple[int, int, int]:
    return ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)


def color_to_unit_rgb(color: Color) -> UnitRGB:
    """Convert to a 0-1 RGB triple (channel / 255)."""
    r, g, b = color_to_rgb255(color)
    return (r / 255, g / 255, b / 255)


def color_to_hex(color: Color) -> str:
    r, g, b = color_to_rgb255(color)
    return f"#{r:02x}{g:02x}{b:02x}"
