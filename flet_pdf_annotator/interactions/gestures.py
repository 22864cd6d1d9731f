"""
Gesture states and pointer events consumed by the capture reducer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..types import Annotation, Color, Point, Tool


# States


@dataclass(frozen=True)
class Idle:
    """No gesture in progress."""


@dataclass(frozen=True)
class DrawingGesture:
    """Freehand stroke being accumulated."""

    points: Tuple[Point, ...]


@dataclass(frozen=True)
class HighlightGesture:
    """Highlight rectangle being dragged out."""

    start: Point
    current: Point


@dataclass(frozen=True)
class AwaitingText:
    """Text tool clicked; waiting for the user to supply the note text."""

    position: Point
    page: int
    color: Color


GestureState = Union[Idle, DrawingGesture, HighlightGesture, AwaitingText]

IDLE = Idle()


# Events


@dataclass(frozen=True)
class PointerDown:
    point: Point


@dataclass(frozen=True)
class PointerMove:
    point: Point


@dataclass(frozen=True)
class PointerUp:
    point: Point


@dataclass(frozen=True)
class PointerLeave:
    """Pointer left the capture surface."""


@dataclass(frozen=True)
class ToolChanged:
    tool: Tool


@dataclass(frozen=True)
class TextSubmitted:
    text: Optional[str]


@dataclass(frozen=True)
class TextCancelled:
    pass


GestureEvent = Union[
    PointerDown,
    PointerMove,
    PointerUp,
    PointerLeave,
    ToolChanged,
    TextSubmitted,
    TextCancelled,
]


# Reducer input/output


@dataclass(frozen=True)
class CaptureContext:
    """Configuration the reducer reads but never changes.

    ``scale`` is the zoom the pointer coordinates were captured at; it is
    recorded on every committed annotation.
    """

    tool: Tool
    color: Color
    page: int
    stroke_width: float = 2.0
    scale: float = 1.0


@dataclass(frozen=True)
class TextRequest:
    """Ask the host to collect note text for ``position`` on ``page``."""

    position: Point
    page: int


@dataclass(frozen=True)
class Transition:
    """Result of feeding one event to the reducer."""

    state: GestureState
    committed: Optional[Annotation] = None
    text_request: Optional[TextRequest] = None
