"""
User interaction handling - gesture states and the capture reducer.
"""

from .capture import reduce_gesture
from .gestures import (
    IDLE,
    AwaitingText,
    CaptureContext,
    DrawingGesture,
    GestureState,
    HighlightGesture,
    Idle,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    TextCancelled,
    TextRequest,
    TextSubmitted,
    ToolChanged,
    Transition,
)

__all__ = [
    "reduce_gesture",
    "IDLE",
    "AwaitingText",
    "CaptureContext",
    "DrawingGesture",
    "GestureState",
    "HighlightGesture",
    "Idle",
    "PointerDown",
    "PointerLeave",
    "PointerMove",
    "PointerUp",
    "TextCancelled",
    "TextRequest",
    "TextSubmitted",
    "ToolChanged",
    "Transition",
]
