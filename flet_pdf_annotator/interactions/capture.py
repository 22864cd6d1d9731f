"""
Gesture capture - turns pointer events into annotations.

``reduce_gesture`` is a pure function: it takes the current gesture state,
an event and the capture context, and returns the next state plus any
annotation to commit. It never touches the store or the screen.
"""

from __future__ import annotations

from ..types import Drawing, Highlight, Point, TextNote, Tool
from .gestures import (
    IDLE,
    AwaitingText,
    CaptureContext,
    DrawingGesture,
    GestureEvent,
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


def reduce_gesture(
    state: GestureState, event: GestureEvent, context: CaptureContext
) -> Transition:
    """Apply one event to the gesture state machine."""
    if isinstance(event, ToolChanged):
        # An unfinished gesture is dropped, never partially committed.
        return Transition(IDLE)

    if isinstance(state, AwaitingText):
        return _reduce_awaiting_text(state, event, context)

    if isinstance(event, (TextSubmitted, TextCancelled)):
        return Transition(state)

    if isinstance(event, PointerDown):
        return _pointer_down(event.point, context)

    if isinstance(event, PointerMove):
        return Transition(_pointer_move(state, event.point))

    if isinstance(event, PointerUp):
        return _finish(state, event.point, context)

    if isinstance(event, PointerLeave):
        return _finish(state, None, context)

    raise TypeError(f"Unsupported gesture event: {event!r}")


def _pointer_down(point: Point, context: CaptureContext) -> Transition:
    tool = context.tool
    if tool == Tool.DRAW:
        return Transition(DrawingGesture((point,)))
    if tool == Tool.HIGHLIGHT:
        return Transition(HighlightGesture(point, point))
    if tool == Tool.TEXT:
        return Transition(
            AwaitingText(point, context.page, context.color),
            text_request=TextRequest(point, context.page),
        )
    return Transition(IDLE)


def _pointer_move(state: GestureState, point: Point) -> GestureState:
    if isinstance(state, DrawingGesture):
        return DrawingGesture(state.points + (point,))
    if isinstance(state, HighlightGesture):
        return HighlightGesture(state.start, point)
    return state


def _finish(state: GestureState, point, context: CaptureContext) -> Transition:
    """Finalize on pointer-up, or on leave (``point`` is None)."""
    if isinstance(state, DrawingGesture):
        if len(state.points) < 2:
            return Transition(IDLE)
        drawing = Drawing(
            page=context.page,
            points=state.points,
            color=context.color,
            stroke_width=context.stroke_width,
            scale=context.scale,
        )
        return Transition(IDLE, committed=drawing)

    if isinstance(state, HighlightGesture):
        end = state.current if point is None else point
        highlight = Highlight(
            page=context.page,
            start=state.start,
            end=end,
            color=context.color,
            scale=context.scale,
        )
        return Transition(IDLE, committed=highlight)

    if isinstance(state, Idle):
        return Transition(IDLE)

    raise TypeError(f"Unsupported gesture state: {state!r}")


def _reduce_awaiting_text(
    state: AwaitingText, event: GestureEvent, context: CaptureContext
) -> Transition:
    if isinstance(event, TextCancelled):
        return Transition(IDLE)

    if isinstance(event, TextSubmitted):
        text = event.text
        if not text or not text.strip():
            return Transition(IDLE)
        note = TextNote(
            page=state.page,
            position=state.position,
            text=text,
            color=state.color,
            scale=context.scale,
        )
        return Transition(IDLE, committed=note)

    # Pointer input is ignored until the text request is answered.
    return Transition(state)
