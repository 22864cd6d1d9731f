"""
Annotator viewer - Flet control around an AnnotationSession.

Shows the composited page and feeds pointer gestures into the session.
"""

from __future__ import annotations

import base64
import io
from typing import Optional, Tuple

import flet as ft
from PIL import Image

from .interactions.gestures import TextRequest
from .session import AnnotationSession
from .types import Tool


def encode_png(image: Image.Image) -> str:
    """Base64 PNG for ``ft.Image.src_base64``."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


_BLANK_PNG = encode_png(Image.new("RGB", (1, 1), "white"))


class AnnotatorViewer:
    """
    Annotator component.

    Usage:
        session = AnnotationSession()
        viewer = AnnotatorViewer(session)
        page.add(viewer.control)
        await session.load("/path/to/file.pdf")
    """

    def __init__(
        self,
        session: AnnotationSession,
        bgcolor: str = "#ffffff",
        error_color: str = "#b91c1c",
    ):
        self._session = session
        self._bgcolor = bgcolor
        self._error_color = error_color

        session.on_change = self._on_session_change
        session.on_text_request = self._on_text_request

        # Last pointer position inside the page; pan-end events carry none.
        self._last_point: Optional[Tuple[float, float]] = None

        self._image: Optional[ft.Image] = None
        self._page_container: Optional[ft.Container] = None
        self._error_text: Optional[ft.Text] = None
        self._wrapper: Optional[ft.Container] = None
        self._dialog: Optional[ft.AlertDialog] = None

        self._build()

    # Properties

    @property
    def control(self) -> ft.Control:
        """The Flet control to add to a page."""
        return self._wrapper

    @property
    def session(self) -> AnnotationSession:
        return self._session

    # Private methods

    def _build(self):
        """Build the viewer UI."""
        self._image = ft.Image(src_base64=_BLANK_PNG, fit=ft.ImageFit.NONE)

        self._page_container = ft.Container(
            content=self._image,
            bgcolor=self._bgcolor,
            border_radius=2,
            shadow=ft.BoxShadow(
                spread_radius=0,
                blur_radius=20,
                color=ft.Colors.with_opacity(0.3, "#000000"),
            ),
        )

        gesture_detector = ft.GestureDetector(
            content=self._page_container,
            on_tap_down=self._on_tap_down,
            on_pan_start=self._on_pan_start,
            on_pan_update=self._on_pan_update,
            on_pan_end=self._on_pan_end,
            on_exit=self._on_exit,
            drag_interval=10,
        )

        self._error_text = ft.Text("", color=self._error_color, visible=False)

        self._wrapper = ft.Container(
            content=ft.Column(
                controls=[self._error_text, gesture_detector],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            )
        )
        self._update_content()

    def _update_content(self):
        """Show the session's current surface and error state."""
        surface = self._session.surface
        if surface is not None:
            self._image.src_base64 = encode_png(surface)
            self._image.width, self._image.height = surface.size
            self._page_container.width, self._page_container.height = surface.size
        else:
            self._image.src_base64 = _BLANK_PNG

        error = self._session.error
        self._error_text.value = error or ""
        self._error_text.visible = bool(error)

        if self._wrapper and self._wrapper.page:
            self._wrapper.update()

    def _on_session_change(self, session: AnnotationSession):
        self._update_content()

    # Event handlers

    def _on_tap_down(self, e: ft.TapEvent):
        # Text notes are placed on tap; other tools start on drag.
        if self._session.tool == Tool.TEXT:
            self._session.pointer_down(e.local_x, e.local_y)

    def _on_pan_start(self, e: ft.DragStartEvent):
        if self._session.tool == Tool.TEXT:
            return
        self._last_point = (e.local_x, e.local_y)
        self._session.pointer_down(e.local_x, e.local_y)

    def _on_pan_update(self, e: ft.DragUpdateEvent):
        self._last_point = (e.local_x, e.local_y)
        self._session.pointer_move(e.local_x, e.local_y)

    def _on_pan_end(self, e: ft.DragEndEvent):
        if self._last_point is None:
            self._session.pointer_leave()
            return
        self._session.pointer_up(*self._last_point)
        self._last_point = None

    def _on_exit(self, e):
        # Hover exits without a drag in progress need no redraw.
        if self._last_point is None:
            return
        self._session.pointer_leave()
        self._last_point = None

    # Text prompt

    def _on_text_request(self, request: TextRequest):
        page = self._wrapper.page if self._wrapper else None
        if page is None:
            # Nowhere to ask; treat as cancelled.
            self._session.cancel_text()
            return

        field = ft.TextField(label="Annotation text", autofocus=True)

        def on_submit(e):
            page.close(self._dialog)
            self._session.submit_text(field.value)

        def on_cancel(e):
            page.close(self._dialog)
            self._session.cancel_text()

        field.on_submit = on_submit
        self._dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text(f"Note on page {request.page}"),
            content=field,
            actions=[
                ft.TextButton("Cancel", on_click=on_cancel),
                ft.TextButton("Add", on_click=on_submit),
            ],
        )
        page.open(self._dialog)
