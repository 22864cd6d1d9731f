"""
PDF Annotator - highlight, draw and add notes, then export.

Run with: python example.py path/to/file.pdf
"""

import logging
import sys

import flet as ft

from flet_pdf_annotator import (
    AnnotationSession,
    AnnotatorConfig,
    AnnotatorViewer,
    Tool,
    color_to_hex,
    configure_logging,
)

COLORS = {
    "bg": "#000000",
    "surface": "#0a0a0a",
    "border": "#262626",
    "text": "#ededed",
    "text_muted": "#737373",
    "active": "#404040",
}

ANNOTATION_COLORS = ["#FFFF00", "#FF0000", "#22C55E", "#3B82F6", "#000000"]

log = logging.getLogger(__name__)


def main(source: str):
    config = AnnotatorConfig.from_env()
    configure_logging(debug=config.debug)

    async def app(page: ft.Page):
        page.title = "PDF Annotator"
        page.padding = 0
        page.bgcolor = COLORS["bg"]
        page.theme_mode = ft.ThemeMode.DARK

        session = AnnotationSession(config=config)
        viewer = AnnotatorViewer(session)
        page_label = ft.Text("", color=COLORS["text_muted"], size=13)
        tool_buttons = {}

        def refresh_chrome():
            view = session.view
            page_label.value = f"Page {view.page} of {view.total_pages}"
            for tool, button in tool_buttons.items():
                button.bgcolor = COLORS["active"] if tool == session.tool else None
            page.update()

        def tool_btn(tool, icon, tooltip):
            def on_click(e):
                session.select_tool(tool)
                refresh_chrome()

            button = ft.Container(
                content=ft.Icon(icon, size=18, color=COLORS["text"]),
                width=32,
                height=32,
                border_radius=6,
                alignment=ft.alignment.center,
                on_click=on_click,
                tooltip=tooltip,
            )
            tool_buttons[tool] = button
            return button

        def color_dot(hex_color):
            def on_click(e):
                session.set_color(hex_color)
                log.debug("Color set to %s", color_to_hex(session.color))

            return ft.Container(
                width=18,
                height=18,
                border_radius=9,
                bgcolor=hex_color,
                on_click=on_click,
            )

        async def on_prev(e):
            await session.previous_page()
            refresh_chrome()

        async def on_next(e):
            await session.next_page()
            refresh_chrome()

        async def on_zoom_in(e):
            await session.zoom_in()

        async def on_zoom_out(e):
            await session.zoom_out()

        def on_clear(e):
            session.clear_annotations()

        async def on_export(e):
            path = await session.save_export()
            if path is not None:
                page.open(ft.SnackBar(ft.Text(f"Saved {path.name}")))

        toolbar = ft.Container(
            content=ft.Row(
                [
                    tool_btn(Tool.SELECT, ft.Icons.NEAR_ME, "Select"),
                    tool_btn(Tool.HIGHLIGHT, ft.Icons.BORDER_COLOR, "Highlight"),
                    tool_btn(Tool.DRAW, ft.Icons.GESTURE, "Draw"),
                    tool_btn(Tool.TEXT, ft.Icons.TEXT_FIELDS, "Text"),
                    ft.Container(width=1, height=24, bgcolor=COLORS["border"]),
                    *[color_dot(c) for c in ANNOTATION_COLORS],
                    ft.Container(width=1, height=24, bgcolor=COLORS["border"]),
                    ft.IconButton(ft.Icons.ZOOM_OUT, on_click=on_zoom_out),
                    ft.IconButton(ft.Icons.ZOOM_IN, on_click=on_zoom_in),
                    ft.IconButton(ft.Icons.DELETE_SWEEP, tooltip="Clear all", on_click=on_clear),
                    ft.IconButton(ft.Icons.DOWNLOAD, tooltip="Download PDF", on_click=on_export),
                ],
                spacing=4,
            ),
            bgcolor=COLORS["surface"],
            border=ft.border.all(1, COLORS["border"]),
            border_radius=8,
            padding=6,
        )

        navigation = ft.Row(
            [
                ft.IconButton(ft.Icons.CHEVRON_LEFT, on_click=on_prev),
                page_label,
                ft.IconButton(ft.Icons.CHEVRON_RIGHT, on_click=on_next),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
        )

        page.add(
            ft.Column(
                [
                    toolbar,
                    ft.Container(content=viewer.control, expand=True),
                    navigation,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                scroll=ft.ScrollMode.AUTO,
                expand=True,
            )
        )

        await session.load(source)
        refresh_chrome()

    ft.app(target=app)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python example.py FILE.pdf")
        sys.exit(1)
    main(sys.argv[1])
