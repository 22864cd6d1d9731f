from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path


def configure_logging(*, debug: bool = False, log_path: str | None = None) -> None:
    """Configure app-wide logging.

    - Always logs to a rotating file under ./logs
    - Optionally logs to console when debug is enabled
    """

    level = logging.DEBUG if debug else logging.INFO

    if log_path is None:
        env_log_dir = os.environ.get("FLET_PDF_ANNOTATOR_LOG_DIR")
        if env_log_dir:
            log_dir = Path(env_log_dir)
        else:
            log_dir = Path.cwd() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = str(log_dir / "flet_pdf_annotator.log")

    root = logging.getLogger()
    root.setLevel(level)

    # Handlers are installed once per process.
    if getattr(root, "_flet_pdf_annotator_configured", False):
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if debug:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(fmt)
        root.addHandler(console)

    setattr(root, "_flet_pdf_annotator_configured", True)
