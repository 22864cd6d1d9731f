"""
Annotator configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .types import DEFAULT_COLOR, Color, parse_color

ENV_PREFIX = "FLET_PDF_ANNOTATOR_"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AnnotatorConfig:
    """Tunable defaults for a session."""

    default_color: Color = DEFAULT_COLOR
    initial_scale: float = 1.5
    min_scale: float = 0.25
    max_scale: float = 5.0
    zoom_step: float = 1.25
    highlight_opacity: float = 0.35
    stroke_width: float = 2.0
    text_font_size: float = 16.0
    export_name: str = "annotated-document.pdf"
    debug: bool = False

    def __post_init__(self):
        if not 0 < self.min_scale <= self.max_scale:
            raise ValueError("Scale bounds must satisfy 0 < min_scale <= max_scale")
        if not 0.0 <= self.highlight_opacity <= 1.0:
            raise ValueError("highlight_opacity must be within [0, 1]")

    def clamp_scale(self, value: float) -> float:
        return max(self.min_scale, min(self.max_scale, value))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnnotatorConfig":
        """Build a config from ``FLET_PDF_ANNOTATOR_*`` variables.

        Recognized: COLOR (#RRGGBB), SCALE (float), DEBUG (1/true/yes/on),
        EXPORT_NAME.
        """
        env = os.environ if environ is None else environ
        config = cls()

        color = env.get(ENV_PREFIX + "COLOR")
        if color:
            config = replace(config, default_color=parse_color(color))

        scale = env.get(ENV_PREFIX + "SCALE")
        if scale:
            try:
                value = float(scale)
            except ValueError:
                raise ValueError(f"Invalid {ENV_PREFIX}SCALE: {scale!r}") from None
            config = replace(config, initial_scale=config.clamp_scale(value))

        debug = env.get(ENV_PREFIX + "DEBUG")
        if debug is not None:
            config = replace(config, debug=debug.strip().lower() in _TRUE_VALUES)

        export_name = env.get(ENV_PREFIX + "EXPORT_NAME")
        if export_name:
            config = replace(config, export_name=export_name)

        return config
