"""
Rendering - raster canvas and the annotation overlay renderer.
"""

from .canvas import Canvas, CompositeOperation, PaintState
from .renderer import OverlayRenderer

__all__ = ["Canvas", "CompositeOperation", "PaintState", "OverlayRenderer"]
