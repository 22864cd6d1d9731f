"""
Error types raised by the annotator core.
"""


class AnnotatorError(Exception):
    """Base class for annotator failures."""


class LoadError(AnnotatorError):
    """The document could not be loaded or decoded."""


class ExportError(AnnotatorError):
    """Producing the annotated document failed."""


class TransformError(AnnotatorError):
    """Pixel/document coordinate conversion is undefined (page not rendered)."""
