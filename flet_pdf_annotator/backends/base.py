"""
Abstract collaborator protocols.

Two independent collaborators are used by the core:

- a *rendering* backend that decodes a document and rasterizes pages
- an *authoring* backend that reloads document bytes, draws on a page in
  document space (origin bottom-left) and serializes the result

Backends must implement these protocols to work with the session.
"""

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Tuple, Union

from ..types import RasterizedPage, UnitRGB

DocumentSource = Union[str, Path, bytes, io.BytesIO]


class RenderedPage(ABC):
    """A page that can be rasterized."""

    @abstractmethod
    async def rasterize(self, scale: float) -> RasterizedPage:
        """Render the page at ``scale`` pixels per point."""
        ...


class RenderedDocument(ABC):
    """A decoded document."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""
        ...

    @abstractmethod
    async def get_page(self, index: int) -> RenderedPage:
        """Get a page by index (0-based)."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close and release resources."""
        ...

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class DocumentRenderer(ABC):
    """Factory for rendered documents."""

    @abstractmethod
    async def load_document(self, source: DocumentSource) -> RenderedDocument:
        """Open ``source``.

        Raises:
            LoadError: If the source cannot be read or decoded
        """
        ...


class EditablePage(ABC):
    """A page accepting draw commands in document space."""

    @property
    @abstractmethod
    def native_width(self) -> float:
        ...

    @property
    @abstractmethod
    def native_height(self) -> float:
        ...

    @abstractmethod
    def draw_rectangle(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: UnitRGB,
        opacity: float = 1.0,
    ) -> None:
        """Fill a rectangle whose lower-left corner is (x, y)."""
        ...

    @abstractmethod
    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        color: UnitRGB,
    ) -> None:
        """Draw text with its baseline starting at (x, y)."""
        ...

    @abstractmethod
    def draw_line(
        self,
        start: Tuple[float, float],
        end: Tuple[float, float],
        thickness: float,
        color: UnitRGB,
    ) -> None:
        """Stroke a straight segment."""
        ...


class EditableDocument(ABC):
    """A document opened for modification."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""
        ...

    @abstractmethod
    def get_page(self, index: int) -> EditablePage:
        """Get a page by index (0-based).

        Raises:
            IndexError: If the index is out of range
        """
        ...

    @abstractmethod
    async def serialize(self) -> bytes:
        """Return the document as bytes."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class DocumentAuthor(ABC):
    """Factory for editable documents."""

    @abstractmethod
    async def load_for_editing(self, data: bytes) -> EditableDocument:
        ...
