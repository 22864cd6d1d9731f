"""
In-memory annotation store, keyed by page.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Tuple

from .types import Annotation

logger = logging.getLogger(__name__)


class AnnotationStore:
    """Ordered annotations per page.

    Order is append-only and doubles as z-order. Annotations have no
    identifier beyond their position.
    """

    def __init__(self):
        self._pages: Dict[int, List[Annotation]] = {}

    def append(self, annotation: Annotation) -> None:
        """Add an annotation to the end of its page's sequence."""
        self._pages.setdefault(annotation.page, []).append(annotation)
        logger.debug(
            "Stored %s on page %d", type(annotation).__name__, annotation.page
        )

    def annotations_for_page(self, page: int) -> Tuple[Annotation, ...]:
        """Annotations on ``page`` in insertion order."""
        return tuple(self._pages.get(page, ()))

    def count_for_page(self, page: int) -> int:
        return len(self._pages.get(page, ()))

    def pages(self) -> List[int]:
        """Pages that carry at least one annotation, ascending."""
        return sorted(p for p, anns in self._pages.items() if anns)

    def clear(self) -> None:
        """Remove every annotation on every page."""
        self._pages.clear()

    def __len__(self) -> int:
        return sum(len(anns) for anns in self._pages.values())

    def __iter__(self) -> Iterator[Annotation]:
        for page in sorted(self._pages):
            yield from self._pages[page]
