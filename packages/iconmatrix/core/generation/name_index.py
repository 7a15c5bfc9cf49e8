"""Index of component names already present in the working document."""

from __future__ import annotations

import logging

from iconmatrix.core.canvas.models import NodeKind
from iconmatrix.core.canvas.protocols import Canvas

logger = logging.getLogger(__name__)


class ExistingNameIndex:
    """In-memory set of canonical names used for deduplication.

    Holds no durable state: :meth:`rebuild` repopulates it from the document,
    and successful generations :meth:`insert` their names as they go.
    """

    def __init__(self) -> None:
        self._names: set[str] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def rebuild(self, canvas: Canvas) -> int:
        """Rescan the current page.

        Every component set counts, as does every component that is not a
        variant inside a component set.

        Args:
            canvas: Canvas whose current page is scanned

        Returns:
            Number of distinct names found
        """
        self._names.clear()
        page = canvas.current_page

        for node in canvas.find_all([NodeKind.COMPONENT_SET]):
            self._names.add(node.name)

        for node in canvas.find_all([NodeKind.COMPONENT]):
            parent = node.parent
            if parent is page or (parent is not None and parent.kind is not NodeKind.COMPONENT_SET):
                self._names.add(node.name)

        logger.debug("Indexed %d existing component names", len(self._names))
        return len(self._names)

    def exists(self, name: str) -> bool:
        return name in self._names

    def insert(self, name: str) -> None:
        self._names.add(name)
