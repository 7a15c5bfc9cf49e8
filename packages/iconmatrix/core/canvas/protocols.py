"""Protocols for the canvas (scene-graph) collaborator.

The engine never talks to a concrete design tool. Everything it needs from
the host is expressed here: node creation, geometry, paints, grouping into a
variant set, grid layout and document queries.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from .models import CanvasImage, GridLayout, NodeKind, Paint, StrokeStyle


@runtime_checkable
class CanvasNode(Protocol):
    """A node in the host document.

    ``name``, ``x`` and ``y`` are writable; size changes go through
    :meth:`resize` so hosts can reject invalid dimensions.
    """

    id: str
    kind: NodeKind
    name: str
    x: float
    y: float

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    @property
    def parent(self) -> CanvasNode | None: ...

    @property
    def children(self) -> Sequence[CanvasNode]: ...

    def resize(self, width: float, height: float) -> None:
        """Resize the node.

        Raises:
            CanvasError: If the dimensions are rejected by the host
        """
        ...

    def append_child(self, child: CanvasNode) -> None:
        """Reparent ``child`` under this node."""
        ...

    def set_fills(self, fills: Sequence[Paint]) -> None: ...

    def set_stroke(self, stroke: StrokeStyle) -> None: ...

    def set_grid_layout(self, layout: GridLayout) -> None: ...

    def set_grid_child_position(self, row: int, column: int) -> None:
        """Place this node in a cell of its parent's grid layout."""
        ...


@runtime_checkable
class Canvas(Protocol):
    """Protocol for the host canvas service.

    All calls are synchronous; implementations raise
    :class:`~iconmatrix.core.canvas.errors.CanvasError` (or any other
    exception) on backend failure.
    """

    @property
    def current_page(self) -> CanvasNode:
        """The page new nodes are created on."""
        ...

    def create_component(self) -> CanvasNode: ...

    def create_rectangle(self) -> CanvasNode: ...

    def create_image(self, data: bytes) -> CanvasImage:
        """Decode and register image bytes.

        Raises:
            CanvasError: If the bytes are not a decodable image
        """
        ...

    def combine_as_variants(
        self, nodes: Sequence[CanvasNode], parent: CanvasNode
    ) -> CanvasNode:
        """Group component nodes into a single variant set under ``parent``.

        Raises:
            CanvasError: If grouping is rejected by the host
        """
        ...

    def find_all(self, kinds: Iterable[NodeKind]) -> list[CanvasNode]:
        """Return every node of the given kinds on the current page, depth first."""
        ...
