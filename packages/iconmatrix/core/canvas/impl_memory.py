"""In-memory scene graph implementing the Canvas protocol.

Used by the CLI to replay requests without a host application, and by the
test suite. Mirrors the host behaviours the engine depends on:

- new nodes land on the current page at (0, 0) with a 100x100 size
- image bytes are decoded (Pillow) and registered under their SHA-1 hash
- variant sets hug their grid content when grid layout is configured
- any operation can be made to fail via ``fail_operations``
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
import hashlib
from io import BytesIO
import itertools
import logging
from typing import Any

from PIL import Image

from .errors import CanvasError, GroupingError, ImageDecodeError
from .models import (
    CanvasImage,
    GridLayout,
    LayoutSizing,
    NodeKind,
    Paint,
    StrokeStyle,
)

logger = logging.getLogger(__name__)

_DEFAULT_SIZE = 100.0
_CONTAINER_KINDS = {NodeKind.PAGE, NodeKind.COMPONENT, NodeKind.COMPONENT_SET}


class SceneNode:
    """Mutable node in a :class:`MemoryCanvas` document."""

    def __init__(self, canvas: MemoryCanvas, node_id: str, kind: NodeKind, name: str = "") -> None:
        self._canvas = canvas
        self.id = node_id
        self.kind = kind
        self.name = name
        self.x = 0.0
        self.y = 0.0
        self._width = _DEFAULT_SIZE
        self._height = _DEFAULT_SIZE
        self._parent: SceneNode | None = None
        self._children: list[SceneNode] = []
        self.fills: tuple[Paint, ...] = ()
        self.stroke: StrokeStyle | None = None
        self.grid_layout: GridLayout | None = None
        self.grid_position: tuple[int, int] | None = None

    def __repr__(self) -> str:
        return f"SceneNode(id={self.id!r}, kind={self.kind.value}, name={self.name!r})"

    @property
    def parent(self) -> SceneNode | None:
        return self._parent

    @property
    def children(self) -> Sequence[SceneNode]:
        return tuple(self._children)

    @property
    def width(self) -> float:
        layout = self.grid_layout
        if layout is not None and layout.sizing_horizontal is LayoutSizing.HUG:
            cell_width, _ = self._cell_size()
            return (
                layout.padding_left
                + layout.padding_right
                + layout.columns * cell_width
                + (layout.columns - 1) * layout.column_gap
            )
        return self._width

    @property
    def height(self) -> float:
        layout = self.grid_layout
        if layout is not None and layout.sizing_vertical is LayoutSizing.HUG:
            _, cell_height = self._cell_size()
            return (
                layout.padding_top
                + layout.padding_bottom
                + layout.rows * cell_height
                + (layout.rows - 1) * layout.row_gap
            )
        return self._height

    def resize(self, width: float, height: float) -> None:
        self._canvas._check("resize", node_name=self.name)
        if width <= 0 or height <= 0:
            raise CanvasError(
                message=f"Invalid size {width}x{height}",
                operation="resize",
                node_name=self.name,
            )
        self._width = float(width)
        self._height = float(height)
        if self._parent is not None:
            self._parent._reflow()

    def append_child(self, child: SceneNode) -> None:
        self._canvas._check("append_child", node_name=self.name)
        if self.kind not in _CONTAINER_KINDS:
            raise CanvasError(
                message=f"{self.kind.value} nodes cannot have children",
                operation="append_child",
                node_name=self.name,
            )
        if child is self or child in self.ancestors():
            raise CanvasError(
                message="Cannot append a node to itself or its descendant",
                operation="append_child",
                node_name=self.name,
            )
        if child._parent is not None:
            child._parent._children.remove(child)
        child._parent = self
        child.grid_position = None
        self._children.append(child)
        self._reflow()

    def set_fills(self, fills: Sequence[Paint]) -> None:
        self._canvas._check("set_fills", node_name=self.name)
        self.fills = tuple(fills)

    def set_stroke(self, stroke: StrokeStyle) -> None:
        self._canvas._check("set_stroke", node_name=self.name)
        self.stroke = stroke

    def set_grid_layout(self, layout: GridLayout) -> None:
        self._canvas._check("set_grid_layout", node_name=self.name)
        if self.kind not in _CONTAINER_KINDS:
            raise CanvasError(
                message=f"{self.kind.value} nodes do not support layout",
                operation="set_grid_layout",
                node_name=self.name,
            )
        self.grid_layout = layout
        self._reflow()

    def set_grid_child_position(self, row: int, column: int) -> None:
        self._canvas._check("set_grid_child_position", node_name=self.name)
        parent = self._parent
        if parent is None or parent.grid_layout is None:
            raise CanvasError(
                message="Parent has no grid layout",
                operation="set_grid_child_position",
                node_name=self.name,
            )
        layout = parent.grid_layout
        if not (0 <= row < layout.rows and 0 <= column < layout.columns):
            raise CanvasError(
                message=f"Cell ({row}, {column}) outside {layout.rows}x{layout.columns} grid",
                operation="set_grid_child_position",
                node_name=self.name,
            )
        self.grid_position = (row, column)
        parent._reflow()

    def ancestors(self) -> Iterator[SceneNode]:
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def descendants(self) -> Iterator[SceneNode]:
        for child in self._children:
            yield child
            yield from child.descendants()

    def _cell_size(self) -> tuple[float, float]:
        width = max((child.width for child in self._children), default=0.0)
        height = max((child.height for child in self._children), default=0.0)
        return width, height

    def _reflow(self) -> None:
        """Recompute child coordinates from grid cells.

        Children without an explicit cell are auto-placed, row-major, into the
        first free cells.
        """
        layout = self.grid_layout
        if layout is None:
            return
        cell_width, cell_height = self._cell_size()
        taken = {child.grid_position for child in self._children if child.grid_position}
        free = (
            (row, column)
            for row in range(layout.rows)
            for column in range(layout.columns)
            if (row, column) not in taken
        )
        for child in self._children:
            cell = child.grid_position or next(free, None)
            if cell is None:
                continue
            row, column = cell
            child.x = layout.padding_left + column * (cell_width + layout.column_gap)
            child.y = layout.padding_top + row * (cell_height + layout.row_gap)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
        if self.fills:
            data["fills"] = [fill.model_dump(mode="json") for fill in self.fills]
        if self.stroke is not None:
            data["stroke"] = self.stroke.model_dump(mode="json")
        if self.grid_layout is not None:
            data["grid_layout"] = self.grid_layout.model_dump(mode="json")
        if self.grid_position is not None:
            data["grid_position"] = list(self.grid_position)
        if self._children:
            data["children"] = [child.to_dict() for child in self._children]
        return data


class MemoryCanvas:
    """Canvas backed by an in-memory document with a single page.

    Args:
        fail_operations: Operation names that raise :class:`CanvasError`
            when called (e.g. ``{"combine_as_variants"}``)
        max_image_size: Largest accepted image edge in pixels
    """

    def __init__(
        self,
        *,
        fail_operations: Iterable[str] = (),
        max_image_size: int = 4096,
    ) -> None:
        self._ids = itertools.count(2)
        self._page = SceneNode(self, "0:1", NodeKind.PAGE, "Page 1")
        self.fail_operations = set(fail_operations)
        self.max_image_size = max_image_size
        self.images: dict[str, CanvasImage] = {}
        self.calls: list[str] = []

    @property
    def current_page(self) -> SceneNode:
        return self._page

    def create_component(self) -> SceneNode:
        self._check("create_component")
        return self._create(NodeKind.COMPONENT)

    def create_rectangle(self) -> SceneNode:
        self._check("create_rectangle")
        return self._create(NodeKind.RECTANGLE)

    def create_image(self, data: bytes) -> CanvasImage:
        self._check("create_image")
        try:
            with Image.open(BytesIO(data)) as img:
                width, height = img.size
                img.verify()
        except Exception as e:
            raise ImageDecodeError(
                message="Image is not a valid format",
                operation="create_image",
                cause=e,
            ) from e

        if width > self.max_image_size or height > self.max_image_size:
            raise ImageDecodeError(
                message=f"Image is too large ({width}x{height} > {self.max_image_size})",
                operation="create_image",
            )

        image = CanvasImage(hash=hashlib.sha1(data).hexdigest(), width=width, height=height)
        self.images.setdefault(image.hash, image)
        return image

    def combine_as_variants(
        self, nodes: Sequence[SceneNode], parent: SceneNode
    ) -> SceneNode:
        self._check("combine_as_variants", error_cls=GroupingError)
        if not nodes:
            raise GroupingError(
                message="At least one component is required",
                operation="combine_as_variants",
            )
        for node in nodes:
            if node.kind is not NodeKind.COMPONENT:
                raise GroupingError(
                    message=f"Only components can be combined, got {node.kind.value}",
                    operation="combine_as_variants",
                    node_name=node.name,
                )

        group = self._create(NodeKind.COMPONENT_SET, parent=parent)
        group.name = "Component 1"
        origin_x = min(node.x for node in nodes)
        origin_y = min(node.y for node in nodes)
        group.x, group.y = origin_x, origin_y
        for node in nodes:
            group.append_child(node)
            node.x -= origin_x
            node.y -= origin_y
        group._width = max(node.x + node.width for node in nodes)
        group._height = max(node.y + node.height for node in nodes)
        return group

    def find_all(self, kinds: Iterable[NodeKind]) -> list[SceneNode]:
        wanted = set(kinds)
        return [node for node in self._page.descendants() if node.kind in wanted]

    def add_existing(self, name: str, kind: NodeKind = NodeKind.COMPONENT_SET) -> SceneNode:
        """Seed the document with a named top-level node."""
        node = self._create(kind)
        node.name = name
        if kind is NodeKind.COMPONENT_SET:
            variant = self._create(NodeKind.COMPONENT, parent=node)
            variant.name = "theme=light, state=default"
        return node

    def to_dict(self) -> dict[str, Any]:
        return self._page.to_dict()

    def _create(self, kind: NodeKind, parent: SceneNode | None = None) -> SceneNode:
        node = SceneNode(self, f"1:{next(self._ids)}", kind)
        target = parent or self._page
        node._parent = target
        target._children.append(node)
        return node

    def _check(
        self,
        operation: str,
        node_name: str | None = None,
        error_cls: type[CanvasError] = CanvasError,
    ) -> None:
        self.calls.append(operation)
        if operation in self.fail_operations:
            logger.debug("Injected failure: %s", operation)
            raise error_cls(
                message=f"Injected failure in {operation}",
                operation=operation,
                node_name=node_name,
            )
