"""Turns resolved grid cells into canvas nodes.

Each cell becomes a component sized to the icon, holding a single rectangle:
an image fill for variants with pixel data, a flat placeholder fill for
variants flagged as missing. A failure on one cell is logged and recorded,
and the remaining cells are still materialized.
"""

from __future__ import annotations

import asyncio
import logging

from iconmatrix.core.canvas.errors import describe_error, error_message
from iconmatrix.core.canvas.models import ImagePaint, ScaleMode, SolidPaint
from iconmatrix.core.canvas.protocols import Canvas, CanvasNode
from iconmatrix.core.config.models import LayoutConfig
from iconmatrix.core.generation.matrix import VariantGrid
from iconmatrix.core.generation.models import (
    CellResolution,
    CreatedNode,
    FailureKind,
    GenerationFailure,
    GenerationReport,
    IconRequest,
    MatrixCell,
)
from iconmatrix.core.generation.naming import variant_name
from iconmatrix.core.transport.channel import ChannelLogger

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = "missing-placeholder"
ICON_LAYER_NAME = "icon"


class NodeAssembler:
    """Materializes matrix cells through the canvas collaborator.

    Args:
        canvas: Canvas the nodes are created on
        layout: Layout settings (placeholder color)
        ui_log: UI log stream for per-cell errors
    """

    def __init__(self, canvas: Canvas, layout: LayoutConfig, ui_log: ChannelLogger) -> None:
        self._canvas = canvas
        self._layout = layout
        self._ui_log = ui_log

    async def materialize(
        self,
        cell: MatrixCell,
        request: IconRequest,
        report: GenerationReport,
    ) -> CreatedNode | None:
        """Create the node for one cell.

        Args:
            cell: Resolved grid cell
            request: Request the cell belongs to (icon size)
            report: Accumulator for problems and failures

        Returns:
            CreatedNode, or None if the cell is unresolved or creation failed
        """
        if cell.resolution is CellResolution.UNRESOLVED or cell.record is None:
            return None

        width, height = request.icon_width, request.icon_height

        try:
            if cell.resolution is CellResolution.MISSING:
                report.mark_missing()
                layer = self._placeholder_layer(width, height)
            else:
                image = await asyncio.to_thread(self._canvas.create_image, cell.record.data)
                layer = self._image_layer(image.hash, width, height)

            component = self._canvas.create_component()
            component.name = variant_name(cell.theme, cell.state)
            component.resize(width, height)
            component.append_child(layer)

        except Exception as e:
            descriptor = describe_error(e)
            self._ui_log.error(f"Error creating variant {cell.theme}/{cell.state}: {descriptor}")
            report.record(
                GenerationFailure(
                    kind=FailureKind.MATERIALIZATION_FAILED,
                    message=error_message(e),
                    theme=cell.theme,
                    state=cell.state,
                    error_type=type(e).__name__,
                )
            )
            return None

        return CreatedNode(
            node=component,
            theme=cell.theme,
            state=cell.state,
            theme_index=cell.theme_index,
            state_index=cell.state_index,
        )

    async def materialize_grid(
        self,
        grid: VariantGrid,
        request: IconRequest,
        report: GenerationReport,
    ) -> list[CreatedNode]:
        """Materialize every resolvable cell in traversal order."""
        created: list[CreatedNode] = []
        for cell in grid:
            node = await self.materialize(cell, request, report)
            if node is not None:
                created.append(node)

        logger.debug("Materialized %d of %d cells", len(created), len(grid.cells))
        return created

    def _placeholder_layer(self, width: int, height: int) -> CanvasNode:
        rect = self._canvas.create_rectangle()
        rect.resize(width, height)
        rect.x = 0
        rect.y = 0
        rect.set_fills([SolidPaint(color=self._layout.placeholder_color)])
        rect.name = PLACEHOLDER_NAME
        return rect

    def _image_layer(self, image_hash: str, width: int, height: int) -> CanvasNode:
        rect = self._canvas.create_rectangle()
        rect.resize(width, height)
        rect.x = 0
        rect.y = 0
        rect.set_fills([ImagePaint(image_hash=image_hash, scale_mode=ScaleMode.FILL)])
        rect.name = ICON_LAYER_NAME
        return rect
