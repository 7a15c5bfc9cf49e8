"""Assembly of materialized nodes into the final asset.

Three paths:

- single node: the lone component is renamed and positioned, no grouping
- grouped: nodes are combined into a variant set laid out as a grid,
  states down the rows and themes across the columns, with a dashed border
  whose color reflects the problem flag
- fallback: grouping failed, so the nodes stay separate, renamed under the
  canonical name and laid out in one row
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

from iconmatrix.core.canvas.errors import describe_error, error_message
from iconmatrix.core.canvas.models import GridLayout, SolidPaint, StrokeStyle
from iconmatrix.core.canvas.protocols import Canvas, CanvasNode
from iconmatrix.core.config.models import LayoutConfig
from iconmatrix.core.generation.models import (
    AssemblyMode,
    CreatedNode,
    FailureKind,
    GenerationFailure,
    GenerationReport,
    GenerationResult,
    IconRequest,
)
from iconmatrix.core.generation.name_index import ExistingNameIndex
from iconmatrix.core.generation.naming import fallback_name
from iconmatrix.core.transport.channel import ChannelLogger

logger = logging.getLogger(__name__)


class MatrixAssemblyController:
    """Groups and positions the nodes produced for one request.

    Args:
        canvas: Canvas hosting the nodes
        name_index: Index receiving the canonical name on success
        layout: Gap, stroke and color settings
        ui_log: UI log stream
    """

    def __init__(
        self,
        canvas: Canvas,
        name_index: ExistingNameIndex,
        layout: LayoutConfig,
        ui_log: ChannelLogger,
    ) -> None:
        self._canvas = canvas
        self._name_index = name_index
        self._layout = layout
        self._ui_log = ui_log

    def assemble(
        self,
        created: Sequence[CreatedNode],
        request: IconRequest,
        sorted_themes: Sequence[str],
        sorted_states: Sequence[str],
        report: GenerationReport,
    ) -> GenerationResult:
        """Assemble at least one created node into the final asset.

        Args:
            created: Materialized nodes in creation order (non-empty)
            request: Originating request
            sorted_themes: Theme axis (grid columns)
            sorted_states: State axis (grid rows)
            report: Problem accumulator; receives ASSEMBLY_FAILED on fallback

        Returns:
            GenerationResult for the single, grouped or fallback path
        """
        if not created:
            raise ValueError("assemble() requires at least one created node")

        if len(created) == 1:
            return self._assemble_single(created[0], request, report)

        try:
            return self._assemble_group(created, request, sorted_themes, sorted_states, report)
        except Exception as e:
            self._ui_log.error(f"Error creating component set: {describe_error(e)}")
            report.record(
                GenerationFailure(
                    kind=FailureKind.ASSEMBLY_FAILED,
                    message=error_message(e),
                    error_type=type(e).__name__,
                )
            )
            return self._assemble_fallback(created, request, report)

    def _assemble_single(
        self, created: CreatedNode, request: IconRequest, report: GenerationReport
    ) -> GenerationResult:
        name = request.component_name
        node = created.node
        node.name = name
        node.x = request.position.x
        node.y = request.position.y

        self._name_index.insert(name)
        self._ui_log.success(f"Created component (1 variant): {name}")

        return GenerationResult(
            component_name=name,
            width=request.icon_width,
            height=request.icon_height,
            mode=AssemblyMode.SINGLE,
            has_problems=report.has_problems,
            indexed=True,
            node_count=1,
            failures=tuple(report.failures),
        )

    def _assemble_group(
        self,
        created: Sequence[CreatedNode],
        request: IconRequest,
        sorted_themes: Sequence[str],
        sorted_states: Sequence[str],
        report: GenerationReport,
    ) -> GenerationResult:
        name = request.component_name
        layout = self._layout

        group = self._canvas.combine_as_variants(
            [item.node for item in created], self._canvas.current_page
        )
        group.name = name
        grid = GridLayout.uniform(
            rows=len(sorted_states), columns=len(sorted_themes), spacing=layout.gap
        )
        group.set_grid_layout(grid)

        self._place_children(group, created)

        color = layout.warning_color if report.has_problems else layout.accent_color
        group.set_stroke(
            StrokeStyle(
                paint=SolidPaint(color=color),
                weight=layout.stroke_weight,
                align=layout.stroke_align,
                dash_pattern=layout.dash_pattern,
            )
        )

        group.x = request.position.x
        group.y = request.position.y

        self._name_index.insert(name)
        self._ui_log.success(
            f"Created component set: {name} ({len(created)} variants, "
            f"{len(sorted_themes)} themes × {len(sorted_states)} states)"
        )

        return GenerationResult(
            component_name=name,
            width=group.width,
            height=group.height,
            mode=AssemblyMode.GROUPED,
            has_problems=report.has_problems,
            indexed=True,
            node_count=len(created),
            failures=tuple(report.failures),
        )

    def _place_children(self, group: CanvasNode, created: Sequence[CreatedNode]) -> None:
        """Put each child in the (state row, theme column) cell it came from.

        Children that cannot be traced back to a created node keep the
        position grouping gave them.
        """
        by_id = {item.node.id: item for item in created}

        for child in group.children:
            item = by_id.get(child.id)
            if item is None:
                logger.debug("Child %r is not a generated variant, leaving in place", child.name)
                continue
            child.set_grid_child_position(item.state_index, item.theme_index)

    def _assemble_fallback(
        self,
        created: Sequence[CreatedNode],
        request: IconRequest,
        report: GenerationReport,
    ) -> GenerationResult:
        name = request.component_name
        step = request.icon_width + self._layout.gap

        for index, item in enumerate(created):
            node = item.node
            node.name = fallback_name(name, node.name)
            node.x = request.position.x + index * step
            node.y = request.position.y

        # The grouped asset never existed, so its name is not indexed
        logger.warning("Left %d variants of %s ungrouped", len(created), name)

        return GenerationResult(
            component_name=name,
            width=len(created) * step,
            height=request.icon_height,
            mode=AssemblyMode.FALLBACK,
            has_problems=report.has_problems,
            indexed=False,
            node_count=len(created),
            failures=tuple(report.failures),
        )
