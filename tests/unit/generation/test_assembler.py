"""Tests for NodeAssembler materialization."""

from __future__ import annotations

import pytest

from iconmatrix.core.canvas import ImagePaint, MemoryCanvas, NodeKind, SolidPaint
from iconmatrix.core.generation.assembler import ICON_LAYER_NAME, PLACEHOLDER_NAME, NodeAssembler
from iconmatrix.core.generation.matrix import build_grid
from iconmatrix.core.generation.models import FailureKind, GenerationReport
from iconmatrix.core.transport import LogLevel


@pytest.fixture
def assembler(memory_canvas, layout, ui_log):
    return NodeAssembler(memory_canvas, layout, ui_log)


def _grid(request, report):
    return build_grid(request.themes, request.states, request.variants, report)


class TestMaterialize:
    """Test single-cell materialization."""

    @pytest.mark.asyncio
    async def test_found_cell_gets_image_layer(self, assembler, memory_canvas, make_request):
        request = make_request(["light"], ["default"])
        report = GenerationReport()
        cell = _grid(request, report).cells[0]

        created = await assembler.materialize(cell, request, report)

        assert created is not None
        component = created.node
        assert component.kind is NodeKind.COMPONENT
        assert component.name == "theme=light, state=default"
        assert (component.width, component.height) == (24, 24)

        (layer,) = component.children
        assert layer.kind is NodeKind.RECTANGLE
        assert layer.name == ICON_LAYER_NAME
        assert (layer.x, layer.y) == (0, 0)
        (fill,) = layer.fills
        assert isinstance(fill, ImagePaint)
        assert fill.image_hash in memory_canvas.images
        assert not report.has_problems

    @pytest.mark.asyncio
    async def test_missing_cell_gets_placeholder_without_decoding(
        self, assembler, memory_canvas, layout, make_request
    ):
        request = make_request(["light"], ["default"], missing=[("light", "default")])
        report = GenerationReport()
        cell = _grid(request, report).cells[0]

        created = await assembler.materialize(cell, request, report)

        assert "create_image" not in memory_canvas.calls
        (layer,) = created.node.children
        assert layer.name == PLACEHOLDER_NAME
        assert layer.fills == (SolidPaint(color=layout.placeholder_color),)
        assert report.missing_count == 1
        assert report.failures == []
        assert report.has_problems

    @pytest.mark.asyncio
    async def test_unresolved_cell_creates_nothing(self, assembler, memory_canvas, make_request):
        request = make_request(["light"], ["default"], omit=[("light", "default")])
        report = GenerationReport()
        cell = _grid(request, report).cells[0]

        assert await assembler.materialize(cell, request, report) is None
        assert memory_canvas.calls == []

    @pytest.mark.asyncio
    async def test_decode_failure_recorded(self, assembler, channel, make_request):
        request = make_request(["dark"], ["red"], bad=[("dark", "red")])
        report = GenerationReport()
        cell = _grid(request, report).cells[0]

        assert await assembler.materialize(cell, request, report) is None

        (failure,) = report.failures_of(FailureKind.MATERIALIZATION_FAILED)
        assert (failure.theme, failure.state) == ("dark", "red")
        assert failure.error_type == "ImageDecodeError"

        (log,) = channel.logs(LogLevel.ERROR)
        assert log.message == (
            "Error creating variant dark/red: Image is not a valid format (ImageDecodeError)"
        )

    @pytest.mark.asyncio
    async def test_decode_failure_leaves_no_component(self, assembler, memory_canvas, make_request):
        request = make_request(["light"], ["default"], bad=[("light", "default")])
        report = GenerationReport()
        await assembler.materialize(_grid(request, report).cells[0], request, report)
        assert memory_canvas.find_all([NodeKind.COMPONENT]) == []

    @pytest.mark.asyncio
    async def test_oversized_image_rejected(self, layout, ui_log, png_factory, make_request):
        canvas = MemoryCanvas(max_image_size=16)
        assembler = NodeAssembler(canvas, layout, ui_log)
        request = make_request(["light"], ["default"])
        request = request.model_copy(
            update={
                "variants": (
                    request.variants[0].model_copy(update={"data": png_factory(32, 32)}),
                )
            }
        )
        report = GenerationReport()

        cell = _grid(request, report).cells[0]
        assert await assembler.materialize(cell, request, report) is None
        (failure,) = report.failures
        assert "too large" in failure.message


class TestMaterializeGrid:
    """Test whole-grid materialization."""

    @pytest.mark.asyncio
    async def test_all_cells_in_traversal_order(self, assembler, make_request):
        request = make_request(["light", "dark"], ["default", "red"])
        report = GenerationReport()

        created = await assembler.materialize_grid(_grid(request, report), request, report)

        assert [(c.theme, c.state) for c in created] == [
            ("light", "default"),
            ("light", "red"),
            ("dark", "default"),
            ("dark", "red"),
        ]
        assert [(c.theme_index, c.state_index) for c in created] == [(0, 0), (0, 1), (1, 0), (1, 1)]

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_others(self, assembler, make_request):
        request = make_request(
            ["light", "dark"],
            ["default", "red"],
            bad=[("light", "red")],
            omit=[("dark", "default")],
        )
        report = GenerationReport()

        created = await assembler.materialize_grid(_grid(request, report), request, report)

        assert len(created) == 2
        assert len(report.failures_of(FailureKind.CELL_UNRESOLVED)) == 1
        assert len(report.failures_of(FailureKind.MATERIALIZATION_FAILED)) == 1

    @pytest.mark.asyncio
    async def test_canvas_failure_recorded_per_cell(self, layout, ui_log, make_request):
        canvas = MemoryCanvas(fail_operations={"create_component"})
        assembler = NodeAssembler(canvas, layout, ui_log)
        request = make_request(["light", "dark"], ["default"])
        report = GenerationReport()

        created = await assembler.materialize_grid(_grid(request, report), request, report)

        assert created == []
        failures = report.failures_of(FailureKind.MATERIALIZATION_FAILED)
        assert [f.error_type for f in failures] == ["CanvasError", "CanvasError"]
