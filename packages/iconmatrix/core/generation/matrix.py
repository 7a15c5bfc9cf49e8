"""Variant grid construction.

Resolves every (theme, state) pair of the sorted axes against the request's
variant records. Construction is best-effort: a pair without a record is
logged, recorded as a failure and left unresolved, and the grid keeps its
full shape.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
import logging

from iconmatrix.core.generation.models import (
    CellResolution,
    FailureKind,
    GenerationFailure,
    GenerationReport,
    MatrixCell,
    VariantRecord,
)
from iconmatrix.core.transport.channel import ChannelLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantGrid:
    """Resolved grid; ``cells`` is in traversal order (themes outer, states inner)."""

    themes: tuple[str, ...]
    states: tuple[str, ...]
    cells: tuple[MatrixCell, ...]

    def __iter__(self) -> Iterator[MatrixCell]:
        return iter(self.cells)

    @property
    def rows(self) -> int:
        return len(self.states)

    @property
    def columns(self) -> int:
        return len(self.themes)

    @property
    def unresolved_count(self) -> int:
        return sum(1 for cell in self.cells if cell.resolution is CellResolution.UNRESOLVED)


def _lookup(variants: Sequence[VariantRecord], theme: str, state: str) -> VariantRecord | None:
    # First match wins when a pair is posted twice
    for variant in variants:
        if variant.theme == theme and variant.state == state:
            return variant
    return None


def build_grid(
    sorted_themes: Sequence[str],
    sorted_states: Sequence[str],
    variants: Sequence[VariantRecord],
    report: GenerationReport,
    ui_log: ChannelLogger | None = None,
) -> VariantGrid:
    """Resolve the full theme × state grid.

    Args:
        sorted_themes: Theme axis in priority order
        sorted_states: State axis in priority order
        variants: Variant records from the request
        report: Accumulator receiving CELL_UNRESOLVED failures
        ui_log: Optional UI log stream

    Returns:
        VariantGrid with |themes| × |states| cells
    """
    cells: list[MatrixCell] = []

    for theme_index, theme in enumerate(sorted_themes):
        for state_index, state in enumerate(sorted_states):
            record = _lookup(variants, theme, state)

            if record is None:
                message = f"Variant not found: {theme}/{state}"
                if ui_log is not None:
                    ui_log.error(message)
                else:
                    logger.error(message)
                report.record(
                    GenerationFailure(
                        kind=FailureKind.CELL_UNRESOLVED,
                        message=message,
                        theme=theme,
                        state=state,
                    )
                )
                resolution = CellResolution.UNRESOLVED
            elif record.is_missing:
                resolution = CellResolution.MISSING
            else:
                resolution = CellResolution.FOUND

            cells.append(
                MatrixCell(
                    theme_index=theme_index,
                    state_index=state_index,
                    theme=theme,
                    state=state,
                    resolution=resolution,
                    record=record,
                )
            )

    return VariantGrid(themes=tuple(sorted_themes), states=tuple(sorted_states), cells=tuple(cells))
