"""Icon generation engine.

Entry point for ``create-icon`` requests. One request runs to completion
before the next starts; every request ends with exactly one
``component-created`` message on the channel.

Example:
    >>> canvas = MemoryCanvas()
    >>> channel = QueueChannel()
    >>> engine = IconEngine(canvas, channel)
    >>> engine.start()
    0
    >>> result = await engine.create_icon(request)
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from iconmatrix.core.canvas.protocols import Canvas
from iconmatrix.core.config.models import AppConfig
from iconmatrix.core.generation.assembler import NodeAssembler
from iconmatrix.core.generation.controller import MatrixAssemblyController
from iconmatrix.core.generation.matrix import build_grid
from iconmatrix.core.generation.models import (
    AssemblyMode,
    FailureKind,
    GenerationFailure,
    GenerationReport,
    GenerationResult,
    IconRequest,
)
from iconmatrix.core.generation.name_index import ExistingNameIndex
from iconmatrix.core.generation.priority import sort_by_priority
from iconmatrix.core.transport.channel import ChannelLogger, MessageChannel
from iconmatrix.core.transport.messages import (
    ComponentCreatedMessage,
    CreateIconMessage,
    UnknownMessageTypeError,
    parse_inbound,
)
from iconmatrix.core.utils.logging import get_logger

logger = get_logger(__name__)


class IconEngine:
    """Generates icon components on a canvas from UI requests.

    Args:
        canvas: Canvas collaborator the document lives in
        channel: Outbound channel for logs and results
        config: App config (defaults if None)
        name_index: Existing-name index (a fresh one if None)
    """

    def __init__(
        self,
        canvas: Canvas,
        channel: MessageChannel,
        config: AppConfig | None = None,
        name_index: ExistingNameIndex | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.canvas = canvas
        self.channel = channel
        self.name_index = name_index if name_index is not None else ExistingNameIndex()
        self.ui_log = ChannelLogger(channel)
        self._lock = asyncio.Lock()

        layout = self.config.layout
        self._theme_table = self.config.priorities.theme_table
        self._state_table = self.config.priorities.state_table
        self._assembler = NodeAssembler(canvas, layout, self.ui_log)
        self._controller = MatrixAssemblyController(canvas, self.name_index, layout, self.ui_log)

    def start(self) -> int:
        """Index the names already on the page and announce the count."""
        count = self.name_index.rebuild(self.canvas)
        self.ui_log.info(f"Found {count} existing components on page")
        return count

    async def handle_message(self, data: Mapping[str, Any]) -> GenerationResult | None:
        """Route one raw inbound message.

        Unknown message types are ignored. A malformed ``create-icon`` is
        reported on the log stream and still answered with an empty
        ``component-created``. Neither raises.

        Returns:
            GenerationResult for valid ``create-icon`` requests, else None
        """
        try:
            message = parse_inbound(data)
            request = message.to_request() if isinstance(message, CreateIconMessage) else None
        except UnknownMessageTypeError:
            logger.warning("Ignoring message of unknown type %r", data.get("type"))
            return None
        except ValidationError as e:
            logger.debug("Validation errors: %s", e.errors(include_input=False))
            async with self._lock:
                self.ui_log.error(
                    f"Invalid {data.get('type')} message: {e.error_count()} error(s)"
                )
                self.channel.post_message(ComponentCreatedMessage(width=0, height=0))
            return None

        if request is None:
            return None
        return await self.create_icon(request)

    async def create_icon(self, request: IconRequest) -> GenerationResult:
        """Generate one icon and post its ``component-created`` result.

        Requests are serialized: a second call waits until the first has
        posted its result.
        """
        async with self._lock:
            result = await self._generate(request)
        self.channel.post_message(ComponentCreatedMessage.from_result(result))
        return result

    async def _generate(self, request: IconRequest) -> GenerationResult:
        name = request.component_name

        if self.name_index.exists(name):
            self.ui_log.warn(f"Skipped (already exists): {name}")
            return GenerationResult(component_name=name, mode=AssemblyMode.SKIPPED)

        self.ui_log.info(f"Creating: {name}")

        sorted_themes = sort_by_priority(request.themes, self._theme_table)
        sorted_states = sort_by_priority(request.states, self._state_table)

        self.ui_log.info(f"  Themes (sorted): {', '.join(sorted_themes)}")
        self.ui_log.info(f"  States (sorted): {', '.join(sorted_states)}")

        report = GenerationReport(upstream_problems=request.has_problems)
        grid = build_grid(sorted_themes, sorted_states, request.variants, report, self.ui_log)
        if grid.unresolved_count:
            logger.debug(
                "%d cells of the %dx%d grid unresolved for %s",
                grid.unresolved_count,
                grid.columns,
                grid.rows,
                name,
            )
        created = await self._assembler.materialize_grid(grid, request, report)

        if not created:
            message = f"No variants for {name}"
            self.ui_log.error(message)
            report.record(GenerationFailure(kind=FailureKind.ZERO_YIELD, message=message))
            return GenerationResult(
                component_name=name,
                mode=AssemblyMode.ZERO_YIELD,
                has_problems=True,
                failures=tuple(report.failures),
            )

        result = self._controller.assemble(created, request, sorted_themes, sorted_states, report)
        get_logger(__name__, component=name).debug(
            "Generated: mode=%s size=%sx%s problems=%s",
            result.mode.value,
            result.width,
            result.height,
            result.has_problems,
        )
        return result
