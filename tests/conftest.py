"""Shared pytest fixtures for iconmatrix tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from io import BytesIO
import logging

from PIL import Image
import pytest

from iconmatrix.core.canvas import MemoryCanvas
from iconmatrix.core.config.models import LayoutConfig
from iconmatrix.core.generation.engine import IconEngine
from iconmatrix.core.generation.models import IconRequest, Position, VariantRecord
from iconmatrix.core.transport import ChannelLogger, QueueChannel

# ============================================================================
# Payload Helpers
# ============================================================================


def make_png(
    width: int = 24, height: int = 24, color: tuple[int, ...] = (255, 0, 0, 255)
) -> bytes:
    """Encode a solid RGBA PNG."""
    img = Image.new("RGBA", (width, height), color)
    buf = BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """A valid 24x24 PNG payload."""
    return make_png()


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    """Factory for PNG payloads of a given size and color."""
    return make_png


# ============================================================================
# Canvas / Transport Fixtures
# ============================================================================


@pytest.fixture
def memory_canvas() -> MemoryCanvas:
    """Fresh empty in-memory document."""
    return MemoryCanvas()


@pytest.fixture
def channel() -> QueueChannel:
    """Outbound channel recording every posted message."""
    return QueueChannel(record=True)


@pytest.fixture
def ui_log(channel: QueueChannel) -> ChannelLogger:
    return ChannelLogger(channel)


@pytest.fixture
def layout() -> LayoutConfig:
    return LayoutConfig()


@pytest.fixture
def engine(memory_canvas: MemoryCanvas, channel: QueueChannel) -> IconEngine:
    """Started engine over an empty document."""
    eng = IconEngine(memory_canvas, channel)
    eng.start()
    return eng


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() side effects on the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


# ============================================================================
# Request Fixtures
# ============================================================================

RequestFactory = Callable[..., IconRequest]


@pytest.fixture
def make_request(png_bytes: bytes) -> RequestFactory:
    """Build an IconRequest with a complete variant grid.

    ``missing`` pairs get ``is_missing`` records, ``omit`` pairs get no record
    at all, and ``bad`` pairs get undecodable bytes.
    """

    def _make(
        themes: Iterable[str] = ("light", "dark"),
        states: Iterable[str] = ("default", "red"),
        *,
        category: str = "arrows",
        name: str = "chevron",
        width: int = 24,
        height: int = 24,
        missing: Iterable[tuple[str, str]] = (),
        omit: Iterable[tuple[str, str]] = (),
        bad: Iterable[tuple[str, str]] = (),
        position: tuple[float, float] = (100, 200),
        has_problems: bool = False,
    ) -> IconRequest:
        themes = tuple(themes)
        states = tuple(states)
        missing_set, omit_set, bad_set = set(missing), set(omit), set(bad)

        variants: list[VariantRecord] = []
        for theme in themes:
            for state in states:
                pair = (theme, state)
                if pair in omit_set:
                    continue
                if pair in missing_set:
                    variants.append(VariantRecord(theme=theme, state=state, is_missing=True))
                elif pair in bad_set:
                    variants.append(VariantRecord(theme=theme, state=state, data=b"not an image"))
                else:
                    variants.append(VariantRecord(theme=theme, state=state, data=png_bytes))

        return IconRequest(
            category=category,
            name=name,
            icon_width=width,
            icon_height=height,
            themes=themes,
            states=states,
            variants=tuple(variants),
            position=Position(x=position[0], y=position[1]),
            has_problems=has_problems,
        )

    return _make
