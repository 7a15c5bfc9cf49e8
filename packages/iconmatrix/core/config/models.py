"""Configuration models for iconmatrix."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from iconmatrix.core.canvas.models import RGB, StrokeAlign
from iconmatrix.core.generation.priority import STATE_PRIORITY, THEME_PRIORITY, PriorityTable


class LoggingConfig(BaseModel):
    """Python logging configuration."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Format string for text logs (ignored when structured=True)",
    )

    structured: bool = Field(default=False, description="Emit JSON lines instead of text")

    filename: str | None = Field(default=None, description="Log file path (stdout if None)")


class LayoutConfig(BaseModel):
    """Geometry and decoration of produced assets.

    Example:
        >>> layout = LayoutConfig()
        >>> layout.gap
        20
        >>> layout.warning_color.hex
        '#FFFF00'
    """

    model_config = ConfigDict(frozen=True)

    gap: int = Field(default=20, ge=0, description="Grid gap and padding, also fallback spacing")

    stroke_weight: float = Field(default=1, gt=0)

    stroke_align: StrokeAlign = StrokeAlign.INSIDE

    dash_pattern: tuple[float, ...] = (10, 5)

    accent_color: RGB = Field(
        default_factory=lambda: RGB(r=0x8A, g=0x38, b=0xF5),
        description="Border color for assets generated without problems",
    )

    warning_color: RGB = Field(
        default_factory=lambda: RGB(r=0xFF, g=0xFF, b=0x00),
        description="Border color for assets with any problem",
    )

    placeholder_color: RGB = Field(
        default_factory=lambda: RGB(r=0xF7, g=0x00, b=0xFF),
        description="Fill for variants flagged as missing",
    )


class PriorityConfig(BaseModel):
    """Canonical axis orderings."""

    themes: list[str] = Field(default_factory=lambda: list(THEME_PRIORITY))
    states: list[str] = Field(default_factory=lambda: list(STATE_PRIORITY))

    @property
    def theme_table(self) -> PriorityTable:
        return PriorityTable(tuple(self.themes))

    @property
    def state_table(self) -> PriorityTable:
        return PriorityTable(tuple(self.states))


class AppConfig(BaseModel):
    """Application configuration.

    Every section has defaults, so an empty file (or no file) is valid.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    priorities: PriorityConfig = Field(default_factory=PriorityConfig)
