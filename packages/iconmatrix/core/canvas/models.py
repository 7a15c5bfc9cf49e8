"""Value types exchanged with the canvas collaborator.

Colors, paints, stroke styles and grid layout settings. All models are
frozen so the same instance can be applied to many nodes.
"""

from __future__ import annotations

from enum import Enum
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


class NodeKind(str, Enum):
    """Kinds of scene-graph nodes the engine creates or scans for."""

    PAGE = "PAGE"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    RECTANGLE = "RECTANGLE"


class ScaleMode(str, Enum):
    """How an image paint is scaled into its node."""

    FILL = "FILL"
    FIT = "FIT"
    CROP = "CROP"
    TILE = "TILE"


class StrokeAlign(str, Enum):
    """Stroke placement relative to the node outline."""

    INSIDE = "INSIDE"
    OUTSIDE = "OUTSIDE"
    CENTER = "CENTER"


class LayoutSizing(str, Enum):
    """Auto-layout sizing behaviour along one axis."""

    FIXED = "FIXED"
    HUG = "HUG"


class RGB(BaseModel):
    """8-bit RGB color.

    Accepts either explicit channels or a ``#RRGGBB`` string when validated
    from config files.

    Example:
        >>> RGB.model_validate("#F700FF")
        RGB(r=247, g=0, b=255)
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)

    @model_validator(mode="before")
    @classmethod
    def _parse_hex(cls, value: Any) -> Any:
        if isinstance(value, str):
            match = _HEX_COLOR.match(value.strip())
            if not match:
                raise ValueError(f"Invalid hex color: {value!r}")
            digits = match.group(1)
            return {
                "r": int(digits[0:2], 16),
                "g": int(digits[2:4], 16),
                "b": int(digits[4:6], 16),
            }
        return value

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


class SolidPaint(BaseModel):
    """Uniform color fill or stroke paint."""

    model_config = ConfigDict(frozen=True)

    type: Literal["SOLID"] = "SOLID"
    color: RGB


class ImagePaint(BaseModel):
    """Image fill referencing a previously decoded image by hash."""

    model_config = ConfigDict(frozen=True)

    type: Literal["IMAGE"] = "IMAGE"
    image_hash: str
    scale_mode: ScaleMode = ScaleMode.FILL


Paint = SolidPaint | ImagePaint


class CanvasImage(BaseModel):
    """Handle for image bytes registered with the canvas."""

    model_config = ConfigDict(frozen=True)

    hash: str
    width: int
    height: int


class StrokeStyle(BaseModel):
    """Border applied to a node."""

    model_config = ConfigDict(frozen=True)

    paint: SolidPaint
    weight: float = Field(default=1, gt=0)
    align: StrokeAlign = StrokeAlign.INSIDE
    dash_pattern: tuple[float, ...] = ()


class GridLayout(BaseModel):
    """Fixed grid auto-layout for a container node."""

    model_config = ConfigDict(frozen=True)

    rows: int = Field(ge=1)
    columns: int = Field(ge=1)
    row_gap: float = 0
    column_gap: float = 0
    padding_left: float = 0
    padding_right: float = 0
    padding_top: float = 0
    padding_bottom: float = 0
    sizing_horizontal: LayoutSizing = LayoutSizing.HUG
    sizing_vertical: LayoutSizing = LayoutSizing.HUG

    @classmethod
    def uniform(cls, rows: int, columns: int, spacing: float) -> GridLayout:
        """Grid with the same gap between cells and padding on all four sides."""
        return cls(
            rows=rows,
            columns=columns,
            row_gap=spacing,
            column_gap=spacing,
            padding_left=spacing,
            padding_right=spacing,
            padding_top=spacing,
            padding_bottom=spacing,
        )
