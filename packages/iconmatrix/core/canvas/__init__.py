"""Canvas collaborator interface and the in-memory scene graph."""

from .errors import (
    CanvasError,
    CanvasErrorData,
    GroupingError,
    ImageDecodeError,
    describe_error,
    error_message,
)
from .impl_memory import MemoryCanvas, SceneNode
from .models import (
    RGB,
    CanvasImage,
    GridLayout,
    ImagePaint,
    LayoutSizing,
    NodeKind,
    Paint,
    ScaleMode,
    SolidPaint,
    StrokeAlign,
    StrokeStyle,
)
from .protocols import Canvas, CanvasNode

__all__ = [
    # Protocols
    "Canvas",
    "CanvasNode",
    # Implementations
    "MemoryCanvas",
    "SceneNode",
    # Models
    "RGB",
    "CanvasImage",
    "GridLayout",
    "ImagePaint",
    "LayoutSizing",
    "NodeKind",
    "Paint",
    "ScaleMode",
    "SolidPaint",
    "StrokeAlign",
    "StrokeStyle",
    # Errors
    "CanvasError",
    "CanvasErrorData",
    "GroupingError",
    "ImageDecodeError",
    "describe_error",
    "error_message",
]
