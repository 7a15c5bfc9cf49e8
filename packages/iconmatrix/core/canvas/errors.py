from __future__ import annotations

from pydantic import BaseModel, Field


class CanvasErrorData(BaseModel):
    """Structured data for canvas backend errors.

    Args:
        message: Human-readable error description
        operation: Canvas operation that failed (e.g. ``combine_as_variants``)
        node_name: Name of the node involved, if any
        cause: Original exception that caused this error
    """

    model_config = {"arbitrary_types_allowed": True}

    message: str
    operation: str
    node_name: str | None = None
    cause: BaseException | None = Field(default=None, repr=False)


class CanvasError(Exception):
    """Base exception for canvas backend failures.

    Attributes:
        data: Structured error data (CanvasErrorData)
        message: Human-readable error description
        operation: Canvas operation that failed
        node_name: Name of the node involved, if any
        cause: Original exception that caused this error
    """

    def __init__(
        self,
        *,
        message: str,
        operation: str,
        node_name: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.data = CanvasErrorData(
            message=message,
            operation=operation,
            node_name=node_name,
            cause=cause,
        )
        self.message = self.data.message
        self.operation = self.data.operation
        self.node_name = self.data.node_name
        self.cause = self.data.cause

        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message, f"operation={self.operation}"]
        if self.node_name:
            parts.append(f"node={self.node_name}")
        return " | ".join(parts)


class ImageDecodeError(CanvasError):
    """Image bytes could not be decoded or exceed the host's limits."""


class GroupingError(CanvasError):
    """Nodes could not be combined into a variant set."""


def error_message(exc: BaseException) -> str:
    """Bare message of an exception, without CanvasError context suffixes."""
    return exc.message if isinstance(exc, CanvasError) else str(exc)


def describe_error(exc: BaseException) -> str:
    """Format an exception as ``message (ErrorType)`` for log output."""
    return f"{error_message(exc)} ({type(exc).__name__})"
