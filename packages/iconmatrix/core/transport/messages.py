"""Wire messages exchanged between the UI and the engine.

Inbound messages use the UI's camelCase field names; :meth:`to_wire` on the
outbound models produces the same shape.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from iconmatrix.core.generation.models import (
    GenerationResult,
    IconRequest,
    Position,
    VariantRecord,
)


class LogLevel(str, Enum):
    """Levels understood by the UI log panel."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SUCCESS = "success"


class UnknownMessageTypeError(KeyError):
    """Raised when an inbound message has no registered model."""


class VariantPayload(BaseModel):
    """One variant as posted by the UI.

    ``bytes`` arrives either as a list of ints (a serialized ``Uint8Array``)
    or as a base64 string.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    theme: str
    state: str
    data: bytes | None = Field(default=None, alias="bytes", repr=False)
    is_missing: bool = Field(default=False, alias="isMissing")

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_bytes(cls, value: Any) -> Any:
        if value is None or isinstance(value, (bytes, bytearray)):
            return value
        if isinstance(value, str):
            return base64.b64decode(value, validate=True)
        if isinstance(value, (list, tuple)):
            return bytes(value)
        return value

    def to_record(self) -> VariantRecord:
        """Convert to a domain record.

        A variant posted with neither bytes nor the missing flag gets an empty
        payload, so it fails on its own cell when decoded.
        """
        if self.is_missing:
            return VariantRecord(theme=self.theme, state=self.state, is_missing=True)
        data = self.data if self.data is not None else b""
        return VariantRecord(theme=self.theme, state=self.state, data=data)


class CreateIconMessage(BaseModel):
    """``create-icon`` request from the UI."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["create-icon"] = "create-icon"
    category: str
    name: str
    themes: list[str] = Field(default_factory=list)
    states: list[str] = Field(default_factory=list)
    variants: list[VariantPayload] = Field(default_factory=list)
    position: Position = Field(default_factory=Position)
    has_problems: bool = Field(default=False, alias="hasProblems")
    icon_width: PositiveInt = Field(alias="iconWidth")
    icon_height: PositiveInt = Field(alias="iconHeight")

    def to_request(self) -> IconRequest:
        return IconRequest(
            category=self.category,
            name=self.name,
            icon_width=self.icon_width,
            icon_height=self.icon_height,
            themes=tuple(self.themes),
            states=tuple(self.states),
            variants=tuple(variant.to_record() for variant in self.variants),
            position=self.position,
            has_problems=self.has_problems,
        )


class LogMessage(BaseModel):
    """Progress / diagnostic line for the UI log panel."""

    model_config = ConfigDict(frozen=True)

    type: Literal["log"] = "log"
    message: str
    level: LogLevel = LogLevel.INFO

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ComponentCreatedMessage(BaseModel):
    """Terminal result of a ``create-icon`` request.

    ``skipped`` is only present on the wire when the request was a duplicate.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["component-created"] = "component-created"
    width: float
    height: float
    skipped: Literal[True] | None = None

    @classmethod
    def from_result(cls, result: GenerationResult) -> ComponentCreatedMessage:
        return cls(
            width=result.width,
            height=result.height,
            skipped=True if result.skipped else None,
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


InboundMessage = CreateIconMessage
OutboundMessage = LogMessage | ComponentCreatedMessage

INBOUND_MODELS: dict[str, type[BaseModel]] = {
    "create-icon": CreateIconMessage,
}


def parse_inbound(data: Mapping[str, Any]) -> InboundMessage:
    """Validate a raw inbound message.

    Raises:
        UnknownMessageTypeError: If ``type`` has no registered model
        ValidationError: If the payload does not match the model
    """
    msg_type = data.get("type")
    model = INBOUND_MODELS.get(str(msg_type))
    if model is None:
        raise UnknownMessageTypeError(msg_type)
    return model.model_validate(data)  # type: ignore[return-value]
