"""UI ↔ engine message transport."""

from iconmatrix.core.transport.channel import ChannelLogger, MessageChannel, QueueChannel
from iconmatrix.core.transport.messages import (
    INBOUND_MODELS,
    ComponentCreatedMessage,
    CreateIconMessage,
    InboundMessage,
    LogLevel,
    LogMessage,
    OutboundMessage,
    UnknownMessageTypeError,
    VariantPayload,
    parse_inbound,
)

__all__ = [
    # Channel
    "ChannelLogger",
    "MessageChannel",
    "QueueChannel",
    # Messages
    "ComponentCreatedMessage",
    "CreateIconMessage",
    "INBOUND_MODELS",
    "InboundMessage",
    "LogLevel",
    "LogMessage",
    "OutboundMessage",
    "UnknownMessageTypeError",
    "VariantPayload",
    "parse_inbound",
]
