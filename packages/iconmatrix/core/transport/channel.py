"""Outbound message channel and the UI log stream built on it.

Posting never blocks: the engine drops messages into the channel and carries
on, whoever consumes them does so at their own pace.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from iconmatrix.core.transport.messages import LogLevel, LogMessage, OutboundMessage

logger = logging.getLogger(__name__)

_PY_LEVELS: dict[LogLevel, int] = {
    LogLevel.INFO: logging.INFO,
    LogLevel.SUCCESS: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class MessageChannel(Protocol):
    """Engine → UI transport."""

    def post_message(self, message: OutboundMessage) -> None:
        """Deliver a message without waiting for the receiver."""
        ...


class QueueChannel:
    """Unbounded asyncio queue channel.

    Args:
        record: Also keep every posted message in ``sent`` for inspection
    """

    def __init__(self, record: bool = False) -> None:
        self._queue: asyncio.Queue[OutboundMessage | None] = asyncio.Queue()
        self._record = record
        self.sent: list[OutboundMessage] = []

    def post_message(self, message: OutboundMessage) -> None:
        if self._record:
            self.sent.append(message)
        self._queue.put_nowait(message)

    def close(self) -> None:
        """Signal consumers that no more messages will arrive."""
        self._queue.put_nowait(None)

    async def receive(self) -> OutboundMessage | None:
        """Next message, or None once the channel is closed."""
        return await self._queue.get()

    def logs(self, level: LogLevel | None = None) -> list[LogMessage]:
        return [
            message
            for message in self.sent
            if isinstance(message, LogMessage) and (level is None or message.level is level)
        ]


class ChannelLogger:
    """Posts log lines to the UI and mirrors them to Python logging.

    Args:
        channel: Channel receiving :class:`LogMessage` instances
        name: Python logger name for the mirrored records
    """

    def __init__(self, channel: MessageChannel, name: str = "iconmatrix.ui") -> None:
        self._channel = channel
        self._logger = logging.getLogger(name)

    def log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        self._logger.log(_PY_LEVELS[level], message)
        self._channel.post_message(LogMessage(message=message, level=level))

    def info(self, message: str) -> None:
        self.log(message, LogLevel.INFO)

    def warn(self, message: str) -> None:
        self.log(message, LogLevel.WARN)

    def error(self, message: str) -> None:
        self.log(message, LogLevel.ERROR)

    def success(self, message: str) -> None:
        self.log(message, LogLevel.SUCCESS)
