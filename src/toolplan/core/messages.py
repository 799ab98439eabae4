"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Progress / result messages emitted to the caller's message sink.
"""

from __future__ import annotations

import inspect
import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Literal, TypeAlias

from ..logging import get_logger

logger = get_logger(name=__name__)

MessageKind = Literal["doing", "result"]


@dataclass(frozen=True, slots=True)
class ExecutionMessage:
    """
    One notification for the UI layer.

    Attributes:
        kind: "doing" before an invocation starts, "result" after it ends.
        invocation_id: Id of the invocation the message describes.
        tool_name: Normalized tool name.
        input: Normalized input.
        output: Result payload for "result" messages.
        success: Outcome for "result" messages.
        parent_invocation_id: Dispatching invocation for nested sub-agent messages.
    """

    kind: MessageKind
    invocation_id: str
    tool_name: str
    input: Any = None
    output: Any = None
    success: bool | None = None
    parent_invocation_id: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    def with_parent(self, parent_invocation_id: str) -> "ExecutionMessage":
        return replace(self, parent_invocation_id=parent_invocation_id)


MessageSink: TypeAlias = Callable[[ExecutionMessage], "Awaitable[None] | None"]
StatusSink: TypeAlias = Callable[[str], "Awaitable[None] | None"]


async def _send(sink: Callable[[Any], Any], payload: Any) -> None:
    result = sink(payload)
    if inspect.isawaitable(result):
        await result


async def deliver(sink: MessageSink | None, message: ExecutionMessage) -> None:
    """
    Send `message` to a sync or async sink.

    A failing sink is logged and otherwise ignored; it must not fail the
    invocation the message describes.
    """
    if sink is None:
        return
    try:
        await _send(sink, message)
    except Exception:
        logger.exception(
            "message_sink_failed",
            kind=message.kind,
            invocation_id=message.invocation_id,
            tool=message.tool_name,
        )


async def notify_status(sink: StatusSink | None, status: str) -> None:
    """Send a human-readable progress line to a sync or async status sink."""
    if sink is None:
        return
    try:
        await _send(sink, status)
    except Exception:
        logger.exception("status_sink_failed", status=status)
