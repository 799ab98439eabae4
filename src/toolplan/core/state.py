"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Conversation / loop state shared across invocations of one plan.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class LoopMessage:
    role: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class LoopState:
    """
    Append-only message log.

    Appends go through `append`, which holds a lock, because concurrent
    invocations may report errors at the same time and log order is shown
    to the user.
    """

    messages: list[LoopMessage] = field(default_factory=list)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False, compare=False)

    async def append(self, message: LoopMessage) -> None:
        async with self._lock:
            self.messages.append(message)
