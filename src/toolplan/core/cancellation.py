"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Cooperative cancellation signal shared by one plan execution.
"""

from __future__ import annotations

import asyncio

from ..errors import PlanExecutionCancelled


class CancellationToken:
    """
    Cooperative cancellation flag.

    Nothing is interrupted forcibly; the executor and sub-agents poll the
    token at safe boundaries.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise PlanExecutionCancelled(self.reason or "Execution cancelled")
