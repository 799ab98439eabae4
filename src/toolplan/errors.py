"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Scheduler-layer error taxonomy.
"""

from __future__ import annotations


class ToolplanError(Exception):
    """Base exception for all scheduler failures."""
    pass


class InvalidBatchError(ToolplanError):
    """
    Raised when an analyzer receives a batch it structurally cannot plan.

    This is a caller-contract violation (integration bug), never a runtime
    condition, so it is the only scheduler error that crosses the executor
    boundary.
    """
    pass


class PlanExecutionCancelled(ToolplanError):
    """Raised by `CancellationToken.raise_if_cancelled` once a run is cancelled."""
    pass


class AgentAlreadyRegisteredError(ToolplanError):
    """Raised when an agent id is registered twice without `overwrite=True`."""
    pass
