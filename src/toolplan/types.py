"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Value types shared by the analyzers and the executor.

Plans are pure values: fully computed before any invocation runs and never
mutated by the executor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


class InvocationCategory(str, Enum):
    """Side-effect class of a tool invocation."""

    READ = "read"
    WRITE = "write"
    EDIT = "edit"
    OTHER = "other"


class AgentRole(str, Enum):
    """Whether a sub-agent gathers information or modifies content."""

    READ = "read"
    WRITE = "write"


READ_STAGE = "read-stage"
WRITE_EDIT_STAGE = "write-edit-stage"
OTHER_STAGE = "other-stage"


@dataclass(frozen=True, slots=True)
class Invocation:
    """
    A single requested call to a tool or sub-agent.

    Attributes:
        id: Caller-assigned identifier, unique within a batch.
        name: Tool name as proposed by the model (may need normalization).
        input: Raw arguments as proposed by the model.
    """

    id: str
    name: str
    input: Any = None


@dataclass(frozen=True, slots=True)
class ExecutionGroup:
    """
    Unit of scheduling inside a stage.

    Members of a concurrent group run together, bounded by `max_concurrency`.
    Members of a sequential group run one at a time in list order.
    """

    id: str
    concurrent: bool
    max_concurrency: int
    members: list[Invocation]
    reason: str
    target_paths: list[str] | None = None
    role: AgentRole | None = None


@dataclass(frozen=True, slots=True)
class ExecutionStage:
    """Ordered phase of a plan. Groups inside a stage run in sequence."""

    phase: str
    description: str
    groups: list[ExecutionGroup]

    @property
    def name(self) -> str:
        return self.phase

    def invocations(self) -> list[Invocation]:
        """Return every invocation of this stage in group order."""
        return [inv for group in self.groups for inv in group.members]


@dataclass(frozen=True, slots=True)
class PlanSummary:
    total_invocations: int = 0
    total_stages: int = 0
    total_groups: int = 0
    concurrent_groups: int = 0
    by_category: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AgentPlanSummary:
    total_agents: int = 0
    total_stages: int = 0
    total_groups: int = 0
    concurrent_groups: int = 0
    information_gathering_agents: int = 0
    content_modification_agents: int = 0


@dataclass(frozen=True, slots=True)
class ExecutionPlan:
    """Staged plan for a batch of ordinary tool invocations."""

    stages: list[ExecutionStage]
    summary: PlanSummary

    def groups(self) -> list[ExecutionGroup]:
        return [group for stage in self.stages for group in stage.groups]

    def invocations(self) -> list[Invocation]:
        return [inv for stage in self.stages for inv in stage.invocations()]


@dataclass(frozen=True, slots=True)
class AgentExecutionPlan:
    """Staged plan for a batch made only of sub-agent dispatches."""

    stages: list[ExecutionStage]
    summary: AgentPlanSummary

    def groups(self) -> list[ExecutionGroup]:
        return [group for stage in self.stages for group in stage.groups]

    def invocations(self) -> list[Invocation]:
        return [inv for stage in self.stages for inv in stage.invocations()]


AnyExecutionPlan: TypeAlias = ExecutionPlan | AgentExecutionPlan


def count_groups(stages: list[ExecutionStage]) -> tuple[int, int]:
    """Return `(total_groups, concurrent_groups)` across stages."""
    total = sum(len(stage.groups) for stage in stages)
    concurrent = sum(1 for stage in stages for group in stage.groups if group.concurrent)
    return total, concurrent
