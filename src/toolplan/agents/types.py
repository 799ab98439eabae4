"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Sub-agent definition and dispatch contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, TypeAlias

from ..types import AgentRole

if TYPE_CHECKING:
    from ..core.cancellation import CancellationToken


ReportMessage: TypeAlias = Callable[[Any], "Awaitable[None] | None"]


@dataclass(frozen=True, slots=True)
class AgentDefinition:
    """
    Declared shape of a sub-agent.

    Attributes:
        agent_id: Identifier the model uses in `agentId`.
        role: Explicit role; `None` means infer from `tools`.
        tools: Names of the tools the agent itself holds.
        description: Human-readable purpose.
    """

    agent_id: str
    role: AgentRole | None = None
    tools: list[str] = field(default_factory=list)
    description: str = ""


@dataclass(frozen=True, slots=True)
class AgentDispatchRequest:
    """
    Everything a sub-agent runner receives for one dispatch.

    Attributes:
        definition: Resolved agent definition.
        task: Task text for the sub-agent.
        context: Optional extra context from the caller.
        targets: Declared target paths.
        invocation_id: Correlation id of the dispatching invocation.
        cancellation: Shared cancellation token, when the caller supplied one.
        report_message: Channel for nested progress messages.
    """

    definition: AgentDefinition
    task: str
    context: str | None = None
    targets: list[str] = field(default_factory=list)
    invocation_id: str | None = None
    cancellation: "CancellationToken | None" = None
    report_message: ReportMessage | None = None


class AgentRegistry(Protocol):
    """Resolves agent ids to definitions."""

    async def resolve(self, agent_id: str) -> AgentDefinition | None:
        """
        Return the definition for `agent_id`.

        Args:
            agent_id: Identifier from the invocation input.

        Returns:
            Definition, or `None` when the agent is unknown.
        """
        ...


class SubAgentRunner(Protocol):
    """Hook protocol that actually runs a sub-agent."""

    def __call__(self, request: AgentDispatchRequest) -> Awaitable[Any]:
        """
        Run the sub-agent described by `request`.

        Args:
            request: Dispatch payload with resolved definition.

        Returns:
            Sub-agent final output.
        """
        ...
