"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Chooses the analyzer for a batch.
"""

from __future__ import annotations

from typing import Sequence, TypeGuard

from ..agents.types import AgentRegistry
from ..config import SchedulerConfig
from ..tools.normalizer import is_agent_dispatch_name
from ..tools.registry import MetadataProvider
from ..types import AgentExecutionPlan, AnyExecutionPlan, ExecutionPlan, Invocation
from .agent_analyzer import AgentDependencyAnalyzer
from .tool_analyzer import ToolDependencyAnalyzer


def is_agent_execution_plan(plan: AnyExecutionPlan) -> TypeGuard[AgentExecutionPlan]:
    """True when `plan` was produced by the agent analyzer."""
    return isinstance(plan, AgentExecutionPlan)


class DependencyAnalyzer:
    """
    Routes a batch to the agent analyzer when every invocation dispatches a
    sub-agent, otherwise to the tool analyzer. Mixed batches treat agent
    dispatches as ordinary "other" invocations.
    """

    def __init__(
        self,
        agents: AgentRegistry | None = None,
        config: SchedulerConfig | None = None,
    ) -> None:
        self.config = config or SchedulerConfig()
        self.tool_analyzer = ToolDependencyAnalyzer(self.config)
        self.agent_analyzer = AgentDependencyAnalyzer(agents, self.config)

    def is_agent_batch(
        self,
        invocations: Sequence[Invocation],
        provider: MetadataProvider | None = None,
    ) -> bool:
        names = [
            provider.resolve_name(inv.name) if provider is not None else inv.name
            for inv in invocations
        ]
        return bool(names) and all(
            is_agent_dispatch_name(name, self.config.agent_tool_names) for name in names
        )

    async def route(
        self,
        invocations: Sequence[Invocation],
        provider: MetadataProvider,
    ) -> ExecutionPlan | AgentExecutionPlan:
        if self.is_agent_batch(invocations, provider):
            return await self.agent_analyzer.analyze(invocations, provider)
        return self.tool_analyzer.analyze(invocations, provider)


async def analyze_dependencies(
    invocations: Sequence[Invocation],
    provider: MetadataProvider,
    *,
    agents: AgentRegistry | None = None,
    config: SchedulerConfig | None = None,
) -> ExecutionPlan | AgentExecutionPlan:
    """One-shot helper around `DependencyAnalyzer.route`."""
    return await DependencyAnalyzer(agents, config).route(invocations, provider)
