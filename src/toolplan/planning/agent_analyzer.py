"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Dependency analysis for batches made only of sub-agent dispatches.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..agents.types import AgentRegistry
from ..config import SchedulerConfig
from ..core.inputs import normalize_input
from ..errors import InvalidBatchError
from ..logging import get_logger
from ..tools.normalizer import is_agent_dispatch_name
from ..tools.registry import MetadataProvider
from ..types import (
    READ_STAGE,
    WRITE_EDIT_STAGE,
    AgentExecutionPlan,
    AgentPlanSummary,
    AgentRole,
    ExecutionGroup,
    ExecutionStage,
    Invocation,
    InvocationCategory,
    count_groups,
)
from .conflicts import collect_targets, partition_by_conflicts

logger = get_logger(name=__name__)


class AgentDependencyAnalyzer:
    """
    Builds an `AgentExecutionPlan`.

    Information-gathering agents run first, all together. Content-modifying
    agents follow, split so that agents with conflicting targets never run
    concurrently. Agents whose role cannot be established are treated as
    content-modifying.
    """

    def __init__(
        self,
        agents: AgentRegistry | None = None,
        config: SchedulerConfig | None = None,
    ) -> None:
        self.agents = agents
        self.config = config or SchedulerConfig()

    async def _resolve_role(
        self,
        agent_id: str | None,
        provider: MetadataProvider,
        cache: dict[str, AgentRole],
    ) -> AgentRole:
        if not agent_id:
            return AgentRole.WRITE
        cached = cache.get(agent_id)
        if cached is not None:
            return cached

        definition = await self.agents.resolve(agent_id) if self.agents is not None else None
        if definition is None:
            role = AgentRole.WRITE
        elif definition.role is not None:
            role = AgentRole(definition.role)
        elif not definition.tools:
            role = AgentRole.WRITE
        else:
            categories = {provider.get_metadata(t).category for t in definition.tools}
            role = (
                AgentRole.READ
                if categories == {InvocationCategory.READ}
                else AgentRole.WRITE
            )

        cache[agent_id] = role
        return role

    def _normalized(self, inv: Invocation) -> Any:
        return normalize_input(
            inv.input,
            json_fields=self.config.json_fields,
            decode_html=self.config.decode_html_entities,
        )

    def _read_stage(self, reads: list[tuple[Invocation, list[str]]]) -> ExecutionStage:
        members = [inv for inv, _ in reads]
        paths: list[str] = []
        for _, targets in reads:
            paths.extend(t for t in targets if t not in paths)
        group = ExecutionGroup(
            id=f"{READ_STAGE}-group-1",
            concurrent=True,
            max_concurrency=min(len(members), self.config.max_parallel_subagents),
            members=members,
            target_paths=paths,
            reason=f"{len(members)} information-gathering agent(s) run in parallel",
            role=AgentRole.READ,
        )
        return ExecutionStage(
            phase=READ_STAGE,
            description="Information gathering agents",
            groups=[group],
        )

    def _write_stage(self, writes: list[tuple[Invocation, list[str]]]) -> ExecutionStage:
        cap = self.config.max_parallel_subagents
        targeted = [(inv, targets) for inv, targets in writes if targets]
        untargeted = [inv for inv, targets in writes if not targets]

        clusters = partition_by_conflicts(targeted, lambda pair: pair[1])
        groups: list[ExecutionGroup] = []

        def _next_id() -> str:
            return f"{WRITE_EDIT_STAGE}-group-{len(groups) + 1}"

        for idx, cluster in enumerate(clusters, start=1):
            members = [inv for inv, _ in cluster]
            paths: list[str] = []
            for _, targets in cluster:
                paths.extend(t for t in targets if t not in paths)
            concurrent = len(members) > 1
            if len(clusters) > 1:
                reason = (
                    f"target conflict between agents, conflict-free cluster {idx} of {len(clusters)}"
                )
            elif concurrent:
                reason = "disjoint targets, agents run in parallel"
            else:
                reason = "single content-modifying agent"
            groups.append(
                ExecutionGroup(
                    id=_next_id(),
                    concurrent=concurrent,
                    max_concurrency=min(len(members), cap) if concurrent else 1,
                    members=members,
                    target_paths=paths,
                    reason=reason,
                    role=AgentRole.WRITE,
                )
            )

        for inv in untargeted:
            groups.append(
                ExecutionGroup(
                    id=_next_id(),
                    concurrent=False,
                    max_concurrency=1,
                    members=[inv],
                    target_paths=[],
                    reason="missing targets, serialized for safety",
                    role=AgentRole.WRITE,
                )
            )

        return ExecutionStage(
            phase=WRITE_EDIT_STAGE,
            description="Content modification agents",
            groups=groups,
        )

    async def analyze(
        self,
        invocations: Sequence[Invocation],
        provider: MetadataProvider,
    ) -> AgentExecutionPlan:
        """
        Build the staged plan for a batch of agent dispatches.

        Raises:
            InvalidBatchError: If any invocation is not an agent dispatch.
        """
        for inv in invocations:
            name = provider.resolve_name(inv.name)
            if not is_agent_dispatch_name(name, self.config.agent_tool_names):
                raise InvalidBatchError(
                    "AgentDependencyAnalyzer can only handle agent calls; "
                    f"got '{inv.name}' (id={inv.id})"
                )

        cache: dict[str, AgentRole] = {}
        reads: list[tuple[Invocation, list[str]]] = []
        writes: list[tuple[Invocation, list[str]]] = []

        for inv in invocations:
            args = self._normalized(inv)
            if not isinstance(args, dict):
                args = {}
            agent_id = args.get("agentId")
            role = await self._resolve_role(
                agent_id if isinstance(agent_id, str) else None,
                provider,
                cache,
            )
            targets = collect_targets(args.get("targets"))
            if role is AgentRole.READ:
                reads.append((inv, targets))
            else:
                writes.append((inv, targets))

        stages: list[ExecutionStage] = []
        if reads:
            stages.append(self._read_stage(reads))
        if writes:
            stages.append(self._write_stage(writes))

        total_groups, concurrent_groups = count_groups(stages)
        plan = AgentExecutionPlan(
            stages=stages,
            summary=AgentPlanSummary(
                total_agents=len(invocations),
                total_stages=len(stages),
                total_groups=total_groups,
                concurrent_groups=concurrent_groups,
                information_gathering_agents=len(reads),
                content_modification_agents=len(writes),
            ),
        )

        logger.info(
            "agent_plan_built",
            total_agents=plan.summary.total_agents,
            roles={k: v.value for k, v in cache.items()},
            groups=[(g.id, len(g.members), g.concurrent) for g in plan.groups()],
        )
        return plan
