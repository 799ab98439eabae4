"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Dependency analysis for batches of ordinary tool invocations.

Batches are split into three ordered stages:
  read-stage        every read, one concurrent group
  write-edit-stage  writes then edits, grouped so conflicting targets never share a concurrent group
  other-stage       everything else, grouped by consecutive concurrency flag
"""

from __future__ import annotations

from typing import Sequence

from ..config import SchedulerConfig
from ..core.inputs import normalize_input
from ..logging import get_logger
from ..tools.base import ToolMetadata
from ..tools.normalizer import is_agent_dispatch_name
from ..tools.registry import MetadataProvider
from ..types import (
    OTHER_STAGE,
    READ_STAGE,
    WRITE_EDIT_STAGE,
    ExecutionGroup,
    ExecutionPlan,
    ExecutionStage,
    Invocation,
    InvocationCategory,
    PlanSummary,
    count_groups,
)
from .conflicts import collect_targets, partition_by_conflicts

logger = get_logger(name=__name__)


class ToolDependencyAnalyzer:
    """Builds an `ExecutionPlan` for a batch of tool invocations."""

    def __init__(self, config: SchedulerConfig | None = None) -> None:
        self.config = config or SchedulerConfig()

    # ''''''''''''''''''''''''''''''''''''''
    # Classification
    # ''''''''''''''''''''''''''''''''''''''

    def _category(self, name: str, metadata: ToolMetadata) -> InvocationCategory:
        if is_agent_dispatch_name(name, self.config.agent_tool_names):
            return InvocationCategory.OTHER
        return metadata.category

    def _targets(self, inv: Invocation, metadata: ToolMetadata) -> list[str]:
        if metadata.extract_targets is None:
            return []
        normalized = normalize_input(
            inv.input,
            json_fields=self.config.json_fields,
            decode_html=self.config.decode_html_entities,
        )
        try:
            raw = metadata.extract_targets(normalized)
        except Exception as e:
            logger.warning(
                "target_extraction_failed",
                invocation_id=inv.id,
                tool=inv.name,
                error=str(e),
            )
            return []
        return collect_targets(raw)

    # ''''''''''''''''''''''''''''''''''''''
    # Stage builders
    # ''''''''''''''''''''''''''''''''''''''

    def _read_stage(self, reads: list[Invocation]) -> ExecutionStage:
        group = ExecutionGroup(
            id="read-group-all",
            concurrent=True,
            max_concurrency=min(len(reads), self.config.max_parallel_tools),
            members=reads,
            reason=f"{len(reads)} read-only invocation(s) run in parallel",
        )
        return ExecutionStage(
            phase=READ_STAGE,
            description="Information gathering (read-only invocations)",
            groups=[group],
        )

    def _write_edit_stage(
        self,
        mutations: list[tuple[Invocation, list[str]]],
    ) -> ExecutionStage:
        cap = self.config.max_parallel_tools
        targeted = [(inv, targets) for inv, targets in mutations if targets]
        untargeted = [inv for inv, targets in mutations if not targets]

        clusters = partition_by_conflicts(targeted, lambda pair: pair[1])
        groups: list[ExecutionGroup] = []
        for idx, cluster in enumerate(clusters, start=1):
            members = [inv for inv, _ in cluster]
            paths: list[str] = []
            for _, targets in cluster:
                paths.extend(t for t in targets if t not in paths)

            concurrent = len(members) > 1
            if len(clusters) > 1:
                reason = f"target conflict detected, conflict-free cluster {idx} of {len(clusters)}"
            elif concurrent:
                reason = "disjoint targets, safe to run in parallel"
            else:
                reason = "single targeted modification"

            groups.append(
                ExecutionGroup(
                    id=f"write-edit-group-{idx}",
                    concurrent=concurrent,
                    max_concurrency=min(len(members), cap) if concurrent else 1,
                    members=members,
                    target_paths=paths,
                    reason=reason,
                )
            )

        if untargeted:
            groups.append(
                ExecutionGroup(
                    id="write-edit-group-no-target",
                    concurrent=False,
                    max_concurrency=1,
                    members=untargeted,
                    reason="no declared target, serialized for safety",
                )
            )

        return ExecutionStage(
            phase=WRITE_EDIT_STAGE,
            description="Content modification (write and edit invocations)",
            groups=groups,
        )

    def _other_stage(self, others: list[tuple[Invocation, bool]]) -> ExecutionStage:
        runs: list[tuple[bool, list[Invocation]]] = []
        for inv, flag in others:
            if runs and runs[-1][0] == flag:
                runs[-1][1].append(inv)
            else:
                runs.append((flag, [inv]))

        groups: list[ExecutionGroup] = []
        for idx, (flag, members) in enumerate(runs, start=1):
            groups.append(
                ExecutionGroup(
                    id=f"other-group-{idx}",
                    concurrent=flag,
                    max_concurrency=min(len(members), self.config.max_parallel_tools) if flag else 1,
                    members=members,
                    reason=(
                        "invocations declared safe to run concurrently"
                        if flag
                        else "invocations not declared concurrent, run in order"
                    ),
                )
            )

        return ExecutionStage(
            phase=OTHER_STAGE,
            description="Remaining invocations",
            groups=groups,
        )

    # ''''''''''''''''''''''''''''''''''''''
    # Public API
    # ''''''''''''''''''''''''''''''''''''''

    def analyze(
        self,
        invocations: Sequence[Invocation],
        provider: MetadataProvider,
    ) -> ExecutionPlan:
        """
        Build the staged plan for `invocations`.

        Args:
            invocations: Batch proposed in one model turn.
            provider: Source of category / concurrency / target metadata.

        Returns:
            Plan in which every invocation appears in exactly one group.
        """
        reads: list[Invocation] = []
        writes: list[tuple[Invocation, list[str]]] = []
        edits: list[tuple[Invocation, list[str]]] = []
        others: list[tuple[Invocation, bool]] = []
        by_category = {c.value: 0 for c in InvocationCategory}

        for inv in invocations:
            name = provider.resolve_name(inv.name)
            metadata = provider.get_metadata(name)
            category = self._category(name, metadata)
            by_category[category.value] += 1
            if category is InvocationCategory.READ:
                reads.append(inv)
            elif category is InvocationCategory.WRITE:
                writes.append((inv, self._targets(inv, metadata)))
            elif category is InvocationCategory.EDIT:
                edits.append((inv, self._targets(inv, metadata)))
            else:
                others.append((inv, metadata.can_run_concurrently))

        stages: list[ExecutionStage] = []
        if reads:
            stages.append(self._read_stage(reads))
        if writes or edits:
            stages.append(self._write_edit_stage(writes + edits))
        if others:
            stages.append(self._other_stage(others))

        total_groups, concurrent_groups = count_groups(stages)
        plan = ExecutionPlan(
            stages=stages,
            summary=PlanSummary(
                total_invocations=len(invocations),
                total_stages=len(stages),
                total_groups=total_groups,
                concurrent_groups=concurrent_groups,
                by_category=by_category,
            ),
        )

        logger.info(
            "execution_plan_built",
            total_invocations=plan.summary.total_invocations,
            stages=[s.phase for s in stages],
            groups=[(g.id, len(g.members), g.concurrent) for g in plan.groups()],
        )
        return plan
