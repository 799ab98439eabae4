"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Plan executor.

Walks a plan stage by stage and group by group. Concurrent groups fan out
with `asyncio.gather` bounded by a semaphore; sequential groups run in list
order. Every invocation yields exactly one `InvocationOutcome` unless the run
is cancelled first; tool failures are returned as data and never abort
siblings.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field, replace
from typing import Any, Sequence

from ..agents.dispatch import CANCELLATION_ARG, INVOCATION_ID_ARG, REPORT_MESSAGE_ARG
from ..agents.types import AgentRegistry
from ..config import SchedulerConfig
from ..logging import get_logger
from ..planning.router import DependencyAnalyzer
from ..telemetry import NullTelemetrySink, TelemetryEvent, TelemetrySink, now_ms
from ..tools.base import Tool, ToolContext, ToolResult
from ..tools.normalizer import is_agent_dispatch_name
from ..tools.registry import ToolRegistry
from ..types import AnyExecutionPlan, ExecutionGroup, Invocation
from .cancellation import CancellationToken
from .inputs import normalize_input
from .messages import ExecutionMessage, MessageSink, StatusSink, deliver, notify_status
from .state import LoopMessage, LoopState

logger = get_logger(name=__name__)

TOOL_NOT_FOUND = "tool-not-found"
TOOL_EXECUTION = "tool-execution"


@dataclass(frozen=True, slots=True)
class InvocationOutcome:
    invocation: Invocation
    result: ToolResult[Any]


@dataclass(slots=True)
class ExecutionContext:
    """
    Live resources for one plan execution.

    Attributes:
        registry: Tool implementations and their metadata.
        cancellation: Shared cooperative cancellation token.
        loop_state: Conversation state that receives error-recovery messages.
        on_message: Sink for "doing" / "result" notifications.
        on_status: Sink for human-readable stage / group progress lines.
        task_id: Optional task / session id forwarded to tools.
        user_id: Optional user id forwarded to tools.
        agents: Agent registry used when routing agent-only batches.
    """

    registry: ToolRegistry
    cancellation: CancellationToken | None = None
    loop_state: LoopState | None = None
    on_message: MessageSink | None = None
    on_status: StatusSink | None = None
    task_id: str | None = None
    user_id: str | None = None
    agents: AgentRegistry | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class InvocationExecutor:
    """Runs execution plans against a `ToolRegistry`."""

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        *,
        telemetry: TelemetrySink | None = None,
    ) -> None:
        self.config = config or SchedulerConfig()
        self._telemetry = telemetry or NullTelemetrySink()

    # ''''''''''''''''''''''''''''''''''''''
    # Plan execution
    # ''''''''''''''''''''''''''''''''''''''

    async def execute(
        self,
        plan: AnyExecutionPlan,
        ctx: ExecutionContext,
    ) -> list[InvocationOutcome]:
        """
        Execute `plan` and return outcomes in completion order per group.

        Cancellation is checked before each stage, each group and each member
        of a sequential group; outcomes gathered so far are returned.
        """
        outcomes: list[InvocationOutcome] = []
        logger.info(
            "plan_execution_started",
            stages=[s.phase for s in plan.stages],
            task_id=ctx.task_id,
        )

        for stage in plan.stages:
            if self._cancelled(ctx, at=stage.phase):
                break
            self._telemetry_event(
                "toolplan.stage_started",
                {"stage": stage.phase, "groups": len(stage.groups)},
            )
            await notify_status(ctx.on_status, stage.description)
            started = time.perf_counter()
            for group in stage.groups:
                if self._cancelled(ctx, at=group.id):
                    break
                outcomes.extend(await self._run_group(group, ctx))
            self._telemetry_event(
                "toolplan.stage_completed",
                {
                    "stage": stage.phase,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 3),
                },
            )

        logger.info(
            "plan_execution_finished",
            outcomes=len(outcomes),
            failures=sum(1 for o in outcomes if not o.result.success),
        )
        return outcomes

    async def execute_with_smart_concurrency(
        self,
        invocations: Sequence[Invocation],
        ctx: ExecutionContext,
    ) -> list[InvocationOutcome]:
        """Analyze `invocations`, then execute the resulting plan."""
        analyzer = DependencyAnalyzer(ctx.agents, self.config)
        plan = await analyzer.route(invocations, ctx.registry)
        return await self.execute(plan, ctx)

    async def _run_group(
        self,
        group: ExecutionGroup,
        ctx: ExecutionContext,
    ) -> list[InvocationOutcome]:
        if group.concurrent and len(group.members) > 1:
            sem = asyncio.Semaphore(max(1, group.max_concurrency))

            async def _one(inv: Invocation) -> InvocationOutcome:
                async with sem:
                    return await self.execute_invocation(inv, ctx)

            await notify_status(
                ctx.on_status, f"Processing {len(group.members)} tools concurrently"
            )
            return list(await asyncio.gather(*[_one(inv) for inv in group.members]))

        out: list[InvocationOutcome] = []
        for inv in group.members:
            if self._cancelled(ctx, at=inv.id):
                break
            await notify_status(ctx.on_status, f"Processing tool {inv.name}")
            out.append(await self.execute_invocation(inv, ctx))
        return out

    def _cancelled(self, ctx: ExecutionContext, *, at: str) -> bool:
        if ctx.cancellation is not None and ctx.cancellation.cancelled:
            logger.info("plan_execution_cancelled", at=at, reason=ctx.cancellation.reason)
            return True
        return False

    # ''''''''''''''''''''''''''''''''''''''
    # Single invocation
    # ''''''''''''''''''''''''''''''''''''''

    async def execute_invocation(
        self,
        inv: Invocation,
        ctx: ExecutionContext,
    ) -> InvocationOutcome:
        """
        Execute one invocation and return its outcome.

        Never raises for tool failures; they come back as
        `ToolResult(success=False)` with an `error_type` in metadata.
        """
        started = time.perf_counter()
        name = ctx.registry.resolve_name(inv.name, log=True)
        args = normalize_input(
            inv.input,
            json_fields=self.config.json_fields,
            decode_html=self.config.decode_html_entities,
        )
        if args is None:
            args = {}

        tool = ctx.registry.lookup(name)
        if tool is None:
            result = self._not_found(inv, name, args, ctx.registry)
        else:
            result = await self._call(inv, name, tool, args, ctx)

        if not result.success:
            await self._record_failure(inv, name, result, ctx)

        latency_ms = round((time.perf_counter() - started) * 1000, 3)
        attrs = {"tool": name, "success": result.success}
        self._telemetry_counter("toolplan.invocations", attributes=attrs)
        if not result.success:
            self._telemetry_counter(
                "toolplan.invocation_failures",
                attributes={"tool": name, "error_type": result.metadata.get("error_type")},
            )
        self._telemetry_histogram("toolplan.invocation_latency_ms", latency_ms, attributes=attrs)

        return InvocationOutcome(invocation=inv, result=result)

    def _not_found(
        self,
        inv: Invocation,
        name: str,
        args: Any,
        registry: ToolRegistry,
    ) -> ToolResult[Any]:
        available = registry.names()
        logger.warning("tool_not_found", requested_tool=inv.name, resolved=name)
        return ToolResult(
            output=None,
            success=False,
            error_message=(
                f"Tool '{inv.name}' not found. Available tools: {', '.join(available) or 'none'}"
            ),
            tool_name=name,
            metadata={
                "error_type": TOOL_NOT_FOUND,
                "requested_tool": inv.name,
                "available_tools": available,
                "input": args,
            },
            tool_call_id=inv.id,
        )

    async def _call(
        self,
        inv: Invocation,
        name: str,
        tool: Tool[Any, Any],
        args: Any,
        ctx: ExecutionContext,
    ) -> ToolResult[Any]:
        call_args = args
        if is_agent_dispatch_name(name, self.config.agent_tool_names) and isinstance(args, dict):
            call_args = self._inject_dispatch_args(inv, args, ctx)

        if tool.metadata.render_doing:
            await deliver(
                ctx.on_message,
                ExecutionMessage(kind="doing", invocation_id=inv.id, tool_name=name, input=args),
            )

        tool_ctx = ToolContext(
            request_id=inv.id,
            task_id=ctx.task_id,
            user_id=ctx.user_id,
            metadata=dict(ctx.metadata),
        )
        try:
            result = await tool.call(call_args, ctx=tool_ctx, tool_call_id=inv.id)
        except Exception as e:
            logger.exception("tool_raised", tool=name, invocation_id=inv.id)
            result = ToolResult(
                output=None,
                success=False,
                error_message=f"Error executing tool '{name}': {e}",
                tool_name=name,
                tool_call_id=inv.id,
            )

        if not result.success and "error_type" not in result.metadata:
            result = replace(
                result,
                metadata={**result.metadata, "error_type": TOOL_EXECUTION, "input": args},
            )

        await deliver(
            ctx.on_message,
            ExecutionMessage(
                kind="result",
                invocation_id=inv.id,
                tool_name=name,
                input=args,
                output=result.output if result.success else result.error_message,
                success=result.success,
            ),
        )
        return result

    def _inject_dispatch_args(
        self,
        inv: Invocation,
        args: dict[str, Any],
        ctx: ExecutionContext,
    ) -> dict[str, Any]:
        async def _report(message: ExecutionMessage | dict[str, Any]) -> None:
            if isinstance(message, dict):
                message = ExecutionMessage(**message)
            if message.parent_invocation_id is None:
                message = message.with_parent(inv.id)
            await deliver(ctx.on_message, message)

        injected = dict(args)
        injected[INVOCATION_ID_ARG] = inv.id
        injected[REPORT_MESSAGE_ARG] = _report
        if ctx.cancellation is not None:
            injected[CANCELLATION_ARG] = ctx.cancellation
        return injected

    async def _record_failure(
        self,
        inv: Invocation,
        name: str,
        result: ToolResult[Any],
        ctx: ExecutionContext,
    ) -> None:
        error_type = result.metadata.get("error_type", TOOL_EXECUTION)
        logger.warning(
            "invocation_failed",
            invocation_id=inv.id,
            tool=name,
            error_type=error_type,
            error=result.error_message,
        )
        if ctx.loop_state is None:
            return
        if error_type == TOOL_NOT_FOUND:
            hint = "Use one of the available tools listed in the error."
        else:
            hint = "Check the arguments and retry, or try a different approach."
        await ctx.loop_state.append(
            LoopMessage(
                role="system",
                content=f"Tool '{name}' failed: {result.error_message}. {hint}",
                metadata={
                    "invocation_id": inv.id,
                    "tool_name": name,
                    "error_type": error_type,
                },
            )
        )

    # ''''''''''''''''''''''''''''''''''''''
    # Telemetry
    # ''''''''''''''''''''''''''''''''''''''

    def _telemetry_event(self, name: str, attributes: dict[str, Any]) -> None:
        try:
            self._telemetry.record_event(
                TelemetryEvent(name=name, timestamp_ms=now_ms(), attributes=attributes)
            )
        except Exception:
            return None

    def _telemetry_counter(
        self,
        name: str,
        *,
        value: int = 1,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        try:
            self._telemetry.increment_counter(name, value=value, attributes=attributes)
        except Exception:
            return None

    def _telemetry_histogram(
        self,
        name: str,
        value: float,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        try:
            self._telemetry.record_histogram(name, value, attributes=attributes)
        except Exception:
            return None
