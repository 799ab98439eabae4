"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

toolplan: concurrent scheduling for model-proposed tool and sub-agent calls.

Typical use:

    registry = ToolRegistry([read_file, write_file])
    executor = InvocationExecutor()
    outcomes = await executor.execute_with_smart_concurrency(
        invocations,
        ExecutionContext(registry=registry),
    )
"""

from .agents import (
    AgentDefinition,
    AgentDispatchRequest,
    AgentRegistry,
    InMemoryAgentRegistry,
    build_call_agent_tool,
)
from .config import MAX_PARALLEL_SUBAGENTS, MAX_PARALLEL_TOOLS, SchedulerConfig
from .core import CancellationToken, ExecutionMessage, LoopMessage, LoopState, normalize_input
from .errors import (
    AgentAlreadyRegisteredError,
    InvalidBatchError,
    PlanExecutionCancelled,
    ToolplanError,
)
from .logging import configure_logging, configure_logging_from_config, get_logger
from .planning import (
    AgentDependencyAnalyzer,
    DependencyAnalyzer,
    ToolDependencyAnalyzer,
    analyze_dependencies,
    is_agent_execution_plan,
    paths_conflict,
)
from .core.executor import ExecutionContext, InvocationExecutor, InvocationOutcome
from .telemetry import InMemoryTelemetrySink, NullTelemetrySink, TelemetrySink
from .tools import (
    MetadataProvider,
    Tool,
    ToolContext,
    ToolMetadata,
    ToolRegistry,
    ToolResult,
    is_valid_tool_name,
    normalize_tool_name,
    tool,
)
from .types import (
    AgentExecutionPlan,
    AgentRole,
    ExecutionGroup,
    ExecutionPlan,
    ExecutionStage,
    Invocation,
    InvocationCategory,
)

__all__ = [
    # types
    "Invocation",
    "InvocationCategory",
    "AgentRole",
    "ExecutionGroup",
    "ExecutionStage",
    "ExecutionPlan",
    "AgentExecutionPlan",
    # tools
    "Tool",
    "ToolContext",
    "ToolMetadata",
    "ToolRegistry",
    "ToolResult",
    "MetadataProvider",
    "tool",
    "is_valid_tool_name",
    "normalize_tool_name",
    # agents
    "AgentDefinition",
    "AgentDispatchRequest",
    "AgentRegistry",
    "InMemoryAgentRegistry",
    "build_call_agent_tool",
    # planning
    "ToolDependencyAnalyzer",
    "AgentDependencyAnalyzer",
    "DependencyAnalyzer",
    "analyze_dependencies",
    "is_agent_execution_plan",
    "paths_conflict",
    # execution
    "InvocationExecutor",
    "ExecutionContext",
    "InvocationOutcome",
    "CancellationToken",
    "LoopState",
    "LoopMessage",
    "ExecutionMessage",
    "normalize_input",
    # config / ambient
    "SchedulerConfig",
    "MAX_PARALLEL_TOOLS",
    "MAX_PARALLEL_SUBAGENTS",
    "configure_logging",
    "configure_logging_from_config",
    "get_logger",
    "TelemetrySink",
    "NullTelemetrySink",
    "InMemoryTelemetrySink",
    # errors
    "ToolplanError",
    "InvalidBatchError",
    "PlanExecutionCancelled",
    "AgentAlreadyRegisteredError",
]
