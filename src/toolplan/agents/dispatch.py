"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Builder for the sub-agent dispatch tool.

The executor recognizes the dispatch tool by name and injects three extra
arguments before calling it: `_invocation_id`, `_cancellation` and
`_report_message`. They are hidden from the model-facing JSON schema.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema

from ..logging import get_logger
from ..tools.base import Tool, ToolMetadata, ToolSpec
from ..tools.errors import ToolExecutionError
from ..types import InvocationCategory
from .types import AgentDispatchRequest, AgentRegistry, SubAgentRunner

logger = get_logger(name=__name__)

CALL_AGENT_TOOL_NAME = "call_agent"

INVOCATION_ID_ARG = "_invocation_id"
CANCELLATION_ARG = "_cancellation"
REPORT_MESSAGE_ARG = "_report_message"


class CallAgentArgs(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    agent_id: str = Field(alias="agentId", description="Id of the agent to dispatch")
    task: str = Field(description="What the agent should do")
    context: Optional[str] = Field(default=None, description="Extra context for the agent")
    targets: Optional[Union[str, List[str]]] = Field(
        default=None,
        description="Paths the agent will modify",
    )

    # injected by the executor
    invocation_id: SkipJsonSchema[Optional[str]] = Field(default=None, alias=INVOCATION_ID_ARG)
    cancellation: SkipJsonSchema[Any] = Field(default=None, alias=CANCELLATION_ARG)
    report_message: SkipJsonSchema[Any] = Field(default=None, alias=REPORT_MESSAGE_ARG)


def _target_list(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [v for v in value if v.strip()]


def build_call_agent_tool(
    agents: AgentRegistry,
    runner: SubAgentRunner,
    *,
    name: str = CALL_AGENT_TOOL_NAME,
    description: str = "Dispatch a task to a sub-agent.",
    timeout: float | None = None,
) -> Tool[CallAgentArgs, Any]:
    """
    Create the tool that dispatches work to sub-agents.

    Args:
        agents: Registry used to resolve `agentId`.
        runner: Hook that runs the resolved sub-agent.
        name: Registered tool name; must be one of the configured agent
            tool names for the analyzers to treat it as a dispatch.
        description: Model-facing description.
        timeout: Optional per-dispatch timeout in seconds.

    Returns:
        Tool wrapping the dispatch.
    """

    async def call_agent(args: CallAgentArgs) -> Any:
        if args.cancellation is not None:
            args.cancellation.raise_if_cancelled()

        definition = await agents.resolve(args.agent_id)
        if definition is None:
            raise ToolExecutionError(f"Unknown agent: {args.agent_id}")

        logger.info(
            "subagent_dispatch",
            agent_id=args.agent_id,
            invocation_id=args.invocation_id,
        )
        request = AgentDispatchRequest(
            definition=definition,
            task=args.task,
            context=args.context,
            targets=_target_list(args.targets),
            invocation_id=args.invocation_id,
            cancellation=args.cancellation,
            report_message=args.report_message,
        )
        return await runner(request)

    return Tool(
        spec=ToolSpec(
            name=name,
            description=description,
            parameters_schema=CallAgentArgs.model_json_schema(by_alias=True),
        ),
        fn=call_agent,
        args_model=CallAgentArgs,
        metadata=ToolMetadata(category=InvocationCategory.OTHER),
        default_timeout=timeout,
    )
