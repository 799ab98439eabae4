from __future__ import annotations

import asyncio

from pydantic import BaseModel

from toolplan.agents import AgentDefinition, InMemoryAgentRegistry
from toolplan.planning import DependencyAnalyzer, analyze_dependencies, is_agent_execution_plan
from toolplan.tools import ToolRegistry, tool
from toolplan.types import AgentExecutionPlan, ExecutionPlan, Invocation


def run_async(coro):
    return asyncio.run(coro)


class PathArgs(BaseModel):
    path: str


@tool(args_model=PathArgs, name="read_file", category="read", concurrent=True)
def read_file(args: PathArgs) -> str:
    return args.path


AGENTS = InMemoryAgentRegistry([AgentDefinition(agent_id="explore", tools=["read_file"])])


def _agent_call(idx: int, name: str = "call_agent") -> Invocation:
    return Invocation(id=f"a{idx}", name=name, input={"agentId": "explore", "task": "look"})


def test_mixed_batch_uses_tool_analyzer():
    plan = run_async(
        DependencyAnalyzer(AGENTS).route(
            [Invocation(id="r1", name="read_file", input={"path": "a.ts"}), _agent_call(1)],
            ToolRegistry([read_file]),
        )
    )

    assert isinstance(plan, ExecutionPlan)
    assert is_agent_execution_plan(plan) is False
    assert [s.phase for s in plan.stages] == ["read-stage", "other-stage"]


def test_agent_only_batch_uses_agent_analyzer():
    plan = run_async(
        DependencyAnalyzer(AGENTS).route(
            [_agent_call(1), _agent_call(2, name="call agent")],
            ToolRegistry([read_file]),
        )
    )

    assert isinstance(plan, AgentExecutionPlan)
    assert is_agent_execution_plan(plan) is True
    assert plan.summary.information_gathering_agents == 2


def test_empty_batch_routes_to_tool_plan():
    plan = run_async(analyze_dependencies([], ToolRegistry()))

    assert is_agent_execution_plan(plan) is False
    assert plan.stages == []


def test_agent_batch_without_registry_is_all_write():
    plan = run_async(analyze_dependencies([_agent_call(1)], ToolRegistry([read_file])))

    assert is_agent_execution_plan(plan)
    assert plan.summary.content_modification_agents == 1
