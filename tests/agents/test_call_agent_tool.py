from __future__ import annotations

import asyncio

import pytest

from toolplan.agents import (
    AgentDefinition,
    CallAgentArgs,
    InMemoryAgentRegistry,
    build_call_agent_tool,
)
from toolplan.core import CancellationToken
from toolplan.errors import AgentAlreadyRegisteredError


def run_async(coro):
    return asyncio.run(coro)


def _agents() -> InMemoryAgentRegistry:
    return InMemoryAgentRegistry([AgentDefinition(agent_id="coding", tools=["write_file"])])


def test_injected_fields_are_hidden_from_schema():
    schema = build_call_agent_tool(_agents(), lambda request: asyncio.sleep(0)).spec.parameters_schema

    assert set(schema["properties"]) == {"agentId", "task", "context", "targets"}
    assert "_invocation_id" not in schema["properties"]


def test_dispatch_builds_request_from_arguments():
    seen = []

    async def runner(request):
        seen.append(request)
        return {"status": "done"}

    call_agent = build_call_agent_tool(_agents(), runner)
    result = run_async(
        call_agent.call(
            {
                "agentId": "coding",
                "task": "fix the bug",
                "targets": "src/a.ts",
                "_invocation_id": "inv-1",
            }
        )
    )

    assert result.success is True
    assert result.output == {"status": "done"}
    assert seen[0].definition.agent_id == "coding"
    assert seen[0].targets == ["src/a.ts"]
    assert seen[0].invocation_id == "inv-1"
    assert seen[0].report_message is None


def test_unknown_agent_is_a_failure_result():
    async def runner(request):
        return "unreachable"

    result = run_async(
        build_call_agent_tool(_agents(), runner).call({"agentId": "ghost", "task": "x"})
    )

    assert result.success is False
    assert "Unknown agent: ghost" in (result.error_message or "")


def test_cancelled_token_skips_runner():
    calls = []

    async def runner(request):
        calls.append(request)
        return "ran"

    token = CancellationToken()
    token.cancel("stop")
    result = run_async(
        build_call_agent_tool(_agents(), runner).call(
            {"agentId": "coding", "task": "x", "_cancellation": token}
        )
    )

    assert result.success is False
    assert calls == []


def test_missing_agent_id_fails_validation():
    result = run_async(
        build_call_agent_tool(_agents(), lambda r: asyncio.sleep(0)).call({"task": "x"})
    )

    assert result.success is False
    assert "Invalid arguments" in (result.error_message or "")


def test_args_model_accepts_field_names():
    args = CallAgentArgs(agent_id="coding", task="t", invocation_id="i")

    assert args.agent_id == "coding"
    assert args.invocation_id == "i"


def test_agent_registry_rejects_duplicates():
    agents = _agents()

    with pytest.raises(AgentAlreadyRegisteredError, match="Agent already registered: coding"):
        agents.register(AgentDefinition(agent_id="coding"))
    assert run_async(agents.resolve("coding")).tools == ["write_file"]
    assert run_async(agents.resolve("missing")) is None
