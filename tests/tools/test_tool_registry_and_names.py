from __future__ import annotations

import asyncio

import pytest
from pydantic import BaseModel

from toolplan.tools import (
    DEFAULT_METADATA,
    ToolContext,
    ToolMetadata,
    ToolRegistry,
    as_async,
    canonical_tool_name,
    clean_tool_name,
    field_targets,
    is_agent_dispatch_name,
    is_valid_tool_name,
    normalize_tool_name,
    tool,
)
from toolplan.tools.errors import (
    ToolAlreadyRegisteredError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
    ToolValidationError,
)
from toolplan.types import InvocationCategory


def run_async(coro):
    return asyncio.run(coro)


class EchoArgs(BaseModel):
    text: str


@tool(args_model=EchoArgs, name="read_file", category="read", concurrent=True)
def read_file(args: EchoArgs) -> str:
    """Read a file."""
    return args.text


@tool(args_model=EchoArgs, name="echo")
async def echo(args: EchoArgs) -> str:
    return args.text


def test_is_valid_tool_name():
    assert is_valid_tool_name("read_file")
    assert is_valid_tool_name("mcp-server__tool")
    assert not is_valid_tool_name("Read File")
    assert not is_valid_tool_name("")
    assert not is_valid_tool_name("bash()")


def test_clean_tool_name_strips_invalid_characters():
    assert clean_tool_name("Read File!") == "ReadFile"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Read File", "read_file"),
        ("bashTool", "bash"),
        ("GREP", "code_search"),
        ("call agent", "call_agent"),
        ("github__create issue", "github__createissue"),
    ],
)
def test_normalize_tool_name_resolves_aliases(raw, expected):
    assert normalize_tool_name(raw) == expected


def test_normalize_tool_name_uses_known_names_case_insensitively():
    assert normalize_tool_name("Deploy App", ["deployapp", "other"]) == "deployapp"
    assert normalize_tool_name("nothing-like-it", ["deployapp"]) is None
    assert normalize_tool_name("!!!") is None


def test_canonical_and_dispatch_name_helpers():
    assert canonical_tool_name("CallAgentTool") == "call_agent"
    assert canonical_tool_name("custom") == "custom"
    assert is_agent_dispatch_name("call agent", ["call_agent"])
    assert is_agent_dispatch_name("delegate", ["delegate"])
    assert not is_agent_dispatch_name("read_file", ["call_agent"])


def test_registry_register_get_and_duplicates():
    registry = ToolRegistry([read_file])

    with pytest.raises(ToolAlreadyRegisteredError):
        registry.register(read_file)
    registry.register(read_file, overwrite=True)

    assert registry.get("read_file") is read_file
    assert registry.lookup("missing") is None
    with pytest.raises(ToolNotFoundError):
        registry.get("missing")

    assert [s.name for s in registry.specs()] == ["read_file"]
    registry.unregister("read_file")
    assert registry.names() == []


def test_registry_metadata_resolution():
    registry = ToolRegistry([read_file])
    registry.set_metadata("web_fetch", ToolMetadata(can_run_concurrently=True))

    assert registry.get_metadata("read_file").category is InvocationCategory.READ
    assert registry.get_metadata("ReadFile").category is InvocationCategory.READ
    assert registry.get_metadata("web_fetch").can_run_concurrently is True
    assert registry.get_metadata("unknown") is DEFAULT_METADATA
    assert DEFAULT_METADATA.category is InvocationCategory.OTHER
    assert DEFAULT_METADATA.can_run_concurrently is False


def test_registry_resolve_name_maps_onto_registered_tools():
    registry = ToolRegistry([read_file, echo])

    assert registry.resolve_name("echo") == "echo"
    assert registry.resolve_name("ECHO") == "echo"
    assert registry.resolve_name("Read File") == "read_file"
    assert registry.resolve_name("mystery") == "mystery"
    assert registry.get_metadata("Read_File").category is InvocationCategory.READ


def test_decorator_builds_spec_and_metadata():
    assert read_file.spec.description == "Read a file."
    assert read_file.spec.parameters_schema["properties"]["text"]["type"] == "string"
    assert read_file.metadata.category is InvocationCategory.READ
    assert read_file.metadata.can_run_concurrently is True
    assert echo.metadata.category is InvocationCategory.OTHER
    assert echo.spec.description == "echo"


def test_field_targets_extracts_first_present_field():
    extract = field_targets("path", "paths")

    assert extract({"path": "a.ts"}) == "a.ts"
    assert extract({"path": " ", "paths": ["b.ts", 3]}) == ["b.ts"]
    assert extract({"other": 1}) is None
    assert extract("not a dict") is None


def test_tool_call_returns_failures_as_results():
    ok = run_async(echo.call({"text": "hi"}, tool_call_id="c1"))
    invalid = run_async(echo.call({"nope": 1}))

    assert ok.success is True
    assert ok.output == "hi"
    assert ok.tool_call_id == "c1"
    assert invalid.success is False
    assert "Invalid arguments for tool 'echo'" in (invalid.error_message or "")


def test_tool_call_timeout_and_raise_on_error():
    @tool(args_model=EchoArgs, name="slow", timeout=0.01)
    async def slow(args: EchoArgs) -> str:
        await asyncio.sleep(1)
        return args.text

    @tool(args_model=EchoArgs, name="strict", raise_on_error=True)
    def strict(args: EchoArgs) -> str:
        raise RuntimeError("bad")

    timed_out = run_async(slow.call({"text": "x"}))
    assert timed_out.success is False
    assert "exceeded timeout" in (timed_out.error_message or "")

    with pytest.raises(ToolExecutionError):
        run_async(strict.call({"text": "x"}))
    with pytest.raises(ToolValidationError):
        run_async(strict.call({}))

    @tool(args_model=EchoArgs, name="strict_slow", timeout=0.01, raise_on_error=True)
    async def strict_slow(args: EchoArgs) -> str:
        await asyncio.sleep(1)
        return args.text

    with pytest.raises(ToolTimeoutError):
        run_async(strict_slow.call({"text": "x"}))


def test_tool_signature_validation():
    with pytest.raises(ToolValidationError):

        @tool(args_model=EchoArgs, name="bad")
        def bad(args: EchoArgs, other: int) -> str:
            return ""

    @tool(args_model=EchoArgs, name="ctx_first")
    def ctx_first(ctx: ToolContext, args: EchoArgs) -> str:
        return f"{ctx.request_id}:{args.text}"

    result = run_async(ctx_first.call({"text": "x"}, ctx=ToolContext(request_id="r1")))
    assert result.output == "r1:x"


def test_result_payload_view():
    result = run_async(echo.call({"nope": 1}, tool_call_id="c9"))
    payload = result.to_payload()

    assert payload["success"] is False
    assert payload["tool_call_id"] == "c9"
    assert "error" in payload


def test_as_async_wraps_sync_functions():
    def add_one(value: int) -> int:
        return value + 1

    assert run_async(as_async(add_one)(1)) == 2
