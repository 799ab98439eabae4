"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module provides the @tool decorator for defining tools and their scheduling metadata in one place.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Type, TypeVar, Union

from pydantic import BaseModel

from ..types import InvocationCategory
from .base import TargetExtractor, Tool, ToolFn, ToolMetadata, ToolSpec


ArgsT = TypeVar("ArgsT", bound=BaseModel)
ReturnT = TypeVar("ReturnT")


def _default_description(fn: Callable[..., Any], fallback: str) -> str:
    doc = inspect.getdoc(fn) or ""
    first_line = doc.splitlines()[0].strip() if doc else ""
    return first_line or fallback


def field_targets(*field_names: str) -> TargetExtractor:
    """
    Build a target extractor reading the first non-empty field of the input.

    Values may be a single path string or a list of path strings.
    """

    def _extract(raw: Any) -> Union[str, list[str], None]:
        if not isinstance(raw, dict):
            return None
        for key in field_names:
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                return value
            if isinstance(value, list) and value:
                return [v for v in value if isinstance(v, str)]
        return None

    return _extract


def tool(
    *,
    args_model: Type[ArgsT],
    name: str | None = None,
    description: str | None = None,
    category: InvocationCategory | str = InvocationCategory.OTHER,
    concurrent: bool = False,
    targets: TargetExtractor | str | None = None,
    render_doing: bool = True,
    timeout: float | None = None,
    raise_on_error: bool = False,
) -> Callable[[ToolFn], Tool[ArgsT, ReturnT]]:
    """
    Create a Tool from a sync/async function and a Pydantic v2 args model.

    Tool function can be sync or async and should use one of:
      def/async def fn(args: ArgsModel) -> Any
      def/async def fn(args: ArgsModel, ctx: ToolContext) -> Any
      def/async def fn(ctx: ToolContext, args: ArgsModel) -> Any

    Scheduling metadata:
      - category: read / write / edit / other
      - concurrent: may run alongside other "other" tools
      - targets: callable extracting target path(s) from the raw input, or
        the name of the input field holding them
      - render_doing: False skips the "doing" message for fast tools

    raise_on_error:
      - False (default): Tool.call returns ToolResult(success=False) on failure
      - True: raises ToolExecutionError/ToolTimeoutError/ToolValidationError
    """

    extractor = field_targets(targets) if isinstance(targets, str) else targets
    metadata = ToolMetadata(
        category=InvocationCategory(category),
        can_run_concurrently=concurrent,
        extract_targets=extractor,
        render_doing=render_doing,
    )

    def decorator(fn: ToolFn) -> Tool[ArgsT, ReturnT]:
        tool_name = name or getattr(fn, "__name__", "tool")
        tool_desc = description or _default_description(fn, tool_name)

        schema = args_model.model_json_schema()
        spec = ToolSpec(name=tool_name, description=tool_desc, parameters_schema=schema)

        return Tool(
            spec=spec,
            fn=fn,
            args_model=args_model,
            metadata=metadata,
            default_timeout=timeout,
            raise_on_error=raise_on_error,
        )

    return decorator
