"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Tools public API.

This package exposes:
- Core tool types (Tool, ToolSpec, ToolContext, ToolResult, ToolMetadata)
- The @tool decorator
- ToolRegistry (implementation registry + metadata provider)
- Tool-name validation / normalization helpers
"""

from .base import (
    DEFAULT_METADATA,
    TargetExtractor,
    Tool,
    ToolContext,
    ToolFn,
    ToolMetadata,
    ToolResult,
    ToolSpec,
    as_async,
)
from .decorator import field_targets, tool
from .errors import (
    ToolAlreadyRegisteredError,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
    ToolValidationError,
)
from .normalizer import (
    TOOL_NAME_ALIASES,
    canonical_tool_name,
    clean_tool_name,
    is_agent_dispatch_name,
    is_valid_tool_name,
    normalize_tool_name,
)
from .registry import MetadataProvider, ToolRegistry

__all__ = [
    # core
    "Tool",
    "ToolSpec",
    "ToolContext",
    "ToolResult",
    "ToolMetadata",
    "ToolFn",
    "TargetExtractor",
    "DEFAULT_METADATA",
    "as_async",
    # decorators
    "tool",
    "field_targets",
    # registry
    "ToolRegistry",
    "MetadataProvider",
    # names
    "TOOL_NAME_ALIASES",
    "is_valid_tool_name",
    "clean_tool_name",
    "normalize_tool_name",
    "canonical_tool_name",
    "is_agent_dispatch_name",
    # errors
    "ToolError",
    "ToolAlreadyRegisteredError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolTimeoutError",
    "ToolValidationError",
]
