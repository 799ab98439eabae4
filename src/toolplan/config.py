"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Scheduler configuration: concurrency caps, dispatch tool names and input
normalization settings, with environment overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

MAX_PARALLEL_SUBAGENTS = 5
MAX_PARALLEL_TOOLS = 10

DEFAULT_AGENT_TOOL_NAMES: tuple[str, ...] = ("call_agent",)

# Fields that legitimately carry JSON-encoded arrays/objects when a model
# stringifies them. Anything else stays a string even if it looks like JSON.
DEFAULT_JSON_FIELDS: tuple[str, ...] = (
    "edits",
    "targets",
    "env",
    "file_types",
    "files",
    "paths",
    "patterns",
    "todos",
    "questions",
    "headers",
)


def _csv_env(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(key)
    if raw is None:
        return default
    values = tuple(part.strip() for part in raw.split(",") if part.strip())
    return values or default


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    # Concurrency caps
    max_parallel_tools: int = MAX_PARALLEL_TOOLS
    max_parallel_subagents: int = MAX_PARALLEL_SUBAGENTS

    # Invocation names that dispatch to a sub-agent
    agent_tool_names: tuple[str, ...] = DEFAULT_AGENT_TOOL_NAMES

    # Input normalization
    json_fields: tuple[str, ...] = DEFAULT_JSON_FIELDS
    decode_html_entities: bool = True

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_parallel_tools < 1:
            raise ValueError("max_parallel_tools must be >= 1")
        if self.max_parallel_subagents < 1:
            raise ValueError("max_parallel_subagents must be >= 1")

    @staticmethod
    def from_env() -> "SchedulerConfig":
        return SchedulerConfig(
            max_parallel_tools=int(
                os.getenv("TOOLPLAN_MAX_PARALLEL_TOOLS", str(MAX_PARALLEL_TOOLS))
            ),
            max_parallel_subagents=int(
                os.getenv("TOOLPLAN_MAX_PARALLEL_SUBAGENTS", str(MAX_PARALLEL_SUBAGENTS))
            ),
            agent_tool_names=_csv_env("TOOLPLAN_AGENT_TOOL_NAMES", DEFAULT_AGENT_TOOL_NAMES),
            json_fields=_csv_env("TOOLPLAN_JSON_FIELDS", DEFAULT_JSON_FIELDS),
            decode_html_entities=os.getenv("TOOLPLAN_DECODE_HTML_ENTITIES", "1") not in {"0", "false", "no"},
            log_level=os.getenv("TOOLPLAN_LOG_LEVEL", "INFO"),
        )
