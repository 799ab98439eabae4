"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Sub-agent definitions, registry and dispatch tool.
"""

from .dispatch import (
    CALL_AGENT_TOOL_NAME,
    CANCELLATION_ARG,
    INVOCATION_ID_ARG,
    REPORT_MESSAGE_ARG,
    CallAgentArgs,
    build_call_agent_tool,
)
from .registry import InMemoryAgentRegistry
from .types import (
    AgentDefinition,
    AgentDispatchRequest,
    AgentRegistry,
    ReportMessage,
    SubAgentRunner,
)

__all__ = [
    "AgentDefinition",
    "AgentDispatchRequest",
    "AgentRegistry",
    "SubAgentRunner",
    "ReportMessage",
    "InMemoryAgentRegistry",
    "CallAgentArgs",
    "build_call_agent_tool",
    "CALL_AGENT_TOOL_NAME",
    "INVOCATION_ID_ARG",
    "CANCELLATION_ARG",
    "REPORT_MESSAGE_ARG",
]
