"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Execution primitives: cancellation, loop state, messages, input normalization.

The executor lives in `toolplan.core.executor`; it depends on the planning
package, which itself imports input normalization from here.
"""

from .cancellation import CancellationToken
from .inputs import coerce_json_fields, decode_html_entities, normalize_input
from .messages import (
    ExecutionMessage,
    MessageKind,
    MessageSink,
    StatusSink,
    deliver,
    notify_status,
)
from .state import LoopMessage, LoopState

__all__ = [
    "CancellationToken",
    "LoopMessage",
    "LoopState",
    "ExecutionMessage",
    "MessageKind",
    "MessageSink",
    "StatusSink",
    "deliver",
    "notify_status",
    "normalize_input",
    "decode_html_entities",
    "coerce_json_fields",
]
