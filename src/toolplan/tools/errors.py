"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module defines custom exceptions for error handling in the tools.
"""

from __future__ import annotations


class ToolError(Exception):
    """Base exception for all tool-related errors."""

    pass


class ToolValidationError(ToolError):
    pass


class ToolAlreadyRegisteredError(ToolError):
    pass


class ToolExecutionError(ToolError):
    pass


class ToolTimeoutError(ToolError):
    pass


class ToolNotFoundError(ToolError):
    pass
