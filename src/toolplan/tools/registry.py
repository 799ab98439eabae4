"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module implements the ToolRegistry.
It stores tools by name and serves two roles for the scheduler:
the implementation registry the executor dispatches through, and the
metadata provider the dependency analyzers classify invocations with.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol

from .base import DEFAULT_METADATA, Tool, ToolMetadata, ToolSpec
from .errors import ToolAlreadyRegisteredError, ToolNotFoundError
from .normalizer import is_valid_tool_name, normalize_tool_name


class MetadataProvider(Protocol):
    """Supplies scheduling metadata per invocation name."""

    def resolve_name(self, name: str, *, log: bool = False) -> str:
        ...

    def get_metadata(self, name: str) -> ToolMetadata:
        ...


class ToolRegistry:
    """
    Stores tools by name.

    Built once at process start and treated as read-only while plans execute.
    Unknown names resolve to conservative default metadata
    (category "other", not concurrent).
    """

    def __init__(
        self,
        tools: Optional[Iterable[Tool[Any, Any]]] = None,
        *,
        metadata_overrides: Optional[Dict[str, ToolMetadata]] = None,
    ) -> None:
        self._tools: Dict[str, Tool[Any, Any]] = {}
        self._metadata_overrides: Dict[str, ToolMetadata] = dict(metadata_overrides or {})
        if tools:
            self.register_many(tools)

    # ''''''''''''''''''''''''''''''''''''''
    # Registration
    # ''''''''''''''''''''''''''''''''''''''

    def register(self, tool: Tool[Any, Any], *, overwrite: bool = False) -> None:
        name = tool.spec.name
        if not overwrite and name in self._tools:
            raise ToolAlreadyRegisteredError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def register_many(self, tools: Iterable[Tool[Any, Any]], *, overwrite: bool = False) -> None:
        for t in tools:
            self.register(t, overwrite=overwrite)

    def unregister(self, name: str) -> None:
        self._tools.pop(name, None)

    def set_metadata(self, name: str, metadata: ToolMetadata) -> None:
        """Override scheduling metadata for `name` (registered or not)."""
        self._metadata_overrides[name] = metadata

    # ''''''''''''''''''''''''''''''''''''''
    # Lookup
    # ''''''''''''''''''''''''''''''''''''''

    def get(self, name: str) -> Tool[Any, Any]:
        try:
            return self._tools[name]
        except KeyError as e:
            raise ToolNotFoundError(f"Unknown tool: {name}") from e

    def lookup(self, name: str) -> Tool[Any, Any] | None:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def has(self, name: str) -> bool:
        return name in self._tools

    def specs(self) -> List[ToolSpec]:
        return [t.spec for t in self._tools.values()]

    def resolve_name(self, name: str, *, log: bool = False) -> str:
        """
        Map a model-supplied name onto the registered name.

        Registered names pass through untouched. Anything else goes through
        `normalize_tool_name` against the registered names; unmappable names
        come back unchanged. Analyzers and the executor both resolve through
        here so an invocation is classified under the tool that will run it.
        """
        if is_valid_tool_name(name) and name in self._tools:
            return name
        normalized = normalize_tool_name(name, self._tools.keys(), log=log)
        return normalized if normalized is not None else name

    # ''''''''''''''''''''''''''''''''''''''
    # Metadata provider
    # ''''''''''''''''''''''''''''''''''''''

    def get_metadata(self, name: str) -> ToolMetadata:
        """
        Resolve scheduling metadata for an invocation name.

        Precedence: explicit override, registered tool, then the same two
        under the resolved name (see `resolve_name`), then the conservative
        default.
        """
        for candidate in (name, self.resolve_name(name)):
            override = self._metadata_overrides.get(candidate)
            if override is not None:
                return override
            tool = self._tools.get(candidate)
            if tool is not None:
                return tool.metadata
        return DEFAULT_METADATA
