"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

In-memory agent registry.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..errors import AgentAlreadyRegisteredError
from .types import AgentDefinition


class InMemoryAgentRegistry:
    """Dictionary-backed `AgentRegistry`."""

    def __init__(self, definitions: Optional[Iterable[AgentDefinition]] = None) -> None:
        self._agents: Dict[str, AgentDefinition] = {}
        for definition in definitions or ():
            self.register(definition)

    def register(self, definition: AgentDefinition, *, overwrite: bool = False) -> None:
        if not overwrite and definition.agent_id in self._agents:
            raise AgentAlreadyRegisteredError(
                f"Agent already registered: {definition.agent_id}"
            )
        self._agents[definition.agent_id] = definition

    async def resolve(self, agent_id: str) -> AgentDefinition | None:
        return self._agents.get(agent_id)
