"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Dependency analysis: conflict detection, tool and agent analyzers, routing.
"""

from .agent_analyzer import AgentDependencyAnalyzer
from .conflicts import (
    collect_targets,
    normalize_target,
    partition_by_conflicts,
    paths_conflict,
    targets_conflict,
)
from .router import DependencyAnalyzer, analyze_dependencies, is_agent_execution_plan
from .tool_analyzer import ToolDependencyAnalyzer

__all__ = [
    "normalize_target",
    "paths_conflict",
    "targets_conflict",
    "partition_by_conflicts",
    "collect_targets",
    "ToolDependencyAnalyzer",
    "AgentDependencyAnalyzer",
    "DependencyAnalyzer",
    "analyze_dependencies",
    "is_agent_execution_plan",
]
