"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Tool-name validation and best-effort normalization.

Models occasionally return names such as "Read File" or "bashTool" for a tool
registered as `read_file` or `bash`. Names that fail the strict charset check
are cleaned and mapped through a static alias table; misses are reported as a
normal unknown-tool outcome by the caller.
"""

from __future__ import annotations

import re
from typing import Iterable

from ..logging import get_logger

logger = get_logger(name=__name__)

_VALID_NAME = re.compile(r"^[a-zA-Z0-9_-]+$")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")

# Keys are lowercase cleaned spellings; values are registered tool names.
TOOL_NAME_ALIASES: dict[str, str] = {
    # bash
    "bash": "bash",
    "bashtool": "bash",
    "bash_tool": "bash",
    "shell": "bash",
    # read_file
    "read_file": "read_file",
    "readfile": "read_file",
    "readfiletool": "read_file",
    "read_file_tool": "read_file",
    # write_file
    "write_file": "write_file",
    "writefile": "write_file",
    "writefiletool": "write_file",
    "write_file_tool": "write_file",
    # edit_file
    "edit_file": "edit_file",
    "editfile": "edit_file",
    "editfiletool": "edit_file",
    "edit_file_tool": "edit_file",
    # glob
    "glob": "glob",
    "globtool": "glob",
    "glob_tool": "glob",
    # code_search
    "code_search": "code_search",
    "codesearch": "code_search",
    "codesearchtool": "code_search",
    "code_search_tool": "code_search",
    "grep": "code_search",
    "greptool": "code_search",
    # list_files
    "list_files": "list_files",
    "listfiles": "list_files",
    "listfilestool": "list_files",
    "list_files_tool": "list_files",
    # call_agent
    "call_agent": "call_agent",
    "callagent": "call_agent",
    "callagenttool": "call_agent",
    "call_agent_tool": "call_agent",
    # todo_write
    "todo_write": "todo_write",
    "todowrite": "todo_write",
    "todowritetool": "todo_write",
    "todo_write_tool": "todo_write",
    # web_search
    "web_search": "web_search",
    "websearch": "web_search",
    "websearchtool": "web_search",
    "web_search_tool": "web_search",
    # web_fetch
    "web_fetch": "web_fetch",
    "webfetch": "web_fetch",
    "webfetchtool": "web_fetch",
    "web_fetch_tool": "web_fetch",
    # ask_user_questions
    "ask_user_questions": "ask_user_questions",
    "askuserquestions": "ask_user_questions",
    "askuserquestionstool": "ask_user_questions",
    # exit_plan_mode
    "exit_plan_mode": "exit_plan_mode",
    "exitplanmode": "exit_plan_mode",
    "exitplanmodetool": "exit_plan_mode",
    # get_skill
    "get_skill": "get_skill",
    "getskill": "get_skill",
    "getskilltool": "get_skill",
}


def is_valid_tool_name(name: str) -> bool:
    """Return True when `name` matches the provider-safe pattern [a-zA-Z0-9_-]+."""
    return bool(_VALID_NAME.match(name))


def clean_tool_name(name: str) -> str:
    """Strip every character outside [a-zA-Z0-9_-]."""
    return _INVALID_CHARS.sub("", name)


def normalize_tool_name(
    name: str,
    known_names: Iterable[str] | None = None,
    *,
    log: bool = True,
) -> str | None:
    """
    Map `name` onto a known tool name.

    Resolution order:
      1) alias table (case-insensitive, after cleaning)
      2) cleaned name containing "__" (MCP server-prefixed tools)
      3) cleaned name matching one of `known_names` (case-insensitive)

    Returns `None` when no mapping exists. Pass `log=False` for lookups that
    must not repeat the diagnostics.
    """
    cleaned = clean_tool_name(name)
    if log and cleaned != name:
        logger.warning("tool_name_cleaned", original=name, cleaned=cleaned)

    if not cleaned:
        if log:
            logger.error("tool_name_unmappable", original=name, cleaned=cleaned)
        return None

    alias = TOOL_NAME_ALIASES.get(cleaned.lower())
    if alias is not None:
        if log:
            logger.info("tool_name_normalized", original=name, normalized=alias, via="alias")
        return alias

    if "__" in cleaned:
        if log:
            logger.info("tool_name_normalized", original=name, normalized=cleaned, via="mcp")
        return cleaned

    if known_names is not None:
        lowered = cleaned.lower()
        for known in known_names:
            if known == cleaned or known.lower() == lowered:
                if log:
                    logger.info("tool_name_normalized", original=name, normalized=known, via="registry")
                return known

    if log:
        logger.error("tool_name_unmappable", original=name, cleaned=cleaned)
    return None


def canonical_tool_name(name: str) -> str:
    """
    Quiet alias-table lookup used for classification.

    Returns the aliased name, or `name` unchanged when no alias exists.
    """
    return TOOL_NAME_ALIASES.get(clean_tool_name(name).lower(), name)


def is_agent_dispatch_name(name: str, agent_tool_names: Iterable[str]) -> bool:
    """True when `name` (raw or aliased) is one of the sub-agent dispatch tools."""
    names = set(agent_tool_names)
    return name in names or canonical_tool_name(name) in names
