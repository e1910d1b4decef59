"""Skillbox Tools: agent-facing skill tools, schemas, and the MCP server."""
from __future__ import annotations

from skillbox_tools.adapters import (
    ActivateSkill,
    ApprovalCallback,
    LoadSkillFile,
    RunSkillScript,
    ScriptApprovalRequest,
    SkillTools,
    ToolCall,
    ToolResult,
    parse_tool_call,
)
from skillbox_tools.prompts import (
    ACTIVATE_SKILL,
    LOAD_SKILL_FILE,
    RUN_SKILL_SCRIPT,
    TOOL_GROUP,
    TOOL_SPECS,
    ToolSpec,
    make_system_prompt,
)

__all__ = [
    "ACTIVATE_SKILL",
    "LOAD_SKILL_FILE",
    "RUN_SKILL_SCRIPT",
    "TOOL_GROUP",
    "TOOL_SPECS",
    "ActivateSkill",
    "ApprovalCallback",
    "LoadSkillFile",
    "RunSkillScript",
    "ScriptApprovalRequest",
    "SkillTools",
    "ToolCall",
    "ToolResult",
    "ToolSpec",
    "make_system_prompt",
    "parse_tool_call",
]
