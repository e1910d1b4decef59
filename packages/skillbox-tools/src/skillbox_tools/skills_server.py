"""MCP tool server exposing a skill registry to MCP clients."""
from __future__ import annotations

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from skillbox_skills.types import DiscoveryReport

from skillbox_tools.adapters import ScriptApprovalRequest, SkillTools, ToolResult
from skillbox_tools.prompts import (
    ACTIVATE_SKILL,
    LOAD_SKILL_FILE,
    RUN_SKILL_SCRIPT,
    TOOL_GROUP,
    TOOL_SPECS,
)

_DESCRIPTIONS = {spec.name: spec.description for spec in TOOL_SPECS}


def _unwrap(result: ToolResult) -> str:
    """Return the data of a successful result; raise ToolError otherwise."""
    if not result.ok:
        raise ToolError(result.data)
    return result.data


def create_skills_server(tools: SkillTools) -> FastMCP:
    """Create an MCP server for the skills in ``tools.registry``.

    The system prompt (skill listing and usage rules) is published as
    the server instructions and is regenerated after every discovery
    pass.  ``run_skill_script`` asks the connected client for a yes/no
    confirmation through MCP elicitation on every call; clients that
    cannot elicit never get a script run.
    """
    server = FastMCP("skillbox-skills", instructions=tools.system_prompt())

    def refresh_instructions(report: DiscoveryReport) -> None:
        server.instructions = tools.system_prompt()

    tools.registry.add_listener(refresh_instructions)

    @server.tool(
        name=ACTIVATE_SKILL,
        description=_DESCRIPTIONS[ACTIVATE_SKILL],
        tags={TOOL_GROUP},
        annotations={"readOnlyHint": True, "openWorldHint": False},
    )
    async def activate_skill(skill_name: str) -> str:
        return _unwrap(tools.activate(skill_name))

    @server.tool(
        name=LOAD_SKILL_FILE,
        description=_DESCRIPTIONS[LOAD_SKILL_FILE],
        tags={TOOL_GROUP},
        annotations={"readOnlyHint": True, "openWorldHint": False},
    )
    async def load_skill_file(skill_name: str, file_path: str) -> str:
        return _unwrap(tools.load_file(skill_name, file_path))

    @server.tool(
        name=RUN_SKILL_SCRIPT,
        description=_DESCRIPTIONS[RUN_SKILL_SCRIPT],
        tags={TOOL_GROUP},
        annotations={
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def run_skill_script(
        skill_name: str,
        script_path: str,
        ctx: Context,
        args: list[str] | None = None,
    ) -> str:
        async def approve(request: ScriptApprovalRequest) -> bool:
            answer = await ctx.elicit(request.summary, response_type=bool)
            return answer.action == "accept" and bool(answer.data)

        result = await tools.run_script(
            skill_name, script_path, args or [], approve=approve
        )
        return _unwrap(result)

    @server.tool(annotations={"readOnlyHint": True, "openWorldHint": False})
    async def list_skills() -> str:
        """List all available skills with their names and descriptions."""
        skills = list(tools.registry)
        if not skills:
            return "No skills discovered."

        lines: list[str] = [f"Found {len(skills)} skill(s):\n"]
        for skill in skills:
            lines.append(f"- **{skill.name}**")
            lines.append(f"  {skill.description}")
            lines.append("")
        return "\n".join(lines)

    return server
