"""Tests for the MCP skills server, using an in-memory FastMCP client."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastmcp import Client
from fastmcp.client.elicitation import ElicitResult
from fastmcp.exceptions import ToolError
from skillbox_skills.registry import SkillRegistry
from skillbox_tools.adapters import SkillTools
from skillbox_tools.skills_server import create_skills_server


@pytest.fixture
def tools(tmp_path: Path, write_skill, write_script) -> SkillTools:
    root = write_skill(tmp_path / "skills" / "greeter", description="Greets people")
    (root / "notes.md").write_text("Be polite.\n")
    write_script(root / "greet.sh", 'echo "hi $1"\n')
    write_script(root / "fail.sh", "echo broken >&2\nexit 4\n")

    registry = SkillRegistry(respect_gitignore=False)
    registry.discover([tmp_path / "skills"])
    return SkillTools(registry)


@pytest.fixture
def server(tools: SkillTools):
    return create_skills_server(tools)


async def _accept(message, response_type, params, context):
    return ElicitResult(action="accept", content={"value": True})


def _text(result) -> str:
    return result.content[0].text


class TestSkillsServer:
    async def test_list_tools(self, server) -> None:
        async with Client(server) as client:
            tools = await client.list_tools()

        assert {t.name for t in tools} == {
            "activate_skill",
            "load_skill_file",
            "run_skill_script",
            "list_skills",
        }

    async def test_instructions_list_skills(self, server) -> None:
        assert "* `greeter`: Greets people" in server.instructions

    async def test_activate(self, server) -> None:
        async with Client(server) as client:
            result = await client.call_tool("activate_skill", {"skill_name": "greeter"})

        assert _text(result).startswith("---\nname: greeter")

    async def test_load_file(self, server) -> None:
        async with Client(server) as client:
            result = await client.call_tool(
                "load_skill_file", {"skill_name": "greeter", "file_path": "notes.md"}
            )

        assert _text(result) == "Be polite.\n"

    async def test_load_file_escape(self, server) -> None:
        async with Client(server) as client:
            with pytest.raises(ToolError, match="outside of skill directory"):
                await client.call_tool(
                    "load_skill_file",
                    {"skill_name": "greeter", "file_path": "../../etc/passwd"},
                )

    async def test_unknown_skill(self, server) -> None:
        async with Client(server) as client:
            with pytest.raises(ToolError, match="Skill not found"):
                await client.call_tool("activate_skill", {"skill_name": "nope"})

    async def test_list_skills(self, server) -> None:
        async with Client(server) as client:
            result = await client.call_tool("list_skills", {})

        assert "**greeter**" in _text(result)

    @pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
    async def test_run_script_declined(self, server) -> None:
        async def decline(message, response_type, params, context):
            return ElicitResult(action="decline")

        async with Client(server, elicitation_handler=decline) as client:
            with pytest.raises(ToolError, match="declined"):
                await client.call_tool(
                    "run_skill_script",
                    {"skill_name": "greeter", "script_path": "greet.sh", "args": ["bob"]},
                )

    @pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
    async def test_run_script_without_elicitation(self, server) -> None:
        async with Client(server) as client:
            with pytest.raises(ToolError, match="declined"):
                await client.call_tool(
                    "run_skill_script",
                    {"skill_name": "greeter", "script_path": "greet.sh"},
                )

    @pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
    async def test_run_script_accepted(self, server) -> None:
        async with Client(server, elicitation_handler=_accept) as client:
            result = await client.call_tool(
                "run_skill_script",
                {"skill_name": "greeter", "script_path": "greet.sh", "args": ["bob"]},
            )

        assert _text(result) == "hi bob\n"

    @pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
    async def test_run_script_answered_no(self, server) -> None:
        async def answer_no(message, response_type, params, context):
            return ElicitResult(action="accept", content={"value": False})

        async with Client(server, elicitation_handler=answer_no) as client:
            with pytest.raises(ToolError, match="declined"):
                await client.call_tool(
                    "run_skill_script",
                    {"skill_name": "greeter", "script_path": "greet.sh"},
                )

    @pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
    async def test_run_script_failure_reaches_client(self, server) -> None:
        async with Client(server, elicitation_handler=_accept) as client:
            with pytest.raises(ToolError) as excinfo:
                await client.call_tool(
                    "run_skill_script",
                    {"skill_name": "greeter", "script_path": "fail.sh"},
                )

        message = str(excinfo.value)
        assert "Script exited with code 4" in message
        assert "STDERR:\nbroken" in message

    async def test_instructions_follow_rebuild(
        self, server, tools: SkillTools, tmp_path: Path, write_skill
    ) -> None:
        write_skill(tmp_path / "skills" / "newcomer", description="Arrived later")

        tools.registry.rebuild()

        assert "* `newcomer`: Arrived later" in server.instructions
