"""Tests for running skill scripts."""
from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import pytest
from skillbox_core.errors import (
    ConfinementError,
    ScriptFailureError,
    ScriptLaunchError,
    SkillFileNotFoundError,
)
from skillbox_skills.skill import Skill
from skillbox_skills.types import ScriptResult, SkillMetadata

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="shell scripts require a POSIX system"
)

_META = SkillMetadata(name="foo", description="d")


@pytest.fixture
def skill(tmp_path: Path, write_skill, write_script) -> Skill:
    root = write_skill(tmp_path / "skills" / "tools")
    write_script(root / "scripts" / "echo.sh", 'echo "$@"\n')
    write_script(root / "scripts" / "fail.sh", "echo boom >&2\nexit 2\n")
    write_script(root / "scripts" / "kill.sh", "kill -9 $$\n")
    write_script(root / "scripts" / "pwd.sh", "pwd\n")
    write_script(root / "scripts" / "stdin.sh", "cat\necho done\n")
    (root / "scripts" / "not-exec.sh").write_text("echo hi\n")
    return Skill.load(root)


class TestExpandArgs:
    def test_placeholder_replaced(self) -> None:
        skill = Skill(root_path=Path("/skills/foo"), metadata=_META)
        assert skill.expand_args(["--out", "${SKILL_DIR}/out.txt"]) == [
            "--out",
            "/skills/foo/out.txt",
        ]

    def test_every_occurrence(self) -> None:
        skill = Skill(root_path=Path("/s"), metadata=_META)
        assert skill.expand_args(["${SKILL_DIR}:${SKILL_DIR}"]) == ["/s:/s"]

    def test_untouched_args(self) -> None:
        skill = Skill(root_path=Path("/s"), metadata=_META)
        assert skill.expand_args(["plain", "$SKILL_DIR"]) == ["plain", "$SKILL_DIR"]


class TestRunScript:
    async def test_success(self, skill: Skill) -> None:
        result = await skill.run_script("scripts/echo.sh", ["hello", "world"])

        assert result.ok
        assert result.exit_code == 0
        assert result.stdout == "hello world\n"
        assert result.message == "Script completed successfully"
        result.raise_for_status()

    async def test_placeholder_in_args(self, skill: Skill) -> None:
        result = await skill.run_script("scripts/echo.sh", ["${SKILL_DIR}/out.txt"])

        assert result.stdout.strip() == f"{skill.root_path}/out.txt"
        assert result.command[-1] == f"{skill.root_path}/out.txt"

    async def test_nonzero_exit(self, skill: Skill) -> None:
        result = await skill.run_script("scripts/fail.sh")

        assert not result.ok
        assert result.exit_code == 2
        assert result.signal is None
        assert result.failure_text == "Script exited with code 2\nSTDERR:\nboom\n"

        with pytest.raises(ScriptFailureError) as excinfo:
            result.raise_for_status()
        assert excinfo.value.exit_code == 2
        assert excinfo.value.stderr == "boom\n"

    async def test_killed_by_signal(self, skill: Skill) -> None:
        result = await skill.run_script("scripts/kill.sh")

        assert not result.ok
        assert result.signal == 9
        assert result.message == "Script terminated with signal 9"

        with pytest.raises(ScriptFailureError) as excinfo:
            result.raise_for_status()
        assert excinfo.value.signal == 9
        assert excinfo.value.exit_code is None

    async def test_runs_in_caller_cwd(self, skill: Skill) -> None:
        result = await skill.run_script("scripts/pwd.sh")
        assert Path(result.stdout.strip()).resolve() == Path(os.getcwd()).resolve()

    async def test_explicit_cwd(self, skill: Skill, tmp_path: Path) -> None:
        workdir = tmp_path / "work"
        workdir.mkdir()
        result = await skill.run_script("scripts/pwd.sh", cwd=workdir)
        assert Path(result.stdout.strip()).resolve() == workdir.resolve()

    async def test_stdin_is_closed(self, skill: Skill) -> None:
        result = await asyncio.wait_for(skill.run_script("scripts/stdin.sh"), 10)
        assert result.stdout == "done\n"

    async def test_escape_rejected(self, skill: Skill, tmp_path: Path) -> None:
        with pytest.raises(ConfinementError):
            await skill.run_script("../../outside.sh")

    async def test_missing_script(self, skill: Skill) -> None:
        with pytest.raises(SkillFileNotFoundError):
            await skill.run_script("scripts/missing.sh")

    async def test_not_executable(self, skill: Skill) -> None:
        with pytest.raises(ScriptLaunchError):
            await skill.run_script("scripts/not-exec.sh")


class TestStartScript:
    async def test_on_complete_receives_result(self, skill: Skill) -> None:
        done: asyncio.Future[ScriptResult] = asyncio.get_running_loop().create_future()

        task = skill.start_script(
            "scripts/echo.sh",
            ["async"],
            on_complete=lambda t: done.set_result(t.result()),
        )
        result = await task

        assert result.stdout == "async\n"
        assert (await done) is result

    async def test_concurrent_runs(self, skill: Skill) -> None:
        tasks = [skill.start_script("scripts/echo.sh", [str(i)]) for i in range(5)]
        results = await asyncio.gather(*tasks)
        assert [r.stdout.strip() for r in results] == [str(i) for i in range(5)]

    async def test_escape_raises_before_spawn(self, skill: Skill) -> None:
        with pytest.raises(ConfinementError):
            skill.start_script("../escape.sh")

