"""Tests for the skillbox CLI."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from skillbox_cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command from an empty project with an empty home."""
    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.chdir(project)
    (project / "skillbox.toml").write_text("[skills]\nrespect_gitignore = false\n")


@pytest.fixture
def skills_dir(tmp_path: Path, write_skill, write_script) -> Path:
    base = tmp_path / "project" / "skills"
    root = write_skill(base / "pdf-tools", description="Work with PDF files")
    write_script(root / "scripts" / "hello.sh", 'echo "hello $1"\n')
    write_skill(base / "BadName", name="BadName", description="Breaks conventions")
    return base


class TestSkillList:
    def test_no_skills(self) -> None:
        result = runner.invoke(app, ["skill", "list"])
        assert result.exit_code == 0
        assert "No skills found." in result.output

    def test_lists_skills(self, skills_dir: Path) -> None:
        result = runner.invoke(app, ["skill", "list"])

        assert result.exit_code == 0
        assert "pdf-tools" in result.output
        assert "2 skill(s) found." in result.output

    def test_extra_path(self, tmp_path: Path, write_skill) -> None:
        write_skill(tmp_path / "elsewhere" / "extra-skill")

        result = runner.invoke(
            app, ["skill", "list", "--path", str(tmp_path / "elsewhere")]
        )

        assert "extra-skill" in result.output


class TestSkillInfo:
    def test_info(self, skills_dir: Path) -> None:
        result = runner.invoke(app, ["skill", "info", "pdf-tools"])

        assert result.exit_code == 0
        assert "Work with PDF files" in result.output
        assert "Instructions" in result.output

    def test_unknown(self, skills_dir: Path) -> None:
        result = runner.invoke(app, ["skill", "info", "nope"])

        assert result.exit_code == 1
        assert "Skill not found:" in result.output
        assert "pdf-tools" in result.output


class TestSkillValidate:
    def test_validate_all_reports_warnings(self, skills_dir: Path) -> None:
        result = runner.invoke(app, ["skill", "validate"])

        assert result.exit_code == 0
        assert "lowercase" in result.output
        assert "warning(s)" in result.output

    def test_validate_all_load_failure(self, skills_dir: Path, write_skill) -> None:
        write_skill(skills_dir / "broken", content="no front matter\n")

        result = runner.invoke(app, ["skill", "validate"])

        assert result.exit_code == 1
        assert "failed to load" in result.output

    def test_validate_single(self, skills_dir: Path) -> None:
        result = runner.invoke(app, ["skill", "validate", str(skills_dir / "pdf-tools")])
        assert result.exit_code == 0
        assert "pdf-tools" in result.output

    def test_validate_single_manifest_file(self, skills_dir: Path) -> None:
        result = runner.invoke(
            app, ["skill", "validate", str(skills_dir / "pdf-tools" / "SKILL.md")]
        )
        assert result.exit_code == 0

    def test_validate_single_load_error(self, tmp_path: Path) -> None:
        (tmp_path / "empty").mkdir()
        result = runner.invoke(app, ["skill", "validate", str(tmp_path / "empty")])

        assert result.exit_code == 1
        assert "Load error:" in result.output

    def test_validate_all_passed(self, tmp_path: Path, write_skill) -> None:
        write_skill(tmp_path / "project" / "skills" / "good-skill")
        result = runner.invoke(app, ["skill", "validate"])

        assert result.exit_code == 0
        assert "All 1 skill(s) passed validation." in result.output


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
class TestSkillRun:
    def test_run_confirmed(self, skills_dir: Path) -> None:
        result = runner.invoke(
            app, ["skill", "run", "pdf-tools", "scripts/hello.sh", "there"], input="y\n"
        )

        assert result.exit_code == 0
        assert "hello there" in result.output

    def test_run_yes_flag(self, skills_dir: Path) -> None:
        result = runner.invoke(
            app, ["skill", "run", "--yes", "pdf-tools", "scripts/hello.sh", "x"]
        )
        assert result.exit_code == 0
        assert "hello x" in result.output

    def test_run_declined(self, skills_dir: Path) -> None:
        result = runner.invoke(
            app, ["skill", "run", "pdf-tools", "scripts/hello.sh"], input="n\n"
        )

        assert result.exit_code == 1
        assert "declined" in result.output

    def test_run_escape(self, skills_dir: Path) -> None:
        result = runner.invoke(
            app, ["skill", "run", "--yes", "pdf-tools", "../../skillbox.toml"]
        )

        assert result.exit_code == 1
        assert "outside of skill directory" in result.output


class TestTopLevel:
    def test_prompt(self, skills_dir: Path) -> None:
        result = runner.invoke(app, ["prompt"])

        assert result.exit_code == 0
        assert "* `pdf-tools`: Work with PDF files" in result.output

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert "skillbox 0.1.0" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        (tmp_path / "project" / "skillbox.toml").write_text("[skills]\nmax_depth = -1\n")

        result = runner.invoke(app, ["skill", "list"])

        assert result.exit_code == 1
