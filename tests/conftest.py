from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def _manifest(name: str, description: str, body: str = "Instructions.") -> str:
    return textwrap.dedent(f"""\
        ---
        name: {name}
        description: {description}
        ---

        {body}
    """)


@pytest.fixture
def write_skill() -> Callable[..., Path]:
    """Factory writing ``<dir>/SKILL.md`` and returning the skill directory."""

    def _write(
        skill_dir: Path,
        name: str | None = None,
        description: str = "A test skill",
        *,
        content: str | None = None,
    ) -> Path:
        skill_dir.mkdir(parents=True, exist_ok=True)
        if content is None:
            content = _manifest(name or skill_dir.name, description)
        (skill_dir / "SKILL.md").write_text(content, encoding="utf-8")
        return skill_dir

    return _write


@pytest.fixture
def write_script() -> Callable[[Path, str], Path]:
    """Factory writing an executable shell script."""

    def _write(path: Path, body: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\n" + textwrap.dedent(body), encoding="utf-8")
        path.chmod(0o755)
        return path

    return _write
