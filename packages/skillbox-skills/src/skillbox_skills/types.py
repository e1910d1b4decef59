"""Skill types for the skillbox-skills package."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from skillbox_core.errors import ScriptFailureError


@dataclass(frozen=True, slots=True)
class SkillMetadata:
    """Identity metadata extracted from a SKILL.md front matter block.

    ``name`` and ``description`` are stripped once at parse time.  Every
    other key is kept in ``extra`` untouched; the registry never
    interprets it.
    """

    name: str
    description: str
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**self.extra, "name": self.name, "description": self.description}


@dataclass(frozen=True, slots=True)
class ScriptResult:
    """Outcome of one skill script run.

    ``signal`` is set when the process was terminated by a signal, in
    which case ``exit_code`` carries the raw (negative) return code.
    """

    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    signal: int | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.signal

    @property
    def message(self) -> str:
        if self.signal:
            return f"Script terminated with signal {self.signal}"
        if self.exit_code != 0:
            return f"Script exited with code {self.exit_code}"
        return "Script completed successfully"

    @property
    def failure_text(self) -> str:
        """The failure message with captured stderr appended."""
        return f"{self.message}\nSTDERR:\n{self.stderr}"

    def raise_for_status(self) -> None:
        if self.ok:
            return
        raise ScriptFailureError(
            self.failure_text,
            exit_code=None if self.signal else self.exit_code,
            signal=self.signal,
            stderr=self.stderr,
        )


@dataclass(frozen=True, slots=True)
class DiscoveryFailure:
    """A candidate directory that could not be loaded as a skill."""

    path: Path
    error: str


@dataclass(slots=True)
class DiscoveryReport:
    """Summary of one discovery pass."""

    loaded: list[str] = field(default_factory=list)
    failures: list[DiscoveryFailure] = field(default_factory=list)
    overridden: list[Path] = field(default_factory=list)
