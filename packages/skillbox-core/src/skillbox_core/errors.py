from __future__ import annotations


class SkillboxError(Exception):
    """Base exception for all Skillbox errors."""


# ── Config Errors ────────────────────────────────────────────────────

class ConfigError(SkillboxError):
    """Invalid or missing configuration."""


# ── Tool Call Errors ─────────────────────────────────────────────────

class ToolCallError(SkillboxError):
    """A tool call named an unknown tool or carried bad arguments."""


# ── Skill Errors ─────────────────────────────────────────────────────

class SkillError(SkillboxError):
    """Base for skill-related errors."""


class ManifestError(SkillError):
    """SKILL.md metadata could not be extracted."""


class NoMetadataError(ManifestError):
    """SKILL.md does not open with a front matter block."""


class MalformedMetadataError(ManifestError):
    """Front matter is not valid YAML, not a mapping, or lacks required keys."""


class SkillLoadError(SkillError):
    """A skill directory could not be loaded."""


class SkillNotFoundError(SkillError):
    """Skill not found in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Skill not found: {name}")
        self.name = name


class ConfinementError(SkillError):
    """A path resolved outside of its skill directory."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Attempted to access file outside of skill directory: {path}"
        )
        self.path = path


class SkillFileNotFoundError(SkillError):
    """A file or script does not exist inside the skill directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found in skill: {path}")
        self.path = path


# ── Script Errors ────────────────────────────────────────────────────

class ScriptLaunchError(SkillError):
    """The script process could not be spawned."""


class ScriptFailureError(SkillError):
    """A script exited with a nonzero code or was killed by a signal."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        signal: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.signal = signal
        self.stderr = stderr


class ScriptApprovalDeniedError(SkillError):
    """The user did not approve running a script."""

    def __init__(self, message: str = "The user declined to run this script.") -> None:
        super().__init__(message)
