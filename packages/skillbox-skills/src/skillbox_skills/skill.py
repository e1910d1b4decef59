"""A loaded skill bundle with path-confined file and script access."""
from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from skillbox_core.errors import (
    ConfinementError,
    ManifestError,
    ScriptLaunchError,
    SkillFileNotFoundError,
    SkillLoadError,
)
from skillbox_core.logging import get_logger

from skillbox_skills.parser import parse_manifest
from skillbox_skills.types import ScriptResult, SkillMetadata

logger = get_logger("skills.skill")

MANIFEST_FILENAME = "SKILL.md"
SKILL_DIR_PLACEHOLDER = "${SKILL_DIR}"

ScriptCallback = Callable[["asyncio.Task[ScriptResult]"], None]


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Expand ``~`` and make *path* absolute and lexically normalized.

    Symlinks are not resolved: confinement is decided on the path as
    written, never on where a link points.
    """
    return Path(os.path.abspath(os.path.expanduser(os.fspath(path))))


@dataclass(frozen=True, slots=True)
class Skill:
    """A validated skill bundle rooted at ``root_path``.

    Every file or script access goes through :meth:`resolve`, which
    refuses any path that normalizes outside the skill directory.
    Instances are never mutated after construction, so they can be
    shared freely between concurrent script runs.
    """

    root_path: Path
    metadata: SkillMetadata

    def __post_init__(self) -> None:
        object.__setattr__(self, "root_path", normalize_path(self.root_path))

    @classmethod
    def load(cls, root_path: str | os.PathLike[str]) -> Skill:
        """Load the skill whose ``SKILL.md`` lives in *root_path*.

        Raises:
            SkillLoadError: If the manifest is missing, unreadable, or
                has no valid front matter.
        """
        root = normalize_path(root_path)
        manifest = root / MANIFEST_FILENAME
        if not manifest.is_file():
            msg = f"{MANIFEST_FILENAME} not found: {manifest}"
            raise SkillLoadError(msg)

        try:
            content = manifest.read_bytes()
        except OSError as exc:
            msg = f"Cannot read {manifest}: {exc}"
            raise SkillLoadError(msg) from exc

        try:
            metadata = parse_manifest(content, source=manifest)
        except ManifestError as exc:
            msg = f"Failed to parse {MANIFEST_FILENAME} front matter at {root}: {exc}"
            raise SkillLoadError(msg) from exc

        return cls(root_path=root, metadata=metadata)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def description(self) -> str:
        return self.metadata.description

    # ── Confinement ─────────────────────────────────────────────────

    def resolve(self, relative_path: str) -> Path:
        """Resolve *relative_path* against the skill root.

        Raises:
            ConfinementError: If the normalized result is neither the
                skill root nor inside it.  No filesystem access happens
                before this check.
        """
        if "\x00" in relative_path:
            raise ConfinementError(relative_path)
        candidate = Path(os.path.normpath(os.path.join(self.root_path, relative_path)))
        if not candidate.is_relative_to(self.root_path):
            raise ConfinementError(relative_path)
        return candidate

    def read_file(self, relative_path: str) -> bytes:
        """Read a regular file inside the skill directory.

        Raises:
            ConfinementError: If the path escapes the skill directory.
            SkillFileNotFoundError: If the path is not a regular file.
        """
        path = self.resolve(relative_path)
        if not path.is_file():
            raise SkillFileNotFoundError(relative_path)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise SkillFileNotFoundError(relative_path) from exc

    def read_manifest_content(self) -> bytes:
        """Return the whole raw SKILL.md, instructions included."""
        return self.read_file(MANIFEST_FILENAME)

    # ── Scripts ─────────────────────────────────────────────────────

    def expand_args(self, args: Sequence[str]) -> list[str]:
        """Replace every ``${SKILL_DIR}`` in *args* with the skill root.

        Expanded arguments are handed to the script as plain strings and
        are not checked against the skill boundary.
        """
        root = str(self.root_path)
        return [arg.replace(SKILL_DIR_PLACEHOLDER, root) for arg in args]

    def build_command(self, script_path: str, args: Sequence[str] = ()) -> list[str]:
        """Return the argv for running *script_path* with *args*.

        Raises:
            ConfinementError: If the script path escapes the skill.
            SkillFileNotFoundError: If the script is not a regular file.
        """
        script = self.resolve(script_path)
        if not script.is_file():
            raise SkillFileNotFoundError(script_path)
        return [str(script), *self.expand_args(args)]

    async def run_script(
        self,
        script_path: str,
        args: Sequence[str] = (),
        *,
        cwd: str | os.PathLike[str] | None = None,
    ) -> ScriptResult:
        """Run a script from this skill and wait for it to finish.

        The script runs in *cwd*, which defaults to the caller's working
        directory and never to the skill directory.  A nonzero exit is
        reported in the returned ScriptResult, not raised.

        Raises:
            ConfinementError: Before spawning, if the script escapes.
            SkillFileNotFoundError: Before spawning, if it is missing.
            ScriptLaunchError: If the process could not be started.
        """
        command = self.build_command(script_path, args)
        return await _execute(command, cwd)

    def start_script(
        self,
        script_path: str,
        args: Sequence[str] = (),
        *,
        cwd: str | os.PathLike[str] | None = None,
        on_complete: ScriptCallback | None = None,
    ) -> asyncio.Task[ScriptResult]:
        """Launch a script and return its task without waiting.

        Path checks run synchronously, so a confinement violation raises
        here rather than inside the task.  *on_complete* is attached as
        a done-callback and therefore runs on the owning event loop.
        Must be called from within a running loop.
        """
        command = self.build_command(script_path, args)
        task = asyncio.get_running_loop().create_task(_execute(command, cwd))
        if on_complete is not None:
            task.add_done_callback(on_complete)
        return task


async def _execute(
    command: list[str], cwd: str | os.PathLike[str] | None
) -> ScriptResult:
    logger.info("Running skill script: %s", command)
    t0 = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as exc:
        msg = f"Failed to launch script {command[0]}: {exc}"
        raise ScriptLaunchError(msg) from exc

    stdout_bytes, stderr_bytes = await proc.communicate()
    duration_ms = (time.monotonic() - t0) * 1000
    code = proc.returncode or 0

    # asyncio reports signal termination as a negative return code.
    signal = -code if code < 0 else None
    logger.info("Skill script exited with code %d: %s", code, command)

    return ScriptResult(
        command=command,
        exit_code=code,
        stdout=stdout_bytes.decode("utf-8", errors="replace"),
        stderr=stderr_bytes.decode("utf-8", errors="replace"),
        signal=signal,
        duration_ms=duration_ms,
    )
