"""Tool adapters: the registry-backed operations exposed to an agent runtime.

Three commands form a closed set (:class:`ActivateSkill`,
:class:`LoadSkillFile`, :class:`RunSkillScript`).  :class:`SkillTools`
executes them against a :class:`~skillbox_skills.SkillRegistry` and
always answers with a :class:`ToolResult`; skill-level failures never
escape as exceptions.

``run_skill_script`` is the only command with side effects.  It is
gated on an approval callback supplied by the host and is refused when
no callback is configured, so scripts never run unattended.
"""
from __future__ import annotations

import os
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from skillbox_core.errors import (
    ScriptApprovalDeniedError,
    SkillError,
    SkillNotFoundError,
    ToolCallError,
)
from skillbox_core.logging import get_logger

from skillbox_tools.prompts import (
    ACTIVATE_SKILL,
    LOAD_SKILL_FILE,
    RUN_SKILL_SCRIPT,
    TOOL_SPECS,
    ToolSpec,
    make_system_prompt,
)

if TYPE_CHECKING:
    from skillbox_skills.registry import SkillRegistry
    from skillbox_skills.skill import Skill

logger = get_logger("tools.adapters")

ToolStatus = Literal["success", "error"]


# ── Commands ──────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ActivateSkill:
    skill_name: str


@dataclass(frozen=True, slots=True)
class LoadSkillFile:
    skill_name: str
    file_path: str


@dataclass(frozen=True, slots=True)
class RunSkillScript:
    skill_name: str
    script_path: str
    args: tuple[str, ...] = ()


ToolCall = ActivateSkill | LoadSkillFile | RunSkillScript


def parse_tool_call(name: str, arguments: Mapping[str, Any]) -> ToolCall:
    """Build a command from a tool name and its decoded arguments.

    Raises:
        ToolCallError: For an unknown tool name or missing/mistyped
            arguments.
    """
    if name == ACTIVATE_SKILL:
        return ActivateSkill(skill_name=_require_str(name, arguments, "skill_name"))
    if name == LOAD_SKILL_FILE:
        return LoadSkillFile(
            skill_name=_require_str(name, arguments, "skill_name"),
            file_path=_require_str(name, arguments, "file_path"),
        )
    if name == RUN_SKILL_SCRIPT:
        raw_args = arguments.get("args")
        if raw_args is None:
            raw_args = []
        if not isinstance(raw_args, list) or not all(
            isinstance(a, str) for a in raw_args
        ):
            msg = f"{name}: 'args' must be a list of strings"
            raise ToolCallError(msg)
        return RunSkillScript(
            skill_name=_require_str(name, arguments, "skill_name"),
            script_path=_require_str(name, arguments, "script_path"),
            args=tuple(raw_args),
        )
    msg = f"Unknown tool: {name}"
    raise ToolCallError(msg)


def _require_str(tool: str, arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str):
        msg = f"{tool}: missing required string argument '{key}'"
        raise ToolCallError(msg)
    return value


# ── Results ───────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Tagged outcome of a tool call.

    ``data`` is what the agent reads; ``for_user`` is the short line a
    host shows in its transcript.
    """

    status: ToolStatus
    data: str
    for_user: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(cls, data: str, for_user: str = "") -> ToolResult:
        return cls(status="success", data=data, for_user=for_user)

    @classmethod
    def error(cls, data: str, for_user: str = "") -> ToolResult:
        return cls(status="error", data=data, for_user=for_user or data)

    def to_dict(self) -> dict[str, str]:
        return {"status": self.status, "data": self.data}


# ── Approval ──────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ScriptApprovalRequest:
    """What the user is asked to confirm before a script runs."""

    skill_name: str
    script_path: str
    args: tuple[str, ...] = ()
    command: list[str] = field(default_factory=list)

    @property
    def invocation(self) -> str:
        """``script_path arg1 arg2`` as the agent requested it."""
        return " ".join([self.script_path, *self.args])

    @property
    def summary(self) -> str:
        return f"Run script from skill '{self.skill_name}': {self.invocation}"


ApprovalCallback = Callable[[ScriptApprovalRequest], Awaitable[bool]]


# ── Adapters ──────────────────────────────────────────────────


class SkillTools:
    """Executes skill tool calls against a registry.

    Args:
        registry: The session's skill registry.  It may not have run
            discovery yet; every lookup then reports "not found".
        approve: Async callback asked before every script run.  When
            *None*, every script run is refused.
        cwd: Working directory for scripts; defaults to the process'
            current directory at call time.
    """

    def __init__(
        self,
        registry: SkillRegistry,
        approve: ApprovalCallback | None = None,
        cwd: str | os.PathLike[str] | None = None,
    ) -> None:
        self._registry = registry
        self._approve = approve
        self._cwd = cwd

    @property
    def registry(self) -> SkillRegistry:
        return self._registry

    # ── Schema / prompt ─────────────────────────────────────────

    @staticmethod
    def tool_specs() -> list[ToolSpec]:
        return list(TOOL_SPECS)

    def openai_schemas(self) -> list[dict[str, Any]]:
        return [spec.to_openai() for spec in TOOL_SPECS]

    def system_prompt(self) -> str:
        return make_system_prompt(self._registry)

    # ── Dispatch ────────────────────────────────────────────────

    async def call(self, name: str, arguments: Mapping[str, Any]) -> ToolResult:
        """Parse and execute a tool call by name."""
        try:
            command = parse_tool_call(name, arguments)
        except ToolCallError as exc:
            return ToolResult.error(str(exc))
        return await self.dispatch(command)

    async def dispatch(self, call: ToolCall) -> ToolResult:
        if isinstance(call, ActivateSkill):
            return self.activate(call.skill_name)
        if isinstance(call, LoadSkillFile):
            return self.load_file(call.skill_name, call.file_path)
        if isinstance(call, RunSkillScript):
            return await self.run_script(call.skill_name, call.script_path, call.args)
        msg = f"Unsupported tool call: {call!r}"
        raise TypeError(msg)

    # ── Operations ──────────────────────────────────────────────

    def activate(self, skill_name: str) -> ToolResult:
        """Return the full SKILL.md of *skill_name* for the agent to follow."""
        try:
            skill = self._lookup(skill_name)
            content = _as_text(skill.read_manifest_content())
        except SkillError as exc:
            return ToolResult.error(str(exc))

        logger.info("Activated skill: %s", skill.name)
        return ToolResult.success(content, f"Activated skill: {skill.name}")

    def load_file(self, skill_name: str, file_path: str) -> ToolResult:
        """Return a file from inside the skill directory."""
        try:
            skill = self._lookup(skill_name)
            content = _as_text(skill.read_file(file_path))
        except SkillError as exc:
            logger.info("load_skill_file %s/%s refused: %s", skill_name, file_path, exc)
            return ToolResult.error(str(exc))

        return ToolResult.success(
            content,
            f"Loaded skill file successfully: {skill_name}/{file_path}",
        )

    async def run_script(
        self,
        skill_name: str,
        script_path: str,
        args: Sequence[str] = (),
        *,
        approve: ApprovalCallback | None = None,
    ) -> ToolResult:
        """Run a skill script after the user approves it.

        The script path is checked for confinement before approval is
        requested, so the user is never asked about a path that could
        not run anyway.  *approve* overrides the instance callback for
        this call only (e.g. a per-request MCP elicitation).
        """
        args = tuple(args)
        invocation = " ".join([script_path, *args])

        try:
            skill = self._lookup(skill_name)
            command = skill.build_command(script_path, args)
        except SkillError as exc:
            return self._script_error(invocation, str(exc))

        request = ScriptApprovalRequest(
            skill_name=skill.name,
            script_path=script_path,
            args=args,
            command=command,
        )
        try:
            if not await self._ask_approval(request, approve or self._approve):
                raise ScriptApprovalDeniedError
            result = await skill.run_script(script_path, args, cwd=self._cwd)
        except SkillError as exc:
            return self._script_error(invocation, str(exc))

        if result.ok:
            return ToolResult.success(
                result.stdout,
                f"Run skill script successfully: {invocation}",
            )
        return self._script_error(invocation, result.failure_text)

    # ── Helpers ─────────────────────────────────────────────────

    def _lookup(self, skill_name: str) -> Skill:
        skill = self._registry.get(skill_name)
        if skill is None:
            raise SkillNotFoundError(skill_name)
        return skill

    @staticmethod
    async def _ask_approval(
        request: ScriptApprovalRequest, approve: ApprovalCallback | None
    ) -> bool:
        if approve is None:
            logger.warning(
                "No approval handler configured; refusing %s", request.summary
            )
            return False
        try:
            approved = bool(await approve(request))
        except Exception:
            logger.warning(
                "Approval handler failed; refusing %s", request.summary,
                exc_info=True,
            )
            return False
        logger.info(
            "Script %s: %s", "approved" if approved else "declined", request.summary
        )
        return approved

    @staticmethod
    def _script_error(invocation: str, message: str) -> ToolResult:
        return ToolResult.error(
            message,
            f"Failed to run skill script: {invocation}. Error: {message}",
        )


def _as_text(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")
