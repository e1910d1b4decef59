"""Tool schemas and the progressive-disclosure system prompt."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from skillbox_skills.skill import SKILL_DIR_PLACEHOLDER

if TYPE_CHECKING:
    from collections.abc import Iterable

    from skillbox_skills.skill import Skill

ACTIVATE_SKILL = "activate_skill"
LOAD_SKILL_FILE = "load_skill_file"
RUN_SKILL_SCRIPT = "run_skill_script"

# The three tools are exposed to hosts as one collapsible group.
TOOL_GROUP = "agent_skills"


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Declaration of one tool at the agent runtime boundary."""

    name: str
    description: str
    parameters: dict[str, Any]
    requires_approval: bool = False
    allowed_unattended: bool = True
    required: list[str] = field(default_factory=list)

    def to_openai(self) -> dict[str, Any]:
        """Render as a strict OpenAI-style function schema."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": self.parameters,
                    "required": list(self.required),
                },
                "strict": True,
            },
        }


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name=ACTIVATE_SKILL,
        description="Activate an agent skill to load its instructions.",
        parameters={
            "skill_name": {
                "type": "string",
                "description": "The name of the skill to activate.",
            },
        },
        required=["skill_name"],
    ),
    ToolSpec(
        name=LOAD_SKILL_FILE,
        description="Load a file provided by a skill.",
        parameters={
            "skill_name": {
                "type": "string",
                "description": "The name of the skill to load the file from.",
            },
            "file_path": {
                "type": "string",
                "description": (
                    "The path of the file to load, relative to the skill "
                    "directory. Example: 'references/usage.md' or "
                    "'assets/template.html'."
                ),
            },
        },
        required=["skill_name", "file_path"],
    ),
    ToolSpec(
        name=RUN_SKILL_SCRIPT,
        description=(
            "Run a script provided by a skill. The script will be executed "
            "in user's current working directory. Use placeholder "
            f"'{SKILL_DIR_PLACEHOLDER}' in arguments to refer to the skill "
            "directory."
        ),
        parameters={
            "skill_name": {
                "type": "string",
                "description": "The name of the skill to run the script from.",
            },
            "script_path": {
                "type": "string",
                "description": (
                    "The path of the script to run, relative to the skill "
                    "directory. Example: 'scripts/generate_report.sh'."
                ),
            },
            "args": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Arguments to pass to the script. Placeholder "
                    f"'{SKILL_DIR_PLACEHOLDER}' will be replaced with the "
                    'skill directory path. E.g: ["--template", '
                    f'"{SKILL_DIR_PLACEHOLDER}/assets/template.html"].'
                ),
            },
        },
        required=["skill_name", "script_path"],
        requires_approval=True,
        allowed_unattended=False,
    ),
)


_SYSTEM_PROMPT = """\
## Agent Skills
You can use **Agent Skills** to acquire domain knowledge and capabilities to accomplish specific user tasks.

A skill contains detailed instructions about how to perform a specific kind of tasks. It may also contain a set of reference documents that can be explicitly loaded on demand, and scripts and resource files that can help you accomplish the tasks.

### When to use skills?
* The user explicitly requests to use a skill.
* The user task requires specific domain knowledge or capabilities that can be better handled by a skill.
* The execution of a skill's workflow delegates subtasks to another skill.

### How to use skills?
Agent Skills follow a **Progressive Disclosure** pattern: you are given names and descriptions of all available skills, and you can **activate** a skill to load its instructions, then optionally load its reference documents and resources as needed.

You must follow the steps below when you need to use a skill:
1. Determine which skill is most appropriate for the user task based on the skill descriptions.
2. Use `{activate}` tool to activate the chosen skill, and you will be presented with the skill instructions.
3. Strictly follow the skill instructions to accomplish the user task.
4. *Only if needed*, use `{load}` tool to load reference documents or resource files, use `{run}` tool to execute scripts provided by the skill.

### Key points
* You must strictly follow the instructions provided by the activated skill.
* All files mentioned in the skill instructions DO NOT EXIST in your current working directory, so you MUST NOT access them using generic file access tools, no matter what the instructions say.
* You can only access skill files via `{load}` tools.
* You can only run skill scripts via `{run}` tools.
* You should give concise and clear process updates to the user on each step of the skill instructions.

### Example
1. User requests to generate an analytical report, and a skill named `report-generator` contains instructions on how to generate the report according to its description.
2. You use `{activate}` tool to activate `report-generator` skill, and read its instructions.
3. You follow the instructions to gather and analyze data.
4. The instructions suggest reading `references/usage.md` for more details, so you use `{load}` tool to load that file.
5. The instructions require running a script `scripts/generate_report.sh` with a specific template, so you use `{run}` tool to execute that script with the required arguments.
6. You revisit the skill instructions to ensure all steps are followed, and present the final result to the user.

### What skills are available?
{skills}"""


def format_skill_list(skills: Iterable[Skill]) -> str:
    """One bullet per skill: ``* `name`: description``."""
    return "\n\n".join(
        f"* `{skill.name}`: {skill.description}" for skill in skills
    )


def make_system_prompt(skills: Iterable[Skill]) -> str:
    """Render the system prompt advertising *skills* to the agent."""
    listing = format_skill_list(skills) or "(no skills available)"
    return _SYSTEM_PROMPT.format(
        activate=ACTIVATE_SKILL,
        load=LOAD_SKILL_FILE,
        run=RUN_SKILL_SCRIPT,
        skills=listing,
    )
