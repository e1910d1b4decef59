"""Skill lint: advisory checks against the Agent Skills naming conventions."""
from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skillbox_skills.skill import Skill

_NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_NAME_MAX_LENGTH = 64
_DESCRIPTION_MAX_LENGTH = 1024


class SkillValidator:
    """Reports convention problems in a loaded skill.

    The registry accepts any skill with a non-empty name and
    description; these checks only feed ``skillbox skill validate``.
    """

    def validate(self, skill: Skill) -> list[str]:
        """Return a list of warning messages.

        An empty list means the skill follows the conventions.
        """
        warnings: list[str] = []

        if len(skill.name) > _NAME_MAX_LENGTH:
            warnings.append(
                f"Skill name exceeds {_NAME_MAX_LENGTH} characters: "
                f"'{skill.name}' ({len(skill.name)} chars)."
            )
        if not _NAME_PATTERN.match(skill.name):
            warnings.append(
                f"Skill name should be lowercase alphanumeric with hyphens: "
                f"'{skill.name}'."
            )
        if skill.root_path.name != skill.name:
            warnings.append(
                f"Skill directory '{skill.root_path.name}' does not match "
                f"skill name '{skill.name}'."
            )

        if len(skill.description) > _DESCRIPTION_MAX_LENGTH:
            warnings.append(
                f"Skill description exceeds {_DESCRIPTION_MAX_LENGTH} characters "
                f"({len(skill.description)} chars)."
            )

        return warnings
