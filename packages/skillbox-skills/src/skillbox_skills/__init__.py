"""Skillbox Skills: manifest parsing, path-confined skills, discovery, and registry."""
from __future__ import annotations

from skillbox_skills.parser import parse_manifest, split_front_matter
from skillbox_skills.registry import SkillRegistry
from skillbox_skills.scanner import GitIgnoreFilter, scan_skill_dirs
from skillbox_skills.skill import (
    MANIFEST_FILENAME,
    SKILL_DIR_PLACEHOLDER,
    Skill,
    normalize_path,
)
from skillbox_skills.types import (
    DiscoveryFailure,
    DiscoveryReport,
    ScriptResult,
    SkillMetadata,
)
from skillbox_skills.validator import SkillValidator

__all__ = [
    "MANIFEST_FILENAME",
    "SKILL_DIR_PLACEHOLDER",
    "DiscoveryFailure",
    "DiscoveryReport",
    "GitIgnoreFilter",
    "ScriptResult",
    "Skill",
    "SkillMetadata",
    "SkillRegistry",
    "SkillValidator",
    "normalize_path",
    "parse_manifest",
    "scan_skill_dirs",
    "split_front_matter",
]
