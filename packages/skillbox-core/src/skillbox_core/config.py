from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from skillbox_core.errors import ConfigError
from skillbox_core.types import RECURSIVE_SCAN_DEPTH, SearchSpec

logger = logging.getLogger("skillbox.config")


def _load_toml(path: Path) -> dict:
    """Load a TOML file, returning empty dict if missing or unreadable."""
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base (1 level deep for TOML sections)."""
    merged = dict(base)
    for key, val in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(val, dict)
        ):
            merged[key] = {**merged[key], **val}
        else:
            merged[key] = val
    return merged


def _default_search_specs() -> list[SearchSpec]:
    return [
        SearchSpec(Path("./skills")),
        SearchSpec(Path("~/.skillbox/skills")),
    ]


@dataclass(frozen=True, slots=True)
class SkillsConfig:
    paths: list[SearchSpec] = field(default_factory=_default_search_specs)
    respect_gitignore: bool = True
    max_depth: int = RECURSIVE_SCAN_DEPTH


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "INFO"
    json: bool = False


@dataclass(frozen=True, slots=True)
class SkillboxConfig:
    """Top-level configuration, parsed from skillbox.toml."""
    skills: SkillsConfig = field(default_factory=SkillsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_toml(
        cls, path: Path | str = "skillbox.toml"
    ) -> SkillboxConfig:
        path = Path(path)
        raw = _load_toml(path)
        return cls._from_raw(raw)

    @classmethod
    def load(
        cls, project_dir: Path | str | None = None
    ) -> SkillboxConfig:
        """Load config with global → project layering.

        Resolution order (later wins):
        1. Built-in defaults
        2. ~/.skillbox/config.toml (global)
        3. .skillbox/config.toml or skillbox.toml (project)
        """
        global_path = Path.home() / ".skillbox" / "config.toml"

        project_dir = (
            Path.cwd() if project_dir is None else Path(project_dir)
        )

        # Project config: .skillbox/config.toml takes priority
        project_path = project_dir / ".skillbox" / "config.toml"
        if not project_path.exists():
            project_path = project_dir / "skillbox.toml"

        global_raw = _load_toml(global_path)
        project_raw = _load_toml(project_path)
        merged = _deep_merge(global_raw, project_raw)

        return cls._from_raw(merged)

    def with_extra_paths(self, extra: list[SearchSpec]) -> SkillboxConfig:
        """Return a copy whose search paths end with *extra*.

        Later specs win name collisions, so extra paths override
        configured ones.
        """
        if not extra:
            return self
        skills = SkillsConfig(
            paths=[*self.skills.paths, *extra],
            respect_gitignore=self.skills.respect_gitignore,
            max_depth=self.skills.max_depth,
        )
        return SkillboxConfig(skills=skills, logging=self.logging)

    @classmethod
    def _from_raw(cls, raw: dict) -> SkillboxConfig:
        """Build SkillboxConfig from a raw TOML dict."""
        skills_raw = dict(raw.get("skills", {}))
        logging_raw = raw.get("logging", {})

        def _pick(section: dict, dc: type) -> dict:
            fields = dc.__dataclass_fields__
            return {
                k: v for k, v in section.items() if k in fields
            }

        if "paths" in skills_raw:
            paths = skills_raw["paths"]
            if not isinstance(paths, list):
                msg = f"[skills] paths must be a list, got {type(paths).__name__}"
                raise ConfigError(msg)
            skills_raw["paths"] = [SearchSpec.coerce(p) for p in paths]

        max_depth = skills_raw.get("max_depth", RECURSIVE_SCAN_DEPTH)
        if not isinstance(max_depth, int) or max_depth < 1:
            msg = f"[skills] max_depth must be a positive integer, got {max_depth!r}"
            raise ConfigError(msg)

        return cls(
            skills=SkillsConfig(**_pick(skills_raw, SkillsConfig)),
            logging=LoggingConfig(**_pick(logging_raw, LoggingConfig)),
        )
