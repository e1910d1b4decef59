"""Skill registry: discovery passes and name lookup for one session."""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from skillbox_core.errors import SkillLoadError
from skillbox_core.types import RECURSIVE_SCAN_DEPTH, SearchSpec

from skillbox_skills.scanner import GitIgnoreFilter, SkipPredicate, scan_skill_dirs
from skillbox_skills.skill import Skill, normalize_path
from skillbox_skills.types import DiscoveryFailure, DiscoveryReport

if TYPE_CHECKING:
    from skillbox_core.config import SkillboxConfig

logger = logging.getLogger("skillbox.skills.registry")

_EMPTY: Mapping[str, Skill] = MappingProxyType({})

DiscoveryListener = Callable[[DiscoveryReport], None]


class SkillRegistry:
    """Name → Skill mapping built by scanning search roots.

    The registry starts empty and is filled by :meth:`discover`.  Every
    pass builds a fresh map and swaps it in once complete, so readers
    observe either the previous contents or the new ones.  Passes are
    serialized; lookups never block.

    When two directories declare the same skill name, the one found
    later (by search spec order, then scan order) wins.
    """

    def __init__(
        self,
        *,
        should_skip: SkipPredicate | None = None,
        respect_gitignore: bool = True,
        max_depth: int = RECURSIVE_SCAN_DEPTH,
    ) -> None:
        self._should_skip = should_skip
        self._respect_gitignore = respect_gitignore
        self._max_depth = max_depth
        self._skills: Mapping[str, Skill] | None = None
        self._specs: list[SearchSpec] = []
        self._lock = threading.Lock()
        self._listeners: list[DiscoveryListener] = []

    @classmethod
    def from_config(cls, config: SkillboxConfig) -> SkillRegistry:
        """Build a registry from config and run the first discovery pass."""
        registry = cls(
            respect_gitignore=config.skills.respect_gitignore,
            max_depth=config.skills.max_depth,
        )
        registry.discover(config.skills.paths)
        return registry

    # ── Discovery ───────────────────────────────────────────────────

    def discover(self, search_specs: Iterable[Any]) -> DiscoveryReport:
        """Scan *search_specs* and replace the registry contents.

        Each entry may be a SearchSpec, a path, or a ``{path, recursive}``
        mapping.  Skills that fail to load are logged and reported, never
        raised, so one broken bundle cannot hide the others.

        Returns:
            A DiscoveryReport listing loaded names, failures and
            overridden directories.
        """
        specs = [SearchSpec.coerce(s) for s in search_specs]
        with self._lock:
            skills: dict[str, Skill] = {}
            report = DiscoveryReport()
            should_skip = self._make_skip_predicate()

            for spec in specs:
                root = normalize_path(spec.path)
                logger.info(
                    "Scanning skills in %s (recursive=%s)", root, spec.recursive
                )
                candidates = scan_skill_dirs(
                    root,
                    depth=spec.depth(self._max_depth),
                    should_skip=should_skip,
                )
                logger.debug("Found skill directories: %s", candidates)

                for skill_dir in candidates:
                    try:
                        skill = Skill.load(skill_dir)
                    except SkillLoadError as exc:
                        logger.warning("Failed to load skill %s: %s", skill_dir, exc)
                        report.failures.append(DiscoveryFailure(skill_dir, str(exc)))
                        continue

                    previous = skills.get(skill.name)
                    if previous is not None:
                        logger.info(
                            "Skill '%s' at %s overrides %s",
                            skill.name,
                            skill.root_path,
                            previous.root_path,
                        )
                        report.overridden.append(previous.root_path)
                        # Re-insert so iteration order follows the winner.
                        del skills[skill.name]
                    skills[skill.name] = skill

            report.loaded = list(skills)
            self._specs = specs
            self._skills = MappingProxyType(skills)

        logger.info(
            "Discovered %d skill(s), %d failure(s)",
            len(report.loaded),
            len(report.failures),
        )
        for listener in list(self._listeners):
            listener(report)
        return report

    def add_listener(self, listener: DiscoveryListener) -> None:
        """Call *listener* with the report after every completed pass."""
        self._listeners.append(listener)

    def rebuild(self) -> DiscoveryReport:
        """Re-run discovery with the search specs of the last pass."""
        return self.discover(list(self._specs))

    def _make_skip_predicate(self) -> SkipPredicate | None:
        if self._should_skip is not None:
            return self._should_skip
        if self._respect_gitignore:
            return GitIgnoreFilter()
        return None

    # ── Lookup ──────────────────────────────────────────────────────

    @property
    def discovered(self) -> bool:
        return self._skills is not None

    @property
    def skills(self) -> Mapping[str, Skill]:
        """Read-only view of the current map (empty before discovery)."""
        current = self._skills
        return current if current is not None else _EMPTY

    @property
    def search_specs(self) -> list[SearchSpec]:
        return list(self._specs)

    def get(self, name: str) -> Skill | None:
        """Return the skill called *name*, or None if there is none."""
        return self.skills.get(name)

    def names(self) -> list[str]:
        return list(self.skills)

    def __contains__(self, name: object) -> bool:
        return name in self.skills

    def __iter__(self) -> Iterator[Skill]:
        return iter(list(self.skills.values()))

    def __len__(self) -> int:
        return len(self.skills)
