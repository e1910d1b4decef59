"""Filesystem scan for candidate skill directories."""
from __future__ import annotations

import logging
import os
import subprocess
from collections import deque
from collections.abc import Callable
from pathlib import Path

from skillbox_skills.skill import MANIFEST_FILENAME

logger = logging.getLogger("skillbox.skills.scanner")

SkipPredicate = Callable[[Path], bool]


class GitIgnoreFilter:
    """``should_skip`` predicate backed by ``git check-ignore``.

    Paths outside a git work tree, or any path when ``git`` is not
    installed, are never skipped.  Answers are cached per path for the
    lifetime of the filter, which is one discovery pass.
    """

    def __init__(self, git: str = "git") -> None:
        self._git = git
        self._available = True
        self._cache: dict[Path, bool] = {}

    def __call__(self, path: Path) -> bool:
        if not self._available:
            return False
        cached = self._cache.get(path)
        if cached is not None:
            return cached

        try:
            proc = subprocess.run(
                [self._git, "check-ignore", "-q", "--", path.name],
                cwd=path.parent,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError:
            logger.debug("git unavailable; not applying ignore rules")
            self._available = False
            return False

        # 0: ignored, 1: not ignored, 128: not a repository / error.
        ignored = proc.returncode == 0
        self._cache[path] = ignored
        return ignored


def scan_skill_dirs(
    root: Path,
    *,
    depth: int = 1,
    should_skip: SkipPredicate | None = None,
) -> list[Path]:
    """Return directories under *root* that contain a ``SKILL.md`` file.

    The walk is breadth-first with entries sorted by name, so the
    result order is stable across runs.  ``depth=1`` inspects only the
    direct children of *root*; the root itself is never a candidate.
    Matching directories are still descended into.  Hidden entries and
    symlinked directories are neither returned nor entered, and any
    directory for which *should_skip* is true is pruned with its
    subtree.
    """
    if not root.is_dir():
        logger.debug("Skipping non-existent path: %s", root)
        return []

    found: list[Path] = []
    queue: deque[tuple[Path, int]] = deque([(root, 0)])

    while queue:
        current, level = queue.popleft()
        if level >= depth:
            continue
        try:
            entries = sorted(os.scandir(current), key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Cannot scan %s: %s", current, exc)
            continue

        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue
            child = Path(entry.path)
            if should_skip is not None and should_skip(child):
                logger.debug("Ignoring %s", child)
                continue
            if (child / MANIFEST_FILENAME).is_file():
                found.append(child)
            queue.append((child, level + 1))

    return found
