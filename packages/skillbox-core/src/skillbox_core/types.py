from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from skillbox_core.errors import ConfigError

# Depth used for recursive scans; deep enough to be effectively unbounded
# while still terminating on pathological trees.
RECURSIVE_SCAN_DEPTH = 99


# ── Discovery Types ──────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class SearchSpec:
    """One discovery root: a directory plus whether to scan it recursively."""
    path: Path
    recursive: bool = False

    def depth(self, max_depth: int = RECURSIVE_SCAN_DEPTH) -> int:
        return max_depth if self.recursive else 1

    @classmethod
    def coerce(cls, value: Any) -> SearchSpec:
        """Build a SearchSpec from config input.

        Accepts a ``SearchSpec``, a bare path (non-recursive), or a
        mapping with ``path`` (alias ``dir``) and optional ``recursive``.
        """
        if isinstance(value, SearchSpec):
            return value
        if isinstance(value, (str, Path)):
            return cls(path=Path(value))
        if isinstance(value, Mapping):
            raw_path = value.get("path", value.get("dir"))
            if not isinstance(raw_path, (str, Path)) or not str(raw_path):
                msg = f"Search path entry is missing 'path': {dict(value)!r}"
                raise ConfigError(msg)
            recursive = value.get("recursive", False)
            if not isinstance(recursive, bool):
                msg = f"'recursive' must be a boolean in search path entry: {dict(value)!r}"
                raise ConfigError(msg)
            return cls(path=Path(raw_path), recursive=recursive)
        msg = f"Invalid search path entry: {value!r}"
        raise ConfigError(msg)
