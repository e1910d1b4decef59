"""SKILL.md parser: extracts identity metadata from YAML front matter."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml
from skillbox_core.errors import MalformedMetadataError, NoMetadataError

from skillbox_skills.types import SkillMetadata

if TYPE_CHECKING:
    from pathlib import Path

_FENCE = "---"
_REQUIRED_FIELDS = ("name", "description")


def parse_manifest(
    content: bytes | str, source: Path | str | None = None
) -> SkillMetadata:
    """Parse the raw content of a SKILL.md document into SkillMetadata.

    The document must open with a front matter block: a ``---`` line,
    YAML key/value lines, and a closing ``---`` line.  Whatever follows
    the closing fence is narrative instructions and is not part of the
    metadata.

    Args:
        content: Full manifest document, as bytes or text.
        source: Optional origin used only in error messages.

    Returns:
        The parsed SkillMetadata.

    Raises:
        NoMetadataError: If the document has no front matter block.
        MalformedMetadataError: If the front matter is not valid YAML,
            is not a mapping, or lacks a non-empty string ``name`` or
            ``description``.
    """
    where = f" ({source})" if source is not None else ""
    text = _decode(content, where)

    split = split_front_matter(text)
    if split is None:
        msg = f"SKILL.md has no YAML front matter{where}"
        raise NoMetadataError(msg)

    meta = _parse_yaml(split[0], where)

    values: dict[str, str] = {}
    for key in _REQUIRED_FIELDS:
        value = meta.get(key)
        if not isinstance(value, str) or not value.strip():
            msg = f"SKILL.md missing required field '{key}'{where}"
            raise MalformedMetadataError(msg)
        values[key] = value.strip()

    extra = {k: v for k, v in meta.items() if k not in _REQUIRED_FIELDS}
    return SkillMetadata(
        name=values["name"],
        description=values["description"],
        extra=extra,
    )


def split_front_matter(text: str) -> tuple[str, str] | None:
    """Split text into (front matter, body), or None if there is none.

    The opening fence must be the very first line of the document.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _FENCE:
        return None

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == _FENCE:
            header = "".join(lines[1:idx])
            body = "".join(lines[idx + 1 :])
            return header, body
    return None


def _decode(content: bytes | str, where: str) -> str:
    if isinstance(content, str):
        return content.removeprefix("\ufeff")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        msg = f"SKILL.md is not valid UTF-8{where}: {exc}"
        raise MalformedMetadataError(msg) from exc


def _parse_yaml(front_matter: str, where: str) -> dict[str, Any]:
    """Parse the YAML front matter string using safe_load.

    Raises:
        MalformedMetadataError: If the YAML is malformed or not a mapping.
    """
    try:
        result = yaml.safe_load(front_matter)
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML front matter{where}: {exc}"
        raise MalformedMetadataError(msg) from exc

    if not isinstance(result, dict):
        msg = f"YAML front matter must be a mapping, got {type(result).__name__}{where}"
        raise MalformedMetadataError(msg)

    return {str(k): v for k, v in result.items()}
