"""Skillbox Core: shared types, config, errors, and logging."""
from __future__ import annotations

from skillbox_core.config import LoggingConfig, SkillboxConfig, SkillsConfig
from skillbox_core.errors import (
    ConfigError,
    ConfinementError,
    MalformedMetadataError,
    ManifestError,
    NoMetadataError,
    ScriptApprovalDeniedError,
    ScriptFailureError,
    ScriptLaunchError,
    SkillboxError,
    SkillError,
    SkillFileNotFoundError,
    SkillLoadError,
    SkillNotFoundError,
    ToolCallError,
)
from skillbox_core.logging import get_logger, setup_logging, setup_logging_from_config
from skillbox_core.types import RECURSIVE_SCAN_DEPTH, SearchSpec

__version__ = "0.1.0"

__all__ = [
    "RECURSIVE_SCAN_DEPTH",
    # Errors
    "ConfigError",
    "ConfinementError",
    # Config
    "LoggingConfig",
    "MalformedMetadataError",
    "ManifestError",
    "NoMetadataError",
    "ScriptApprovalDeniedError",
    "ScriptFailureError",
    "ScriptLaunchError",
    # Types
    "SearchSpec",
    "SkillError",
    "SkillFileNotFoundError",
    "SkillLoadError",
    "SkillNotFoundError",
    "SkillboxConfig",
    "SkillboxError",
    "SkillsConfig",
    "ToolCallError",
    # Version
    "__version__",
    # Logging
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
]
