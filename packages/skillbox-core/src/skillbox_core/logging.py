from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from skillbox_core.config import LoggingConfig

_ROOT_LOGGER = "skillbox"
_TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "ts": record.created,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **({"exc": self.formatException(record.exc_info)} if record.exc_info else {}),
        })


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the root skillbox logger.

    Idempotent: once a handler is installed only the level is updated,
    so repeated calls from the CLI and the MCP server do not stack
    handlers.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if logger.handlers:
        return logger

    # stderr only: stdout carries the MCP stdio transport.
    handler = logging.StreamHandler(stream or sys.stderr)
    if json_output:
        handler.setFormatter(_JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))

    logger.addHandler(handler)
    return logger


def setup_logging_from_config(config: LoggingConfig) -> logging.Logger:
    return setup_logging(config.level, json_output=config.json)


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the skillbox namespace."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
