"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

structlog setup shared by the scheduler modules.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from .config import SchedulerConfig


def configure_logging(level: str = "INFO", *, json: bool = True) -> None:
    """Configure structlog and standard logging for the scheduler."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=numeric_level)
    logging.getLogger().setLevel(numeric_level)

    renderer: Any = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_logging_from_config(config: SchedulerConfig, *, json: bool = True) -> None:
    """Apply `config.log_level` (`TOOLPLAN_LOG_LEVEL` via `SchedulerConfig.from_env`)."""
    configure_logging(config.log_level, json=json)


def get_logger(*, name: str | None = None, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger(name)
    if kwargs:
        return logger.bind(**kwargs)
    return logger
