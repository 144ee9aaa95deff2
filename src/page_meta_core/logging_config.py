"""
Log output for processes that host the extraction pipeline.

Library modules only call `logging.getLogger(__name__)`. A host calls `configure_logging()`
once at startup; `LOG_JSON` picks JSON lines over the console renderer and `LOG_LEVEL` sets the
root level. Records emitted inside a pipeline run carry the `target_url` bound by the pipeline.
"""

from __future__ import annotations

import logging
import sys

import structlog

from page_meta_core.config import Settings, load_settings


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]


def configure_logging(
    settings: Settings | None = None,
    *,
    json_output: bool | None = None,
    level: str | None = None,
) -> None:
    """
    Route stdlib and structlog records through one stderr handler.

    Explicit `json_output` / `level` arguments override the values from `settings`.
    """
    settings = settings or load_settings()
    if json_output is None:
        json_output = settings.log_json
    level_name = level or settings.log_level

    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(_level(level_name))
