"""Structured logging for snipe.

structlog renders every event through stdlib handlers, one handler per
configured output. Each output picks its own format (console or JSON) and
level. Every event of one invocation carries the same ``run_id``.

Console handlers go quiet while an interactive prompt owns the terminal
(see ``snipe.core.progress.suppress_console_logs``); file handlers do not.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from snipe.config.models import LoggingConfig, LogOutputConfig

_CONSOLE_DESTINATIONS = frozenset({"stderr", "stdout"})

# =============================================================================
# Run correlation
# =============================================================================


def get_run_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("run_id")


def set_run_id(run_id: str | None = None) -> str:
    """Bind (or generate) the ID shared by all events of this invocation."""
    rid = run_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(run_id=rid)
    return rid


def clear_run_id() -> None:
    structlog.contextvars.unbind_contextvars("run_id")


# =============================================================================
# Handlers
# =============================================================================


def _level(name: str | None, fallback: int = logging.WARNING) -> int:
    if not name:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


class ConsoleSuppressingFilter(logging.Filter):
    """Drop console records while an interactive prompt is live."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from snipe.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _build_handler(
    output: LogOutputConfig,
    level: int,
    shared_processors: list[structlog.types.Processor],
) -> logging.Handler:
    handler: logging.Handler
    stream = None
    if output.destination in _CONSOLE_DESTINATIONS:
        stream = sys.stderr if output.destination == "stderr" else sys.stdout
        handler = logging.StreamHandler(stream)
        handler.addFilter(ConsoleSuppressingFilter())
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream is not None and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    return handler


# =============================================================================
# Configuration
# =============================================================================


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Configure structlog and the root logger. Safe to call repeatedly.

    Args:
        config: Full logging configuration. Takes precedence over the
            simple parameters below.
        json_format: Render JSON on stderr when no config is given.
        level: Root level when no config is given.
    """
    from snipe.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]
    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration (e.g. after the user config is loaded) must apply
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)

    for output in config.outputs:
        output_level = _level(output.level, root_level)
        root.addHandler(_build_handler(output, output_level, shared_processors))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
